"""Tests for compspec.generator.topics.

Covers:
- Splitting ids and computing ancestor paths (with malformed ids)
- Declared topics: only parents are retained, descriptions sanitized
- Duplicate declarations and collisions
- Synthesis of missing ancestors for ids and aliases
- Sorting and deduplication of the final set
"""

from __future__ import annotations

import logging

import pytest

from compspec.exceptions import InterpolationError, MalformedAliasError, TopicCollisionError
from compspec.generator.topics import (
    ancestor_paths,
    declared_parent_topics,
    default_description,
    implied_topics,
    split_id,
    synthesize_topics,
)
from compspec.models import DeclaredTopic, Registry, Topic


@pytest.fixture
def ctx() -> Registry:
    return Registry(bin="sf")


# ---------------------------------------------------------------------------
# Id helpers
# ---------------------------------------------------------------------------


class TestSplitId:
    def test_simple(self) -> None:
        assert split_id("force:org:open") == ["force", "org", "open"]

    def test_single_segment(self) -> None:
        assert split_id("deploy") == ["deploy"]

    def test_empty_segments_dropped(self) -> None:
        assert split_id(":force::org:") == ["force", "org"]

    def test_empty_segments_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="compspec"):
            split_id("a::b")
        assert "a::b" in caplog.text

    def test_strict_raises(self) -> None:
        with pytest.raises(MalformedAliasError, match="a::b"):
            split_id("a::b", strict=True)

    def test_strict_accepts_well_formed(self) -> None:
        assert split_id("a:b", strict=True) == ["a", "b"]


class TestAncestorPaths:
    def test_deep_id(self) -> None:
        assert ancestor_paths("force:org:open") == ["force", "force:org"]

    def test_single_segment_has_none(self) -> None:
        assert ancestor_paths("deploy") == []

    def test_leading_separator(self) -> None:
        assert ancestor_paths(":org:list") == ["org"]

    def test_empty_id(self) -> None:
        assert ancestor_paths("") == []


def test_default_description() -> None:
    assert default_description("force:org") == "force org commands"


# ---------------------------------------------------------------------------
# Declared topics
# ---------------------------------------------------------------------------


class TestDeclaredParentTopics:
    """Only declared topics with a declared sub-topic are retained."""

    def test_leaf_topics_dropped(self, ctx: Registry) -> None:
        declared = [
            DeclaredTopic(name="org", description="Manage orgs"),
            DeclaredTopic(name="org:create", description="Create orgs"),
        ]
        result = declared_parent_topics(declared, ctx)
        assert [t.name for t in result] == ["org"]
        assert result[0].description == "Manage orgs"
        assert result[0].synthetic is False

    def test_prefix_must_end_at_separator(self, ctx: Registry) -> None:
        declared = [DeclaredTopic(name="org"), DeclaredTopic(name="orgs:list")]
        assert declared_parent_topics(declared, ctx) == []

    def test_missing_description_generated(self, ctx: Registry) -> None:
        declared = [DeclaredTopic(name="org"), DeclaredTopic(name="org:x")]
        assert declared_parent_topics(declared, ctx)[0].description == "org commands"

    def test_description_sanitized(self, ctx: Registry) -> None:
        declared = [
            DeclaredTopic(name="org", description="Manage {{ config.bin }} [orgs]\nMore"),
            DeclaredTopic(name="org:x"),
        ]
        assert declared_parent_topics(declared, ctx)[0].description == (
            "Manage sf \\\\[orgs\\\\]"
        )

    def test_bad_description_names_topic(self, ctx: Registry) -> None:
        declared = [
            DeclaredTopic(name="org", description="{{ config.nope }}"),
            DeclaredTopic(name="org:x"),
        ]
        with pytest.raises(InterpolationError) as exc_info:
            declared_parent_topics(declared, ctx)
        assert exc_info.value.source == "org"

    def test_identical_duplicates_collapse(self, ctx: Registry) -> None:
        declared = [
            DeclaredTopic(name="org", description="Manage orgs"),
            DeclaredTopic(name="org", description="Manage orgs"),
            DeclaredTopic(name="org:x"),
        ]
        assert [t.name for t in declared_parent_topics(declared, ctx)] == ["org"]

    def test_conflicting_duplicates_raise(self, ctx: Registry) -> None:
        declared = [
            DeclaredTopic(name="org", description="Manage orgs"),
            DeclaredTopic(name="org", description="Something else"),
        ]
        with pytest.raises(TopicCollisionError, match="org"):
            declared_parent_topics(declared, ctx)


# ---------------------------------------------------------------------------
# Implied topics
# ---------------------------------------------------------------------------


class TestImpliedTopics:
    def test_synthesizes_all_ancestors(self) -> None:
        result = implied_topics(["force:org:open"])
        assert result == [
            Topic(name="force", description="force commands", synthetic=True),
            Topic(name="force:org", description="force org commands", synthetic=True),
        ]

    def test_existing_not_resynthesized(self) -> None:
        result = implied_topics(["org:list"], existing=["org"])
        assert result == []

    def test_deduplicated_first_seen_order(self) -> None:
        result = implied_topics(["b:x", "a:y", "b:z"])
        assert [t.name for t in result] == ["b", "a"]

    def test_single_segment_ids_imply_nothing(self) -> None:
        assert implied_topics(["deploy", "status"]) == []

    def test_strict_forwarded(self) -> None:
        with pytest.raises(MalformedAliasError):
            implied_topics(["force::open"], strict=True)


# ---------------------------------------------------------------------------
# synthesize_topics
# ---------------------------------------------------------------------------


class TestSynthesizeTopics:
    """The union of declared and implied topics, sorted by name."""

    def test_alias_without_declared_topics(self, ctx: Registry) -> None:
        result = synthesize_topics([], ["force:org:open"], ctx)
        assert [t.name for t in result] == ["force", "force:org"]
        assert "force:org:open" not in [t.name for t in result]

    def test_declared_wins_over_synthesized(self, ctx: Registry) -> None:
        declared = [
            DeclaredTopic(name="org", description="Manage orgs"),
            DeclaredTopic(name="org:create"),
        ]
        result = synthesize_topics(declared, ["org:list", "org:create:scratch"], ctx)
        assert result == [
            Topic(name="org", description="Manage orgs"),
            Topic(name="org:create", description="org create commands", synthetic=True),
        ]

    def test_sorted_by_name(self, ctx: Registry) -> None:
        ids = ["zeta:x", "force:source:legacy", "alpha:y", "force:org:open"]
        names = [t.name for t in synthesize_topics([], ids, ctx)]
        assert names == sorted(names)
        assert len(names) == len(set(names))

    def test_every_ancestor_present(self, ctx: Registry) -> None:
        ids = ["a:b:c:d", "x:y", "a:q"]
        names = {t.name for t in synthesize_topics([], ids, ctx)}
        for command_id in ids:
            for path in ancestor_paths(command_id):
                assert path in names

    def test_empty_inputs(self, ctx: Registry) -> None:
        assert synthesize_topics([], [], ctx) == []
