"""Compute the canonical topic set of the completion tree.

Completion functions are generated per topic (``force`` -> ``force:org`` ->
``force:org:open``), so every command id and alias must have each of its
ancestors present as a topic. Host-declared topics cover the canonical tree
only partially, and aliases are free-form, so missing ancestors are
synthesized.

The computation is two pure passes and one sort:

1. :func:`declared_parent_topics` -- keep the declared topics that are
   themselves parents of another declared topic, with sanitized descriptions.
2. :func:`implied_topics` -- every proper ancestor of every id that is not
   already present, with a generated ``"<path words> commands"`` description.

:func:`synthesize_topics` unions both (declared topics win) and sorts the
result by name.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from compspec.exceptions import MalformedAliasError, TopicCollisionError
from compspec.generator.sanitizer import sanitize
from compspec.models import DeclaredTopic, Topic

logger = logging.getLogger(__name__)

SEPARATOR = ":"


def default_description(name: str) -> str:
    """Describe a topic that has no host description (``"force org commands"``)."""
    return f"{name.replace(SEPARATOR, ' ')} commands"


def split_id(command_id: str, strict: bool = False) -> list[str]:
    """Split a colon-delimited id into its non-empty segments.

    Leading, trailing, or doubled separators produce empty segments. They are
    dropped so that no topic with an empty name is ever synthesized.

    Args:
        command_id: A command id or alias such as ``"force:org:open"``.
        strict: Raise instead of dropping empty segments.

    Raises:
        MalformedAliasError: If *strict* is set and the id has empty segments.
    """
    segments = command_id.split(SEPARATOR)
    cleaned = [s for s in segments if s]
    if len(cleaned) != len(segments):
        if strict:
            raise MalformedAliasError(f"Malformed command path {command_id!r}")
        logger.debug("Skipping empty segments in %r", command_id)
    return cleaned


def ancestor_paths(command_id: str, strict: bool = False) -> list[str]:
    """Return every proper ancestor path of *command_id*, shortest first.

    Example::

        >>> ancestor_paths("force:org:open")
        ['force', 'force:org']
    """
    segments = split_id(command_id, strict)
    return [SEPARATOR.join(segments[:depth]) for depth in range(1, len(segments))]


def _unique_declared(declared: Iterable[DeclaredTopic]) -> list[DeclaredTopic]:
    """Collapse duplicate declarations, rejecting ones that disagree."""
    by_name: dict[str, DeclaredTopic] = {}
    for topic in declared:
        existing = by_name.get(topic.name)
        if existing is None:
            by_name[topic.name] = topic
        elif existing.description != topic.description:
            raise TopicCollisionError(
                f"Topic {topic.name!r} is declared twice with different descriptions: "
                f"{existing.description!r} and {topic.description!r}"
            )
    return list(by_name.values())


def declared_parent_topics(
    declared: Sequence[DeclaredTopic], context: Any
) -> list[Topic]:
    """Keep declared topics that have at least one declared sub-topic.

    Leaf topics are dropped; their commands hang directly under the nearest
    retained ancestor.

    Args:
        declared: Topics declared by the host framework.
        context: Template context for description interpolation.

    Returns:
        Retained topics in declaration order, descriptions sanitized or
        generated.

    Raises:
        TopicCollisionError: If a name is declared twice with different
            descriptions.
        InterpolationError: If a description template fails to render.
    """
    topics = _unique_declared(declared)
    names = [t.name for t in topics]
    retained: list[Topic] = []
    for topic in topics:
        prefix = topic.name + SEPARATOR
        if not any(other.startswith(prefix) for other in names):
            continue
        if topic.description:
            description = sanitize(topic.description, context, source=topic.name)
        else:
            description = default_description(topic.name)
        retained.append(Topic(name=topic.name, description=description))
    return retained


def implied_topics(
    command_ids: Iterable[str],
    existing: Iterable[str] = (),
    strict: bool = False,
) -> list[Topic]:
    """Synthesize the ancestor topics implied by *command_ids*.

    Args:
        command_ids: Command ids and aliases whose ancestors must exist.
        existing: Topic names that are already present and must not be
            synthesized again.
        strict: Forwarded to :func:`split_id`.

    Returns:
        New synthetic topics, deduplicated, in first-seen order.
    """
    present = set(existing)
    synthesized: list[Topic] = []
    for command_id in command_ids:
        for path in ancestor_paths(command_id, strict):
            if path in present:
                continue
            present.add(path)
            logger.debug("Synthesized topic %r for %r", path, command_id)
            synthesized.append(
                Topic(name=path, description=default_description(path), synthetic=True)
            )
    return synthesized


def synthesize_topics(
    declared: Sequence[DeclaredTopic],
    command_ids: Iterable[str],
    context: Any,
    strict: bool = False,
) -> list[Topic]:
    """Produce the complete, deduplicated, name-sorted topic list.

    Args:
        declared: Topics declared by the host framework.
        command_ids: Every id and alias that will appear in the spec.
        context: Template context for description interpolation.
        strict: Fail on malformed ids instead of skipping empty segments.

    Returns:
        Declared parent topics plus synthesized ancestors, sorted by name.

    Example::

        >>> [t.name for t in synthesize_topics([], ["force:org:open"], registry)]
        ['force', 'force:org']
    """
    retained = declared_parent_topics(declared, context)
    synthesized = implied_topics(command_ids, (t.name for t in retained), strict)
    return sorted(retained + synthesized, key=lambda t: t.name)
