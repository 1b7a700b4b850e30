"""Build completion records and the spec tree from a command registry.

This is the core of compspec. It walks every command of every plugin in the
:class:`~compspec.models.Registry` and produces:

* :class:`~compspec.models.CompletionRecord` objects -- one for each visible
  command id and one for each of its aliases, all sharing the command's
  sanitized summary and mapped flags (:func:`build_commands`);
* the topic list that keeps those records connected (:func:`build_topics`);
* the :class:`~compspec.models.SpecNode` tree handed to the serializer
  (:func:`build_spec_tree`), in either the flat or the nested layout.

**Flat layout** mirrors what the completion engine consumes by default: every
command appears directly under the root under its full id, followed by one
node per alias of a visible command.

**Nested layout** hangs commands under topic nodes, one level per id segment.
Missing intermediate groups are created lazily, so a topic whose parent was
dropped still lands at the right depth. Aliases that share the canonical
command's parent become ``aliases`` of that node; aliases elsewhere in the
tree get a node of their own.

Every function takes the registry explicitly and returns new objects; the
registry is never modified and repeated runs produce identical trees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from compspec.generator.flag_mapper import map_flags
from compspec.generator.sanitizer import sanitize
from compspec.generator.serializer import render_spec
from compspec.generator.topics import (
    SEPARATOR,
    default_description,
    split_id,
    synthesize_topics,
)
from compspec.models import (
    Command,
    CompletionRecord,
    GeneratorSettings,
    Registry,
    SpecNode,
    Topic,
    TreeLayout,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Completion records
# ---------------------------------------------------------------------------


def build_commands(registry: Registry) -> list[CompletionRecord]:
    """Expand every visible command into its completion records.

    Hidden commands produce no records. For the rest, the canonical id comes
    first, followed by each alias in declaration order.

    Args:
        registry: The host registry; also the template context for summaries.

    Returns:
        Records in registry order.

    Raises:
        InterpolationError: If a summary template fails to render.
    """
    records: list[CompletionRecord] = []
    for cmd in registry.iter_commands():
        if cmd.hidden:
            logger.debug("Skipping hidden command %r", cmd.id)
            continue
        summary = sanitize(cmd.display_summary, registry, source=cmd.id)
        flags = map_flags(cmd.flags)
        records.append(CompletionRecord(id=cmd.id, summary=summary, flags=dict(flags)))
        for alias in cmd.aliases:
            records.append(
                CompletionRecord(
                    id=alias, summary=summary, flags=dict(flags), alias_of=cmd.id
                )
            )
    return records


def command_ids(registry: Registry, include_hidden_aliases: bool = False) -> list[str]:
    """Return every id whose ancestors must exist as topics.

    These are the ids of :func:`build_commands` records. When
    *include_hidden_aliases* is set, aliases of hidden commands are added too,
    so that their intermediate topics are synthesized even though the
    commands themselves are not completed.
    """
    ids: list[str] = []
    for cmd in registry.iter_commands():
        if not cmd.hidden:
            ids.append(cmd.id)
            ids.extend(cmd.aliases)
        elif include_hidden_aliases:
            ids.extend(cmd.aliases)
    return ids


def build_topics(
    registry: Registry, settings: Optional[GeneratorSettings] = None
) -> list[Topic]:
    """Compute the final, sorted topic set for *registry*.

    Args:
        registry: The host registry.
        settings: Generator settings; ``hidden_alias_topics`` and
            ``strict_aliases`` are honoured.

    Returns:
        Declared parent topics plus every synthesized ancestor, sorted by name.
    """
    settings = settings or GeneratorSettings()
    ids = command_ids(registry, include_hidden_aliases=settings.hidden_alias_topics)
    topics = synthesize_topics(
        registry.topics, ids, registry, strict=settings.strict_aliases
    )
    logger.debug(
        "Topic set for %s: %d topics (%d synthesized)",
        registry.bin,
        len(topics),
        sum(1 for t in topics if t.synthetic),
    )
    return topics


# ---------------------------------------------------------------------------
# Spec tree
# ---------------------------------------------------------------------------


def build_spec_tree(
    root_name: str,
    registry: Registry,
    settings: Optional[GeneratorSettings] = None,
) -> SpecNode:
    """Build the completion tree for the CLI binary *root_name*.

    Args:
        root_name: Name of the root node, normally the binary (``registry.bin``).
        registry: The host registry.
        settings: Generator settings; ``layout`` selects flat or nested.

    Returns:
        A frozen root :class:`~compspec.models.SpecNode`. ``commands`` is
        ``None`` when the registry has no commands.

    Raises:
        InterpolationError: If a summary or topic description fails to render.
        TopicCollisionError: If declared topics conflict.
        MalformedAliasError: If ``strict_aliases`` is set and an id is
            malformed.

    Example::

        tree = build_spec_tree("sf", registry)
        [child.name for child in tree.commands]   # ['org:list', 'org:ls']
    """
    settings = settings or GeneratorSettings()
    # Topic errors are fatal in every layout.
    topics = build_topics(registry, settings)
    if settings.layout == TreeLayout.NESTED:
        children = _nested_children(registry, topics, settings)
    else:
        children = _flat_children(registry)

    logger.info("Built spec tree for %s with %d top-level nodes", root_name, len(children))
    return SpecNode(name=root_name, commands=tuple(children) if children else None)


def spec_command(cmd: Command, registry: Registry, name: Optional[str] = None) -> SpecNode:
    """Convert one command into its spec node.

    Args:
        cmd: The command to convert.
        registry: Template context for the summary.
        name: Node name; defaults to the command id.

    Returns:
        A node with ``description`` (sanitized summary or ``""``),
        ``aliases`` (declared aliases or empty), ``hidden`` and ``flags``
        (``None`` when the command has no flags).
    """
    flags = map_flags(cmd.flags)
    return SpecNode(
        name=name or cmd.id,
        description=sanitize(cmd.display_summary, registry, source=cmd.id),
        aliases=tuple(cmd.aliases),
        hidden=cmd.hidden,
        flags=flags or None,
    )


def _alias_node(alias: str, canonical: SpecNode, name: Optional[str] = None) -> SpecNode:
    """Copy *canonical* under the alias name."""
    return SpecNode(
        name=name or alias,
        description=canonical.description,
        aliases=(),
        hidden=False,
        flags=dict(canonical.flags) if canonical.flags else None,
    )


def _flat_children(registry: Registry) -> list[SpecNode]:
    """Every command by full id, followed by a node per alias of visible commands."""
    children: list[SpecNode] = []
    for cmd in registry.iter_commands():
        node = spec_command(cmd, registry)
        children.append(node)
        if cmd.hidden:
            continue
        for alias in cmd.aliases:
            children.append(_alias_node(alias, node))
    return children


@dataclass
class _Group:
    """Mutable scratch node used while assembling the nested layout."""

    name: str
    description: str
    groups: dict[str, _Group] = field(default_factory=dict)
    commands: list[SpecNode] = field(default_factory=list)

    def freeze(self) -> SpecNode:
        children = [self.groups[key].freeze() for key in sorted(self.groups)]
        children.extend(self.commands)
        return SpecNode(
            name=self.name,
            description=self.description,
            commands=tuple(children) if children else None,
        )


def _ensure_groups(
    root: _Group,
    segments: list[str],
    descriptions: dict[str, str],
) -> _Group:
    """Lazily create a group for every prefix of *segments* and return the deepest."""
    group = root
    for depth in range(1, len(segments) + 1):
        segment = segments[depth - 1]
        if segment not in group.groups:
            path = SEPARATOR.join(segments[:depth])
            group.groups[segment] = _Group(
                name=segment,
                description=descriptions.get(path) or default_description(path),
            )
        group = group.groups[segment]
    return group


def _nested_children(
    registry: Registry, topics: list[Topic], settings: GeneratorSettings
) -> list[SpecNode]:
    """Topic groups (sorted) followed by root-level commands (registry order)."""
    descriptions = {t.name: t.description for t in topics}
    strict = settings.strict_aliases

    root = _Group(name="", description="")
    for topic in topics:
        _ensure_groups(root, split_id(topic.name, strict), descriptions)

    for cmd in registry.iter_commands():
        segments = split_id(cmd.id, strict)
        if not segments:
            continue
        parent = segments[:-1]
        local_aliases: list[str] = []
        foreign_aliases: list[list[str]] = []
        for alias in cmd.aliases:
            alias_segments = split_id(alias, strict)
            if not alias_segments:
                continue
            if alias_segments[:-1] == parent:
                local_aliases.append(alias_segments[-1])
            else:
                foreign_aliases.append(alias_segments)

        node = spec_command(cmd, registry, name=segments[-1])
        node = node.model_copy(update={"aliases": tuple(local_aliases)})
        _ensure_groups(root, parent, descriptions).commands.append(node)

        if cmd.hidden:
            continue
        for alias_segments in foreign_aliases:
            alias_parent = _ensure_groups(root, alias_segments[:-1], descriptions)
            alias_parent.commands.append(
                _alias_node(SEPARATOR.join(alias_segments), node, name=alias_segments[-1])
            )

    frozen = root.freeze()
    return list(frozen.commands or ())


# ---------------------------------------------------------------------------
# One-shot generation
# ---------------------------------------------------------------------------


def generate(registry: Registry, settings: Optional[GeneratorSettings] = None) -> str:
    """Build and serialize the completion spec for *registry*.

    The whole tree is built before anything is serialized, so an error in any
    command aborts the run without partial output.

    Args:
        registry: The host registry.
        settings: Layout, format, and topic policy.

    Returns:
        The serialized document (YAML or JSON text).
    """
    settings = settings or GeneratorSettings()
    tree = build_spec_tree(registry.bin, registry, settings)
    return render_spec(tree, settings.format)
