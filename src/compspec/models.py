"""Canonical Pydantic models shared across all compspec modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Registry models** -- the read-only input supplied by the host CLI framework
(or loaded from a registry document):
    :class:`FlagMeta`, :class:`Command`, :class:`Plugin`,
    :class:`DeclaredTopic`, and :class:`Registry`.

**Generator output models** -- produced by :mod:`compspec.generator`:
    :class:`Topic`, :class:`CompletionRecord`, and :class:`SpecNode`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`SpecFormat`, :class:`TreeLayout`, :class:`GeneratorSettings`,
    :class:`OutputConfig`, and :class:`GlobalConfig`.

All models use Pydantic v2. The registry accepts unknown keys
(``extra="allow"``) so summary templates can reference host-specific fields
through ``config``.
"""

from __future__ import annotations

import enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Registry Models ---


class FlagMeta(BaseModel):
    """Metadata for a single command flag as declared by the host framework.

    Only ``name`` and ``description`` reach the generated spec. ``char``
    (the one-letter shorthand) and ``type`` are carried so that richer
    renderings can be added without guessing at the schema.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    description: Optional[str] = None
    char: Optional[str] = Field(default=None, description="Short form, e.g. 'j' for -j")
    type: Optional[str] = Field(default=None, description="boolean, option, ...")


class Command(BaseModel):
    """A runnable command exposed by a host plugin.

    ``id`` is the canonical colon-delimited path (``org:list``). ``aliases``
    are alternate paths that resolve to the same flags and summary and need
    not follow the canonical hierarchy.

    Flags may be given either as a mapping keyed by flag name or as a list of
    flag objects; both normalise to an ordered ``dict[str, FlagMeta]``. A
    mapping entry without a ``name`` takes its key as the name.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    flags: dict[str, FlagMeta] = Field(default_factory=dict)
    aliases: list[str] = Field(default_factory=list)
    hidden: bool = False

    @field_validator("flags", mode="before")
    @classmethod
    def _normalise_flags(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, list):
            return {
                (item["name"] if isinstance(item, dict) else item.name): item
                for item in value
            }
        if isinstance(value, dict):
            normalised: dict[str, Any] = {}
            for key, item in value.items():
                if isinstance(item, dict) and "name" not in item:
                    item = {**item, "name": key}
                elif item is None:
                    item = {"name": key}
                normalised[key] = item
            return normalised
        return value

    @field_validator("aliases", mode="before")
    @classmethod
    def _none_aliases(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def display_summary(self) -> Optional[str]:
        """The raw text used for completion: ``summary`` if set, else ``description``."""
        return self.summary if self.summary is not None else self.description


class Plugin(BaseModel):
    """A loaded host plugin and the commands it contributes."""

    name: str = "core"
    commands: list[Command] = Field(default_factory=list)


class DeclaredTopic(BaseModel):
    """A topic as declared by the host framework; ``description`` is optional."""

    name: str
    description: Optional[str] = None


class Registry(BaseModel):
    """The host framework's command registry for one CLI binary.

    Passed explicitly to every generator function and never mutated. It is
    also the ``config`` object summary templates render against, so a summary
    of ``"List orgs for {{ config.bin }}"`` interpolates the binary name.

    Example::

        Registry(
            bin="sf",
            plugins=[Plugin(name="org", commands=[Command(id="org:list")])],
            topics=[DeclaredTopic(name="org", description="Manage orgs")],
        )
    """

    model_config = ConfigDict(extra="allow")

    bin: str
    version: Optional[str] = None
    plugins: list[Plugin] = Field(default_factory=list)
    topics: list[DeclaredTopic] = Field(default_factory=list)

    def iter_commands(self) -> Iterator[Command]:
        """Yield every command of every plugin in registry order."""
        for plugin in self.plugins:
            yield from plugin.commands


# --- Generator Output Models ---


class Topic(BaseModel):
    """A grouping node in the completion hierarchy.

    ``synthetic`` is ``True`` when the topic was invented to connect a command
    id or alias to the tree rather than declared by the host.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    synthetic: bool = False


class CompletionRecord(BaseModel):
    """One navigable name: a command id or one of its aliases.

    All records produced from the same command share ``summary`` and
    ``flags`` and differ only in ``id``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str
    flags: dict[str, str] = Field(default_factory=dict)
    alias_of: Optional[str] = None


class SpecNode(BaseModel):
    """A node of the output completion tree.

    Built once per generation run and frozen afterwards. ``None`` means the
    field is absent from the serialized document; the serializer also treats
    empty ``flags``, ``persistent_flags`` and ``commands`` as absent.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: Optional[str] = None
    aliases: Optional[tuple[str, ...]] = None
    hidden: Optional[bool] = None
    flags: Optional[dict[str, str]] = None
    persistent_flags: Optional[dict[str, str]] = Field(
        default=None, alias="persistentFlags"
    )
    commands: Optional[tuple[SpecNode, ...]] = None


# --- Configuration Models ---


class SpecFormat(str, enum.Enum):
    """Serialization formats for the generated spec."""

    YAML = "yaml"
    JSON = "json"


class TreeLayout(str, enum.Enum):
    """How commands are arranged under the root node.

    ``FLAT`` lists every command and alias directly under the root by full id.
    ``NESTED`` hangs commands under topic nodes, one level per id segment.
    """

    FLAT = "flat"
    NESTED = "nested"


class GeneratorSettings(BaseModel):
    """Knobs that change the generated spec.

    See Also:
        :func:`~compspec.config.resolve_settings` for the precedence chain.
    """

    format: SpecFormat = Field(default=SpecFormat.YAML, description="yaml or json")
    layout: TreeLayout = Field(default=TreeLayout.FLAT, description="flat or nested")
    hidden_alias_topics: bool = Field(
        default=False,
        description="Let aliases of hidden commands force synthesis of their topics",
    )
    strict_aliases: bool = Field(
        default=False,
        description="Fail on ids/aliases with empty segments instead of skipping them",
    )


class OutputConfig(BaseModel):
    """Default diagnostic output preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/compspec/config.json``.

    Loaded and saved by :func:`~compspec.config.load_global_config` and
    :func:`~compspec.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags.
    """

    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
