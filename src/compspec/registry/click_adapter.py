"""Introspect a live Click or Typer application into a :class:`Registry`.

Python CLIs built on Click (and Typer, which compiles to Click) already hold
their command registry in memory. This adapter walks that tree:

* every ``click.Group`` below the root becomes a declared topic, described by
  its short help;
* every leaf command becomes a :class:`~compspec.models.Command` whose id is
  the colon-joined path (``db migrate up`` -> ``db:migrate:up``);
* every visible ``click.Option`` with a ``--long`` spelling becomes a flag.
  The first ``-x`` spelling is kept as ``char``; ``is_flag`` options are
  typed ``boolean``, the rest ``option``.

Hidden groups hide everything below them. Click has no alias concept, so
commands from this adapter never carry aliases.
"""

from __future__ import annotations

import importlib
import logging
import re
from typing import Any, Optional

import click
import typer

from compspec.exceptions import RegistryError
from compspec.generator.topics import SEPARATOR
from compspec.models import Command, DeclaredTopic, FlagMeta, Plugin, Registry

logger = logging.getLogger(__name__)

_SHORT_OPT_RE = re.compile(r"^-[^-]$")


def import_app(import_path: str) -> Any:
    """Import ``module:attribute`` and return the attribute.

    Raises:
        RegistryError: If the path is malformed or cannot be imported.
    """
    module_name, sep, attr = import_path.partition(":")
    if not sep or not module_name or not attr:
        raise RegistryError(
            f"Invalid application path {import_path!r}; expected 'module:attribute'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RegistryError(f"Cannot import {module_name!r}: {exc}") from exc

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise RegistryError(f"{module_name!r} has no attribute {attr!r}") from exc
    return target


def to_click_group(app: Any) -> click.Group:
    """Return the ``click.Group`` behind a Typer app or Click group.

    Raises:
        RegistryError: If *app* is neither, or compiles to a single command.
    """
    if isinstance(app, typer.Typer):
        app = typer.main.get_command(app)
    if not isinstance(app, click.Group):
        raise RegistryError(
            f"Expected a click.Group or typer.Typer with sub-commands, got {type(app).__name__}"
        )
    return app


def registry_from_click(
    app: Any,
    bin_name: Optional[str] = None,
    plugin_name: str = "core",
) -> Registry:
    """Build a registry from a Click group or Typer application.

    Args:
        app: A ``click.Group`` or ``typer.Typer``.
        bin_name: Binary name for the root node; defaults to the group name.
        plugin_name: Name of the single plugin holding the commands.

    Returns:
        A registry with one plugin, one topic per sub-group, and one command
        per leaf, in the order the group lists them.

    Raises:
        RegistryError: If *app* is not a group, or no binary name can be found.
    """
    group = to_click_group(app)
    name = bin_name or group.name
    if not name:
        raise RegistryError("Cannot determine the binary name; pass it explicitly")

    commands: list[Command] = []
    topics: list[DeclaredTopic] = []
    ctx = click.Context(group, info_name=name)
    _walk(group, ctx, [], False, commands, topics)
    logger.debug(
        "Introspected %s: %d commands, %d topics", name, len(commands), len(topics)
    )
    return Registry(
        bin=name,
        plugins=[Plugin(name=plugin_name, commands=commands)],
        topics=topics,
    )


def registry_from_import_path(import_path: str, bin_name: Optional[str] = None) -> Registry:
    """Import ``module:attribute`` and introspect it.

    The plugin is named after the module.
    """
    app = import_app(import_path)
    module_name = import_path.partition(":")[0]
    return registry_from_click(app, bin_name=bin_name, plugin_name=module_name)


def _walk(
    group: click.Group,
    ctx: click.Context,
    prefix: list[str],
    hidden: bool,
    commands: list[Command],
    topics: list[DeclaredTopic],
) -> None:
    for name in group.list_commands(ctx):
        cmd = group.get_command(ctx, name)
        if cmd is None:
            continue
        path = prefix + [name]
        cmd_id = SEPARATOR.join(path)
        is_hidden = hidden or bool(getattr(cmd, "hidden", False))
        if isinstance(cmd, click.Group):
            topics.append(DeclaredTopic(name=cmd_id, description=_help_text(cmd)))
            sub_ctx = click.Context(cmd, info_name=name, parent=ctx)
            _walk(cmd, sub_ctx, path, is_hidden, commands, topics)
        else:
            commands.append(
                Command(
                    id=cmd_id,
                    summary=_help_text(cmd),
                    flags=_flags(cmd),
                    hidden=is_hidden,
                )
            )


def _help_text(cmd: click.Command) -> Optional[str]:
    """Short help if set, else the stripped full help, else ``None``."""
    text = cmd.short_help or (cmd.help or "").strip()
    return text or None


def _flags(cmd: click.Command) -> dict[str, FlagMeta]:
    flags: dict[str, FlagMeta] = {}
    for param in cmd.params:
        if not isinstance(param, click.Option) or param.hidden:
            continue
        spellings = list(param.opts) + list(param.secondary_opts)
        # First primary --spelling; secondary --no-x spellings never name a flag.
        long_opts = [o for o in param.opts if o.startswith("--")]
        if not long_opts:
            # Short-only options have no --name spelling to complete.
            continue
        flag_name = long_opts[0][2:]
        short = next((o[1] for o in spellings if _SHORT_OPT_RE.match(o)), None)
        flags[flag_name] = FlagMeta(
            name=flag_name,
            description=param.help,
            char=short,
            type="boolean" if param.is_flag else "option",
        )
    return flags
