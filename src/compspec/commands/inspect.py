"""Inspect commands -- examine what the generator derives from a registry.

Provides the ``compspec inspect`` sub-command group with read-only views of
the intermediate results: the final topic set (declared and synthesized) and
the completion records (command ids and aliases). Both print tables in the
active output format, so ``--json`` yields machine-readable output.
"""

from __future__ import annotations

from typing import Optional

import typer

from compspec.output import print_table


inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("topics")
def inspect_topics(
    source: Optional[str] = typer.Argument(
        None, help="Registry document: file path, URL, or '-' for stdin."
    ),
    app_path: Optional[str] = typer.Option(
        None, "--app", "-a", help="Introspect a Click group or Typer app (module:attr)."
    ),
    bin_name: Optional[str] = typer.Option(
        None, "--bin", "-b", help="Binary name (overrides the registry's bin)."
    ),
    hidden_alias_topics: Optional[bool] = typer.Option(
        None,
        "--hidden-alias-topics/--no-hidden-alias-topics",
        help="Let aliases of hidden commands create intermediate topics.",
    ),
) -> None:
    """List the topic set in the order it is emitted.

    Synthesized topics are marked so gaps in the declared hierarchy are easy
    to spot.

    Example::

        compspec inspect topics registry.yaml
        compspec --json inspect topics --app mytool.cli:app
    """
    from compspec.config import resolve_settings
    from compspec.generator import build_topics
    from compspec.registry import resolve_registry

    settings = resolve_settings(hidden_alias_topics=hidden_alias_topics)
    registry = resolve_registry(source, app_path, bin_name)
    topics = build_topics(registry, settings)

    rows = [
        [t.name, t.description, "yes" if t.synthetic else ""] for t in topics
    ]
    print_table(
        ["Topic", "Description", "Synthetic"],
        rows,
        title=f"{registry.bin} -- Topics ({len(rows)})",
    )


@inspect_app.command("commands")
def inspect_commands(
    source: Optional[str] = typer.Argument(
        None, help="Registry document: file path, URL, or '-' for stdin."
    ),
    app_path: Optional[str] = typer.Option(
        None, "--app", "-a", help="Introspect a Click group or Typer app (module:attr)."
    ),
    bin_name: Optional[str] = typer.Option(
        None, "--bin", "-b", help="Binary name (overrides the registry's bin)."
    ),
) -> None:
    """List every completion record: visible command ids and their aliases.

    Example::

        compspec inspect commands registry.yaml
        compspec inspect commands --bin sf unnamed.json
    """
    from compspec.generator import build_commands
    from compspec.registry import resolve_registry

    registry = resolve_registry(source, app_path, bin_name)
    records = build_commands(registry)

    rows = [
        [r.id, r.alias_of or "", r.summary, " ".join(r.flags)] for r in records
    ]
    print_table(
        ["Id", "Alias Of", "Summary", "Flags"],
        rows,
        title=f"{registry.bin} -- Commands ({len(rows)})",
    )
