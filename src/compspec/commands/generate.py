"""Generate command -- write the completion spec for a CLI.

Implements the ``compspec generate`` top-level command: load the registry
(from a document or a live Click/Typer app), resolve generator settings,
build the whole tree, and write it either to stdout or atomically to a file.
Nothing is written unless the entire spec was built successfully.
"""

from __future__ import annotations

from typing import Optional

import typer

from compspec.models import SpecFormat, TreeLayout
from compspec.output import debug, print_data, success


def generate_command(
    source: Optional[str] = typer.Argument(
        None,
        help="Registry document: file path, URL, or '-' for stdin.",
    ),
    app_path: Optional[str] = typer.Option(
        None,
        "--app",
        "-a",
        help="Introspect a Click group or Typer app instead (module:attr).",
    ),
    bin_name: Optional[str] = typer.Option(
        None, "--bin", "-b", help="Binary name for the root node."
    ),
    spec_format: Optional[SpecFormat] = typer.Option(
        None, "--format", "-f", help="Output format (yaml or json)."
    ),
    layout: Optional[TreeLayout] = typer.Option(
        None, "--layout", "-l", help="Tree layout (flat or nested)."
    ),
    hidden_alias_topics: Optional[bool] = typer.Option(
        None,
        "--hidden-alias-topics/--no-hidden-alias-topics",
        help="Let aliases of hidden commands create intermediate topics.",
    ),
    strict_aliases: Optional[bool] = typer.Option(
        None,
        "--strict-aliases/--lenient-aliases",
        help="Fail on ids with empty segments instead of skipping them.",
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the spec to this file."
    ),
) -> None:
    """Generate the completion spec for a CLI.

    Args:
        source: Registry document location.
        app_path: ``module:attr`` of a Click group or Typer app.
        bin_name: Overrides the binary name taken from the registry.
        spec_format: Serialization format.
        layout: Flat (one node per id) or nested (one node per segment).
        hidden_alias_topics: Topic policy for aliases of hidden commands.
        strict_aliases: Treat malformed ids as errors.
        output_file: Destination file; stdout when omitted.

    Example::

        compspec generate registry.yaml -o sf.yaml
        compspec generate --app mytool.cli:app --layout nested
    """
    from compspec.config import resolve_settings
    from compspec.generator import generate, write_spec
    from compspec.registry import resolve_registry

    settings = resolve_settings(
        format=spec_format,
        layout=layout,
        hidden_alias_topics=hidden_alias_topics,
        strict_aliases=strict_aliases,
    )
    registry = resolve_registry(source, app_path, bin_name)
    debug(
        f"Generating {settings.format.value} spec for {registry.bin} "
        f"({settings.layout.value} layout)"
    )

    text = generate(registry, settings)

    if output_file:
        path = write_spec(text, output_file)
        success(f"Completion spec for {registry.bin} written to {path}")
    else:
        print_data(text)
