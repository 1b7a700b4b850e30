"""compspec -- Generate carapace-style completion specs from a CLI's command registry.

This package turns the commands a CLI exposes (ids made of ``:``-separated
segments, summaries, flags, aliases) into a single tree document that a
completion engine such as carapace-bin can consume. The registry comes from a
JSON/YAML document or from a live Click group or Typer application.

Typical workflow::

    compspec generate registry.yaml -o mytool.yaml
    compspec generate --app mytool.cli:app --format json

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and settings precedence.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    generator: Sanitizing, topic synthesis, tree building, serialization.
    registry: Registry documents and Click/Typer introspection.
"""

__version__ = "0.1.0"
