"""Config commands -- view and modify global configuration.

Provides the ``compspec config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~compspec.models.GlobalConfig`). Settings here are the lowest layer
of the precedence chain resolved by
:func:`~compspec.config.resolve_settings`.
"""

from __future__ import annotations

import json

import typer
from pydantic import ValidationError

from compspec.output import error, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration as JSON.

    Example::

        compspec config show
    """
    from compspec.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    print_data(json.dumps(config.model_dump(mode="json"), indent=2))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'generator.layout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. Booleans accept ``true``, ``1`` and
    ``yes``. The updated config is validated before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid or validation
            fails.

    Example::

        compspec config set generator.layout nested
        compspec config set generator.hidden_alias_topics true
    """
    from compspec.config import load_global_config, save_global_config
    from compspec.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    if isinstance(target[final_key], bool):
        coerced: object = value.lower() in ("true", "1", "yes")
    else:
        coerced = value
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        compspec config reset --force
    """
    from compspec.config import save_global_config
    from compspec.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
