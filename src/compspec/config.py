"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for compspec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.compspec/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~compspec.models.GlobalConfig`
  JSON file storing generator and output defaults.
* **Project config** -- an optional ``./compspec.json`` holding generator
  settings for the repository being built.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective :class:`~compspec.models.GeneratorSettings`.

All file writes, including generated specs, use an atomic
temp-file-then-rename strategy (:func:`atomic_write`) so a failed run never
leaves a half-written file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from compspec.exceptions import ConfigError
from compspec.models import GeneratorSettings, GlobalConfig

_APP_NAME = "compspec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "compspec.json"

ENV_FORMAT = "COMPSPEC_FORMAT"
ENV_LAYOUT = "COMPSPEC_LAYOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/compspec/`` (default ``~/.config/compspec/``).
    On macOS/Windows: ``~/.compspec/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/compspec/`` (default ``~/.local/share/compspec/``).
    On macOS/Windows: ``~/.compspec/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and *path* is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~compspec.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./compspec.json``.

    The file holds generator settings, either at top level or under a
    ``generator`` key::

        {"generator": {"layout": "nested", "hidden_alias_topics": true}}

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON, is not an
            object, or has a ``generator`` key that is not an object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected an object")
    if "generator" in data and not isinstance(data["generator"], dict):
        raise ConfigError(
            f"Invalid project config at {path}: 'generator' must be an object"
        )
    return data


# --- Precedence resolution ---


def resolve_settings(**cli_overrides: Any) -> GeneratorSettings:
    """Resolve generator settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (keyword arguments whose value is not ``None``)
        2. Environment variables (``COMPSPEC_FORMAT``, ``COMPSPEC_LAYOUT``)
        3. Project config (``./compspec.json``)
        4. User config (``~/.config/compspec/config.json``)
        5. Defaults

    Args:
        **cli_overrides: Any :class:`~compspec.models.GeneratorSettings`
            field, e.g. ``layout="nested"``.

    Returns:
        The effective settings.

    Raises:
        ConfigError: If a layer holds an invalid value.
    """
    # 5 + 4. Defaults and user config
    merged: dict[str, Any] = load_global_config().generator.model_dump(mode="json")

    # 3. Project config
    project = load_project_config()
    if project is not None:
        section = project.get("generator", project)
        merged.update(
            {k: v for k, v in section.items() if k in GeneratorSettings.model_fields}
        )

    # 2. Environment
    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        merged["format"] = env_format.lower()
    env_layout = os.environ.get(ENV_LAYOUT)
    if env_layout:
        merged["layout"] = env_layout.lower()

    # 1. CLI flags
    merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return GeneratorSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid generator settings: {exc}") from exc
