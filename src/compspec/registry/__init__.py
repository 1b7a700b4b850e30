"""Registry sources -- where the command registry comes from.

The generator never reaches into a host framework on its own; it is handed a
:class:`~compspec.models.Registry`. This sub-package produces one from:

* a registry document (JSON or YAML; file, URL, or stdin) via
  :func:`~compspec.registry.loader.load_registry`;
* a live Click group or Typer application via
  :func:`~compspec.registry.click_adapter.registry_from_click` or
  :func:`~compspec.registry.click_adapter.registry_from_import_path`.

Typical usage::

    from compspec.registry import load_registry

    registry = load_registry("registry.yaml")
"""

from __future__ import annotations

from typing import Optional

from compspec.exceptions import InvalidUsageError
from compspec.models import Registry
from compspec.registry.click_adapter import (
    registry_from_click,
    registry_from_import_path,
)
from compspec.registry.loader import load_registry, registry_from_dict

__all__ = [
    "load_registry",
    "registry_from_click",
    "registry_from_dict",
    "registry_from_import_path",
    "resolve_registry",
]


def resolve_registry(
    source: Optional[str] = None,
    app_path: Optional[str] = None,
    bin_name: Optional[str] = None,
) -> Registry:
    """Load the registry from exactly one of a document *source* or an *app_path*.

    Raises:
        InvalidUsageError: If both or neither are given.
        RegistryError: If loading fails.
    """
    if (source is None) == (app_path is None):
        raise InvalidUsageError(
            "Pass either a registry document (file, URL, '-') or --app module:attr"
        )
    if app_path is not None:
        return registry_from_import_path(app_path, bin_name=bin_name)
    return load_registry(source, bin_name=bin_name)
