"""Load a command registry document from a URL, local file, or stdin.

A registry document is the serialized form of the host framework's command
registry: the binary name, declared topics, and the commands of every loaded
plugin. It may be written as JSON or YAML; the format is detected from the
file extension, the HTTP content type, or finally the content itself.

The public function is :func:`load_registry`. It returns a validated
:class:`~compspec.models.Registry` ready for the generator.

Document shape::

    bin: sf
    topics:
      - name: org
        description: Manage orgs
    plugins:
      - name: core
        commands:
          - id: org:list
            summary: List orgs
            aliases: [org:ls]
            flags:
              json: {description: output json}

A document with a top-level ``commands`` list and no ``plugins`` is treated
as a single plugin named ``core``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml
from pydantic import ValidationError

from compspec.exceptions import RegistryError
from compspec.models import Registry


def load_registry(source: str, bin_name: Optional[str] = None) -> Registry:
    """Load a registry from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or ``'-'`` for stdin.
        bin_name: Overrides the document's ``bin`` (required when the
            document has none).

    Returns:
        The validated registry.

    Raises:
        RegistryError: If the source cannot be loaded, parsed, or validated.
    """
    if source == "-":
        raw = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        raw = _load_from_url(source)
    else:
        raw = _load_from_file(source)
    return registry_from_dict(raw, bin_name=bin_name, origin=source)


def registry_from_dict(
    raw: dict[str, Any],
    bin_name: Optional[str] = None,
    origin: str = "<registry>",
) -> Registry:
    """Validate a raw registry mapping.

    Args:
        raw: The parsed document.
        bin_name: Optional override for ``bin``.
        origin: Where the document came from, for error messages.

    Raises:
        RegistryError: If the document does not describe a valid registry.
    """
    data = dict(raw)
    if "commands" in data and "plugins" not in data:
        data["plugins"] = [{"name": "core", "commands": data.pop("commands")}]
    if bin_name is not None:
        data["bin"] = bin_name
    if not data.get("bin"):
        raise RegistryError(
            f"Registry {origin} has no 'bin' field; pass the binary name explicitly"
        )
    try:
        return Registry.model_validate(data)
    except ValidationError as exc:
        raise RegistryError(f"Invalid registry {origin}: {exc}") from exc


def _load_from_stdin() -> dict[str, Any]:
    """Read a registry document from stdin.

    Raises:
        RegistryError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise RegistryError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise RegistryError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a registry document from URL. Supports JSON and YAML responses.

    Raises:
        RegistryError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise RegistryError(
            f"HTTP {exc.response.status_code} fetching registry from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise RegistryError(f"Failed to fetch registry from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a registry document from a local file.

    Raises:
        RegistryError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise RegistryError(f"Registry file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RegistryError(f"Failed to read registry file {path}: {exc}") from exc

    if not content.strip():
        raise RegistryError(f"Registry file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        RegistryError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise RegistryError(
                    f"Registry must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise RegistryError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise RegistryError(
                "Registry must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse registry as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise RegistryError(msg)
