"""Normalize free-text summaries into single-line, escape-safe strings.

Summaries and topic descriptions come straight from the host framework and
may contain template expressions (``{{ config.bin }}``), characters that the
completion engine treats specially, and trailing paragraphs. The sanitizer
runs three steps, in order:

1. **Interpolate** the text as a Jinja2 template against ``{"config": ...}``.
   Rendering is sandboxed: templates cannot reach private attributes or
   call unsafe functions.
   Undefined names are errors (``StrictUndefined``): a malformed summary must
   abort generation rather than leak into the spec.
2. **Escape** backticks and double quotes with a triple-backslash prefix and
   square brackets with a double-backslash prefix.
3. **Truncate** to the first line.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from jinja2 import StrictUndefined, TemplateError
from jinja2.exceptions import SecurityError
from jinja2.sandbox import SandboxedEnvironment

from compspec.exceptions import InterpolationError

# Matches backticks and double quotes (escaped with three backslashes).
_QUOTE_RE = re.compile(r'(["`])')

# Matches square brackets (escaped with two backslashes).
_BRACKET_RE = re.compile(r"([\[\]])")

_env = SandboxedEnvironment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
)


def interpolate(raw: str, context: Any, source: Optional[str] = None) -> str:
    """Render *raw* as a Jinja2 template with *context* bound to ``config``.

    Args:
        raw: Template text, e.g. ``"Deploy to {{ config.bin }} orgs"``.
        context: Object exposed to the template as ``config`` (usually the
            :class:`~compspec.models.Registry`).
        source: Command id or topic name the text belongs to, used in the
            error message.

    Returns:
        The rendered text.

    Raises:
        InterpolationError: If the template fails to parse or render.
    """
    try:
        return _env.from_string(raw).render(config=context)
    except SecurityError as exc:
        raise InterpolationError(f"unsafe expression in {raw!r}: {exc}", source) from exc
    except TemplateError as exc:
        raise InterpolationError(f"cannot render {raw!r}: {exc}", source) from exc
    except (ArithmeticError, AttributeError, TypeError, ValueError) as exc:
        raise InterpolationError(f"cannot render {raw!r}: {exc}", source) from exc


def escape(text: str) -> str:
    """Escape characters special to the completion spec.

    Double quotes and backticks get three backslashes in front of them;
    square brackets get two. The character classes are disjoint, so the
    substitutions commute.
    """
    text = _QUOTE_RE.sub(r"\\\\\\\1", text)
    return _BRACKET_RE.sub(r"\\\\\1", text)


def first_line(text: str) -> str:
    """Return everything before the first newline."""
    return text.split("\n")[0]


def sanitize(raw: Optional[str], context: Any, source: Optional[str] = None) -> str:
    """Turn a raw summary into the single-line string embedded in the spec.

    Args:
        raw: The host-supplied summary, or ``None``.
        context: Object exposed to templates as ``config``.
        source: Command id or topic name, for error reporting.

    Returns:
        ``""`` for ``None``; otherwise the interpolated, escaped first line.

    Raises:
        InterpolationError: If interpolation fails.

    Example::

        >>> sanitize("line one\\nline two", registry)
        'line one'
    """
    if raw is None:
        return ""
    return first_line(escape(interpolate(raw, context, source)))
