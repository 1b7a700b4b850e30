"""Terminal output for compspec, split between stdout and stderr.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- data only: the generated spec document and the ``inspect``
  tables. This is what build scripts redirect into files.
* **stderr** -- diagnostics: status lines, errors, debug traces and log
  records.
* **Colour** -- Rich styling when stdout is a terminal, plain text when
  piped or when ``NO_COLOR``, ``TERM=dumb`` or ``--no-color`` is in effect.

Registry text (summaries, topic descriptions) routinely contains escaped
square brackets, so everything handed to Rich is wrapped in
:class:`~rich.text.Text` and never parsed as console markup.

:class:`OutputManager` is created once in :func:`~compspec.app.main_callback`
and installed with :func:`set_output`; commands call the module-level
functions (:func:`print_data`, :func:`print_table`, :func:`info`, ...).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How stdout data is rendered.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` everywhere else. ``--json`` and ``--plain`` force a format.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Route data to stdout and diagnostics to stderr.

    Args:
        format: Table format for stdout. ``AUTO`` resolves from TTY detection.
        no_color: Disable colour on both streams.
        quiet: Drop informational and success lines. Errors always print.
        verbose: Print debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Write *text* to stdout verbatim, ending with exactly one newline.

        Spec documents already end with a newline; nothing is appended then.
        """
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        sys.stdout.flush()

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows under *headers* in the active format.

        JSON mode prints an array of objects keyed by header, plain mode
        prints tab-separated lines, and rich mode prints a
        :class:`~rich.table.Table` titled *title*.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        self._stdout.print(table)

    # --- stderr ---

    def info(self, message: str) -> None:
        """Status line. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnose(message)

    def success(self, message: str) -> None:
        """Green status line. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnose(message, style="green")

    def error(self, message: str) -> None:
        """Error line prefixed with ``Error:``. Never suppressed."""
        self._diagnose(message, prefix="Error:", prefix_style="bold red")

    def debug(self, message: str) -> None:
        """Dimmed ``[debug]`` line, shown only with ``--verbose``."""
        if self._verbose:
            self._diagnose(f"[debug] {message}", style="dim")

    def _diagnose(
        self,
        message: str,
        style: str = "",
        prefix: str = "",
        prefix_style: str = "",
    ) -> None:
        if self._no_color:
            line = f"{prefix} {message}" if prefix else message
            print(line, file=sys.stderr, flush=True)
            return
        text = Text()
        if prefix:
            text.append(prefix, style=prefix_style)
            text.append(" ")
        text.append(message, style=style)
        self._stderr.print(text)


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def configure_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Attach a stderr handler to the ``compspec`` logger.

    With *verbose* the logger emits DEBUG records (synthesized topics,
    skipped hidden commands); otherwise only warnings and above. Calling
    this again replaces the previously installed handler.
    """
    logger = logging.getLogger("compspec")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    if no_color or _should_disable_color():
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(
            console=Console(file=sys.stderr, stderr=True),
            show_time=False,
            show_path=False,
        )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def debug(message: str) -> None:
    get_output().debug(message)
