"""Shared test fixtures for compspec.

Provides reusable fixtures for building registries, loading the registry
fixture document, creating isolated config environments, managing output
state, and running CLI commands. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest

from compspec.models import Command, DeclaredTopic, FlagMeta, Plugin, Registry
from compspec.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Undo :func:`~compspec.output.configure_logging` so caplog sees records."""
    yield
    logger = logging.getLogger("compspec")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Registry fixtures
# ---------------------------------------------------------------------------


def make_registry(
    commands: list[Command],
    topics: list[DeclaredTopic] | None = None,
    bin_name: str = "sf",
    **extra: Any,
) -> Registry:
    """Build a single-plugin registry from *commands*."""
    return Registry(
        bin=bin_name,
        plugins=[Plugin(name="core", commands=commands)],
        topics=topics or [],
        **extra,
    )


@pytest.fixture
def registry_factory():
    """Return :func:`make_registry` so tests can build ad-hoc registries."""
    return make_registry


@pytest.fixture
def org_list_registry() -> Registry:
    """One command ``org:list`` with alias ``org:ls`` and a ``--json`` flag."""
    return make_registry(
        [
            Command(
                id="org:list",
                summary="List orgs",
                aliases=["org:ls"],
                flags={"json": FlagMeta(name="json", description="output json")},
            )
        ]
    )


@pytest.fixture
def sf_registry() -> Registry:
    """A multi-plugin registry with declared topics, hidden commands and deep aliases."""
    return Registry(
        bin="sf",
        version="2.40.0",
        topics=[
            DeclaredTopic(name="org", description="Manage {{ config.bin }} orgs"),
            DeclaredTopic(name="org:create", description="Create orgs"),
            DeclaredTopic(name="project", description="Work with projects"),
        ],
        plugins=[
            Plugin(
                name="plugin-org",
                commands=[
                    Command(
                        id="org:create:scratch",
                        summary="Create a scratch org.\nLong help follows.",
                        flags={
                            "definition-file": FlagMeta(
                                name="definition-file",
                                description="Path to a [scratch] definition",
                                char="f",
                            ),
                            "wait": FlagMeta(name="wait"),
                        },
                        aliases=["force:org:create"],
                    ),
                    Command(id="org:open", summary="Open an org in the browser"),
                ],
            ),
            Plugin(
                name="plugin-deploy",
                commands=[
                    Command(
                        id="project:deploy:start",
                        summary='Deploy with "sf"',
                        aliases=["deploy"],
                    ),
                    Command(
                        id="project:legacy",
                        summary="Old deploy",
                        hidden=True,
                        aliases=["force:source:legacy"],
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def registry_yaml_path() -> Path:
    """Path of the YAML registry document fixture."""
    return FIXTURES_DIR / "registry.yaml"


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all COMPSPEC_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("compspec.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["COMPSPEC_FORMAT", "COMPSPEC_LAYOUT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
