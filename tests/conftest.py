"""Shared test fixtures for funcli.

Provides reusable fixtures for isolating configuration, managing output
state, and running generated CLIs.  These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

import pytest

from funcli.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stderr at creation time.
    When pytest's capture or Typer's CliRunner redirects that stream and
    the test finishes, the cached reference becomes stale ("I/O operation
    on closed file").  Resetting forces a fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear FUNCLI_* and colour variables so the host never leaks into tests."""
    for var in [
        "FUNCLI_CONFIG",
        "FUNCLI_NAMING_CONVENTION",
        "FUNCLI_STRICT",
        "FUNCLI_DOCS_PATH",
        "FUNCLI_SCAN_SOURCE",
        "FUNCLI_PROG_NAME",
        "FUNCLI_VERBOSE",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless OutputManager so stderr text is predictable.

    Diagnostics are written with ``print`` to the current ``sys.stderr``,
    which makes them visible to ``capsys``.
    """
    output = OutputManager(no_color=True)
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
