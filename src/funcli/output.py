"""Diagnostics that funcli itself writes while building and running a CLI.

Everything here goes to **stderr**; stdout belongs to the registered
commands.  Colour follows ``NO_COLOR``, ``TERM=dumb`` and the ``no_color``
builder setting.

:class:`~funcli.builder.CommandBuilder` creates one :class:`OutputManager`
and installs it with :func:`set_output`; the generator and the builder then
report through the module-level :func:`warning`, :func:`error` and
:func:`debug` helpers.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console


class OutputManager:
    """Writes funcli's diagnostics to stderr.

    Args:
        no_color: Print plain text without Rich styling.
        verbose: Also print :meth:`debug` traces.
    """

    def __init__(self, no_color: bool = False, verbose: bool = False) -> None:
        self._no_color = no_color or _should_disable_color()
        self._verbose = verbose
        self._console = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    def _emit(self, message: str, style: Optional[str] = None, prefix: str = "") -> None:
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
            return
        if prefix:
            self._console.print(prefix, style=style, end="", markup=False)
            style = None
        self._console.print(message, style=style, markup=False)

    def warning(self, message: str) -> None:
        """Print *message* verbatim, e.g. ``Unknown parameter: `items```."""
        self._emit(message, style="yellow")

    def error(self, message: str) -> None:
        self._emit(message, style="bold red", prefix="Error: ")

    def debug(self, message: str) -> None:
        """Print a ``[debug]`` trace; only in verbose mode."""
        if self._verbose:
            self._emit(message, style="dim", prefix="[debug] ")


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager (used between tests)."""
    global _output
    _output = None


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
