"""Tests for funcli.output.

Covers:
- NO_COLOR / TERM=dumb colour disabling
- everything on stderr, nothing on stdout
- the unknown-parameter line printed without a prefix
- verbose-only debug traces
- global instance management and the module helpers
"""

from __future__ import annotations

import pytest

from funcli import output as output_module
from funcli.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


class TestShouldDisableColor:
    def test_no_color_any_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM", "xterm")
        assert _should_disable_color() is False


class TestStreams:
    def test_warning_is_printed_verbatim(self, capsys) -> None:
        OutputManager(no_color=True).warning("Unknown parameter: `x`")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Unknown parameter: `x`\n"

    def test_error_prefix(self, capsys) -> None:
        OutputManager(no_color=True).error("boom")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Error: boom\n"

    def test_rich_warning_keeps_text(self, capsys, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM", "xterm")
        OutputManager().warning("Unknown parameter: `[x]`")
        err = capsys.readouterr().err
        assert "Unknown parameter: `[x]`" in err
        assert "Warning" not in err


class TestVerbose:
    def test_debug_hidden_by_default(self, capsys) -> None:
        OutputManager(no_color=True).debug("hidden")
        assert capsys.readouterr().err == ""

    def test_debug_shown_when_verbose(self, capsys) -> None:
        OutputManager(no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        reset_output()
        first = get_output()
        assert get_output() is first

    def test_set_and_reset(self) -> None:
        manager = OutputManager(no_color=True)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager

    def test_module_helpers(self, plain_output, capsys) -> None:
        output_module.warning("w")
        output_module.error("e")
        output_module.debug("d")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "w\nError: e\n"
