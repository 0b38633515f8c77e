"""Run the programs under examples/ end to end.

Covers:
- examples/gather.py: settings options, lambdas, failing command, root
  command, --version, comment-derived option help
- examples/small_example.py: root command with a float positional
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import pytest

import funcli

EXAMPLES_DIR = Path(__file__).resolve().parents[2] / "examples"


def _load(name: str, monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    """Import an example script as a module registered in sys.modules."""
    module_name = f"funcli_example_{name}"
    spec = importlib.util.spec_from_file_location(module_name, EXAMPLES_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, module_name, module)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def gather_example(monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    return _load("gather", monkeypatch)


@pytest.fixture
def small_example(monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    return _load("small_example", monkeypatch)


class TestGatherExample:
    def test_root_command(self, gather_example, capsys) -> None:
        assert gather_example.build().run([]) == 0
        assert capsys.readouterr().out == (
            "Hello World from the root command\n"
            "test=False other=Default Value\n"
        )

    def test_root_command_with_options(self, gather_example, capsys) -> None:
        assert gather_example.build().run(["--test", "--other", "x"]) == 0
        assert "test=True other=x" in capsys.readouterr().out

    def test_gather_default(self, gather_example, capsys) -> None:
        assert gather_example.build().run(["gather"]) == 0
        assert capsys.readouterr().out == "Hello World, argument test: some\n"

    def test_gather_argument(self, gather_example, capsys) -> None:
        assert gather_example.build().run(["gather", "hello", "--test"]) == 0
        assert capsys.readouterr().out == "Hello World, argument test: hello\n"

    def test_lambdas(self, gather_example, capsys) -> None:
        assert gather_example.build().run(["lambda"]) == 0
        assert capsys.readouterr().out == "ssss\n"
        assert gather_example.build().run(["lambda_two"]) == 0
        assert capsys.readouterr().out == "ssss\n"

    def test_failing(self, gather_example) -> None:
        assert gather_example.build().run(["failing"]) == 1

    def test_version(self, gather_example, capsys) -> None:
        assert gather_example.build().run(["--version"]) == 0
        assert capsys.readouterr().out == f"gather {funcli.__version__}\n"

    def test_descriptions(self, gather_example) -> None:
        root = gather_example.build().root
        assert root.description == "Super command to show what can be done"
        assert root.children["gather"].description == "Documentation for gather command"
        assert root.children["failing"].description == "This command will fail"
        options = {o.flag: o.description for o in root.options}
        assert options["--test"].startswith("Test value")
        assert options["--other"].startswith("Free text")

    def test_help_lists_commands(self, gather_example, cli_runner) -> None:
        result = cli_runner.invoke(gather_example.build().build(), ["--help"])
        assert result.exit_code == 0
        for name in ("gather", "failing", "lambda", "lambda_two"):
            assert name in result.output


class TestSmallExample:
    def test_default(self, small_example, capsys) -> None:
        assert small_example.build().run([]) == 0
        assert capsys.readouterr().out == "Twice: 2.0\n"

    def test_argument(self, small_example, capsys) -> None:
        assert small_example.build().run(["2.5"]) == 0
        assert capsys.readouterr().out == "Twice: 5.0\n"

    def test_bad_argument(self, small_example) -> None:
        assert small_example.build().run(["abc"]) == 2
