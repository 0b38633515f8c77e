#!/usr/bin/env python3
"""Sample program: shared settings, several subcommands and a root command.

Try::

    python examples/gather.py --help
    python examples/gather.py gather hello --test
    python examples/gather.py failing; echo $?
"""

from __future__ import annotations

import funcli


class SomeSettings:
    #: Test value, set it by passing ``--test`` / ``--no-test``.
    Test: bool = False
    #: Free text, set it by passing ``--other "string value"``.
    other: str = "Default Value"


def gather(test: str = "some", assert_: bool = False) -> None:
    print(f"Hello World, argument test: {test}")


def other(settings: SomeSettings) -> None:
    print("Hello World from the root command")
    print(f"test={settings.Test} other={settings.other}")


# Returns a non-zero exit code.
def failing() -> int:
    return 1


def build() -> funcli.CommandBuilder:
    return (
        funcli.new(prog_name="gather")
        .with_settings(SomeSettings)
        .with_command(lambda: print("ssss"), "", "lambda_two")
        .with_command(gather, "Documentation for gather command")
        .with_command(failing, "This command will fail")
        .with_command(lambda: print("ssss"), "Test command", "lambda")
        .with_root_command(other, "Super command to show what can be done")
        .with_version(funcli.__version__)
    )


if __name__ == "__main__":
    raise SystemExit(build().run())
