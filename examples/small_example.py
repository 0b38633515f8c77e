#!/usr/bin/env python3
"""Smallest useful program: a root command with one optional argument.

Try::

    python examples/small_example.py 2.5
"""

from __future__ import annotations

import funcli


def twice(argument: float = 1.0) -> None:
    print(f"Twice: {argument * 2.0}")


def build() -> funcli.CommandBuilder:
    return funcli.new(prog_name="small").with_root_command(twice, "Small program")


if __name__ == "__main__":
    raise SystemExit(build().run())
