"""Command generator -- map callables and settings types to a Typer app.

Sub-modules:

* :mod:`~funcli.generator.naming` -- snake/kebab/camel name conversion.
* :mod:`~funcli.generator.binders` -- per-type declaration of arguments and
  options, and conversion of parsed values.
* :mod:`~funcli.generator.parse_result` -- read-only view of the values
  click parsed for the selected command.
* :mod:`~funcli.generator.settings` -- settings type to option projection,
  memoised per type.
* :mod:`~funcli.generator.command_tree` -- the command assembler and the
  Typer materialisation with dynamically generated signatures.
"""

from funcli.generator.command_tree import CommandAssembler, CommandNode, build_typer_app
from funcli.generator.settings import SettingsRegistry

__all__ = ["CommandAssembler", "CommandNode", "SettingsRegistry", "build_typer_app"]
