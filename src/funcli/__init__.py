"""funcli -- Turn Python callables and settings classes into a command-line program.

Functions become subcommands, their primitive parameters become positional
arguments and their settings-class parameters become ``--options`` shared by
every command.  Help texts are looked up from docstrings, structured
documentation files and source comments.

Typical use::

    import funcli

    def gather(settings: Settings, path: str = ".") -> int:
        '''Collect files below PATH.'''
        ...

    raise SystemExit(funcli.new().with_settings(Settings).with_command(gather).run())

Modules:
    builder: The :class:`CommandBuilder` facade.
    models: Pydantic and dataclass models shared across the package.
    config: Builder configuration from a file, the environment and overrides.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stderr diagnostics with Rich support.
"""

from funcli.builder import CommandBuilder, new
from funcli.models import BuilderConfig, NamingConvention

__version__ = "0.2.0"

__all__ = ["CommandBuilder", "BuilderConfig", "NamingConvention", "new", "__version__"]
