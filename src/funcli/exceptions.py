"""Exception hierarchy for funcli.

All exceptions inherit from :class:`FuncliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`funcli.exit_codes`.
:meth:`funcli.builder.CommandBuilder.run_and_exit` catches ``FuncliError``
and exits with the appropriate code.

Subclass hierarchy::

    FuncliError (exit 1)
    +-- InvalidUsageError            (exit 2)
    |   +-- UnsupportedParameterError (exit 2)
    |   +-- CommandConflictError      (exit 2)
    +-- BuilderStateError            (exit 1)
    +-- ConfigError                  (exit 1)
"""

from funcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class FuncliError(Exception):
    """Base exception for all funcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`funcli.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FuncliError):
    """Raised when the builder API is called with invalid arguments."""

    exit_code = EXIT_INVALID_USAGE


class UnsupportedParameterError(InvalidUsageError):
    """Raised when a parameter cannot be mapped and the call would be incomplete.

    Args:
        parameter: Name of the offending parameter.
        command: Name of the command being assembled.
    """

    def __init__(self, parameter: str, command: str):
        super().__init__(
            f"Command '{command}': parameter '{parameter}' cannot be mapped "
            "to the command line"
        )
        self.parameter = parameter
        self.command = command


class CommandConflictError(InvalidUsageError):
    """Raised when two subcommands resolve to the same name."""


class BuilderStateError(FuncliError):
    """Raised when the builder is used after :meth:`~funcli.builder.CommandBuilder.run`."""


class ConfigError(FuncliError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
