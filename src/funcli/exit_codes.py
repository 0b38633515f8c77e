"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

A command's own integer result is passed through unchanged; the constants
below cover what funcli itself reports.

Example::

    $ python tool.py gather --bogus
    $ echo $?
    2   # EXIT_INVALID_USAGE -- reported by click
"""

EXIT_SUCCESS = 0
"""The command completed successfully (or returned no integer result)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command line or the builder was used incorrectly (click's usage-error code)."""
