"""Fluent facade that turns callables into a command-line program.

Typical use::

    import funcli

    def gather(settings: Settings, test: str = "some", flag: bool = False) -> None:
        ...

    raise SystemExit(
        funcli.new()
        .with_settings(Settings)
        .with_command(gather, "Collect things")
        .with_root_command(main, "What this program does")
        .run()
    )

The builder has two phases.  Registration methods (``with_*``) may be
called in any order and return the builder.  :meth:`CommandBuilder.run` is
terminal: it builds the Typer app, parses the arguments, invokes the
selected callable and returns the exit code.  Registering after the app was
built, or running twice, raises :class:`~funcli.exceptions.BuilderStateError`.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Optional, Sequence

import click
import typer

from funcli import output
from funcli.config import resolve_config
from funcli.docs.resolver import DocumentationResolver
from funcli.exceptions import BuilderStateError, FuncliError, InvalidUsageError
from funcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from funcli.generator.binders import OptionSpec, binder_for
from funcli.generator.command_tree import CommandAssembler, CommandNode, build_typer_app
from funcli.generator.naming import to_identifier
from funcli.generator.settings import SettingsRegistry
from funcli.models import BuilderConfig, NamingConvention
from funcli.output import OutputManager, set_output
from funcli.schema.extractor import is_settings_type, kind_for_annotation, unwrap_optional

logger = logging.getLogger(__name__)


class CommandBuilder:
    """Register callables as commands, then run them against ``argv``.

    Args:
        config: Effective configuration.  Defaults to
            :func:`~funcli.config.resolve_config` with no overrides.
        resolver: Description source.  Defaults to the ranking built from
            *config* by :meth:`DocumentationResolver.from_config`.
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        *,
        resolver: Optional[DocumentationResolver] = None,
    ) -> None:
        self._config = config if config is not None else resolve_config()
        self._convention = self._config.naming_convention
        self._output = OutputManager(
            no_color=self._config.no_color,
            verbose=self._config.verbose,
        )
        set_output(self._output)

        self._resolver = resolver or DocumentationResolver.from_config(self._config)
        self._registry = SettingsRegistry(self._resolver)
        self._shared_options: dict[str, OptionSpec] = {}
        self._assembler = CommandAssembler(
            self._registry,
            self._resolver,
            shared_options=self._shared_options,
            strict=self._config.strict,
        )
        self._root = CommandNode(name=self._config.prog_name or "", is_root=True)
        self._version: Optional[str] = None
        self._app: Optional[typer.Typer] = None
        self._ran = False

    @classmethod
    def new(cls, **overrides: Any) -> CommandBuilder:
        """Create a builder; keyword arguments override configuration fields.

        Example::

            CommandBuilder.new(naming_convention="kebab-case", strict=True)

        Raises:
            ConfigError: If the resolved configuration is invalid.
        """
        return cls(resolve_config(**overrides))

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> BuilderConfig:
        return self._config

    @property
    def naming_convention(self) -> NamingConvention:
        """Convention applied to settings types registered from now on."""
        return self._convention

    @property
    def root(self) -> CommandNode:
        """The root command node (its children are the subcommands)."""
        return self._root

    @property
    def settings(self) -> SettingsRegistry:
        return self._registry

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def _check_open(self) -> None:
        if self._app is not None:
            raise BuilderStateError("Cannot register commands after the app was built")

    def with_command(
        self,
        func: Callable[..., Any],
        description: Optional[str] = None,
        name: Optional[str] = None,
    ) -> CommandBuilder:
        """Add *func* as a subcommand.

        Args:
            func: Function, lambda, bound method, ``functools.partial`` or
                callable object.
            description: Help text; looked up from documentation when
                omitted.
            name: Command name; derived from the callable when omitted.

        Raises:
            UnsupportedParameterError: If a parameter cannot be mapped.
            CommandConflictError: If the name is already taken.
        """
        self._check_open()
        node = self._assembler.assemble(
            func, name=name, description=description, convention=self._convention
        )
        self._root.add_child(node)
        return self

    def with_root_command(
        self,
        func: Callable[..., Any],
        description: Optional[str] = None,
    ) -> CommandBuilder:
        """Make *func* the action run when no subcommand is given.

        Its primitive parameters become root positional arguments and its
        settings parameter becomes options visible to every subcommand.
        """
        self._check_open()
        if self._root.action is not None:
            raise InvalidUsageError("A root command is already registered")
        self._assembler.assemble(
            func, description=description, node=self._root, convention=self._convention
        )
        return self

    def with_settings(self, settings_type: type) -> CommandBuilder:
        """Declare the fields of *settings_type* as options on the root command.

        Commands taking a parameter of this type later receive an instance
        built from those options.
        """
        self._check_open()
        if not is_settings_type(settings_type):
            raise InvalidUsageError(f"{settings_type!r} is not a usable settings type")
        self._registry.ensure(settings_type, self._root, self._convention)
        return self

    def with_option(
        self,
        name: str,
        value_type: Any = str,
        default: Any = None,
        description: Optional[str] = None,
    ) -> CommandBuilder:
        """Add a root-level ``--name`` option visible to every command.

        Commands registered afterwards with a parameter named *name* (or its
        identifier form, e.g. ``dry_run`` for ``dry-run``) receive the
        option's value instead of declaring a positional argument.

        Raises:
            InvalidUsageError: If *name* is blank or *value_type* is not
                ``str``, ``int``, ``bool`` or ``float``.
        """
        self._check_open()
        flag_name = name.strip().lstrip("-") if name else ""
        if not flag_name:
            raise InvalidUsageError("Option name must not be blank")
        inner, nullable = unwrap_optional(value_type)
        binder = binder_for(kind_for_annotation(inner))
        if binder is None:
            raise InvalidUsageError(f"Option '--{flag_name}': unsupported type {value_type!r}")

        ident = to_identifier(flag_name)
        spec = binder.declare_option(
            flag_name,
            f"_option__{ident}",
            default=default,
            description=description,
            nullable=nullable or default is None and inner is not bool,
            recursive=True,
        )
        self._root.add_option(spec)
        self._shared_options[flag_name] = spec
        self._shared_options[ident] = spec
        return self

    def with_naming_convention(self, convention: NamingConvention | str) -> CommandBuilder:
        """Set the convention for settings types registered from now on.

        Types already registered keep their option names.
        """
        self._check_open()
        self._convention = NamingConvention(convention)
        return self

    def with_snake_case(self) -> CommandBuilder:
        return self.with_naming_convention(NamingConvention.SNAKE)

    def with_camel_case(self) -> CommandBuilder:
        return self.with_naming_convention(NamingConvention.CAMEL)

    def with_kebab_case(self) -> CommandBuilder:
        return self.with_naming_convention(NamingConvention.KEBAB)

    def with_version(self, version: str) -> CommandBuilder:
        """Add an eager ``--version`` option printing ``<prog> <version>``."""
        self._check_open()
        self._version = version
        return self

    def with_description(self, description: str) -> CommandBuilder:
        """Set the root help text (also possible via :meth:`with_root_command`)."""
        self._check_open()
        self._root.description = description.strip() or None
        return self

    # ------------------------------------------------------------------ #
    # Build & run
    # ------------------------------------------------------------------ #

    def build(self) -> typer.Typer:
        """Build (once) and return the Typer app for the registered commands."""
        if self._app is None:
            self._app = build_typer_app(
                self._root,
                version=self._version,
                add_completion=self._config.add_completion,
            )
        return self._app

    def run(self, args: Optional[Sequence[str]] = None) -> int:
        """Parse *args* (default ``sys.argv[1:]``), invoke and return the exit code.

        The exit code is the selected callable's ``int`` result (``0`` for
        anything else), or click's code when parsing fails; click prints the
        usage error itself.

        Raises:
            BuilderStateError: If called more than once.
        """
        if self._ran:
            raise BuilderStateError("run() can only be called once per builder")
        self._ran = True
        set_output(self._output)

        command = typer.main.get_command(self.build())
        argv = list(sys.argv[1:] if args is None else args)
        output.debug(f"Running {self._root.display_name} with {argv!r}")

        try:
            result = command.main(
                args=argv,
                prog_name=self._config.prog_name or self._root.name or None,
                standalone_mode=False,
            )
        except click.ClickException as exc:
            exc.show()
            return exc.exit_code
        except click.exceptions.Abort:
            output.error("Aborted!")
            return EXIT_GENERIC_FAILURE

        if isinstance(result, int) and not isinstance(result, bool):
            return result
        return EXIT_SUCCESS

    def run_and_exit(self, args: Optional[Sequence[str]] = None) -> None:
        """Call :meth:`run` and exit the process with its code.

        A :class:`~funcli.exceptions.FuncliError` is printed to stderr and
        mapped to its ``exit_code``.
        """
        try:
            code = self.run(args)
        except FuncliError as exc:
            output.error(str(exc))
            code = exc.exit_code
        sys.exit(code)


def new(**overrides: Any) -> CommandBuilder:
    """Shortcut for :meth:`CommandBuilder.new`."""
    return CommandBuilder.new(**overrides)
