"""Assemble command nodes from callables and build the Typer app from them.

This is the core algorithm of funcli.  Registration and parsing are split:

**Registration** (:class:`CommandAssembler`)

1. Resolve the command name (override or the callable's own name, see
   :func:`resolve_command_name`) and its description (override or the
   :class:`~funcli.docs.resolver.DocumentationResolver`).
2. Classify each parameter in declaration order: a builder-level option
   with the same name, a primitive positional argument (via
   :mod:`funcli.generator.binders`), a settings object (via
   :class:`~funcli.generator.settings.SettingsRegistry`), or unknown.
3. Capture the exact extractor sequence and the callable in an invocation
   closure stored on the :class:`CommandNode`.

**Materialisation** (:func:`build_typer_app`)

4. Generate one function per node whose signature declares the node's
   arguments and options as ``typer.Argument`` / ``typer.Option`` defaults,
   and register it as the root callback or as a subcommand.
5. When invoked, the generated function builds a
   :class:`~funcli.generator.parse_result.ParseResult` from the click
   context and runs the node's closure; a non-zero result becomes the exit
   code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import click
import typer
from typer.core import TyperGroup

from funcli import output
from funcli.docs.resolver import DocumentationResolver
from funcli.exceptions import CommandConflictError, InvalidUsageError, UnsupportedParameterError
from funcli.generator.binders import ArgumentSpec, Extractor, OptionSpec, binder_for
from funcli.generator.naming import to_identifier
from funcli.generator.parse_result import ParseResult
from funcli.generator.settings import SettingsRegistry
from funcli.models import CallableSchema, NamingConvention, ParameterDescriptor, ResultKind
from funcli.schema.extractor import extract_callable_schema

logger = logging.getLogger(__name__)

Action = Callable[[ParseResult], int]


# ---------------------------------------------------------------------------
# Command nodes
# ---------------------------------------------------------------------------


@dataclass
class CommandNode:
    """One command of the tree: the root, or a direct subcommand of it.

    Attributes:
        name: Command name; empty for a root without a program name.
        description: Help text, if any.
        arguments: Positional arguments, in consumption order.
        options: Options declared on this node.  Recursive root options
            are repeated on every subcommand when the app is built.
        action: Invocation closure; ``None`` shows the help instead.
        children: Subcommands by name (root only).
        is_root: Whether this is the root command.
    """

    name: str
    description: Optional[str] = None
    arguments: list[ArgumentSpec] = field(default_factory=list)
    options: list[OptionSpec] = field(default_factory=list)
    action: Optional[Action] = None
    children: dict[str, CommandNode] = field(default_factory=dict)
    is_root: bool = False

    @property
    def display_name(self) -> str:
        return self.name or "<root>"

    def add_argument(self, spec: ArgumentSpec) -> None:
        if any(a.dest == spec.dest for a in self.arguments):
            raise CommandConflictError(
                f"Command '{self.display_name}': argument '{spec.name}' is declared twice"
            )
        self.arguments.append(spec)

    def add_option(self, spec: OptionSpec) -> None:
        if any(o.flag == spec.flag for o in self.options):
            raise CommandConflictError(
                f"Command '{self.display_name}': option '{spec.flag}' is declared twice"
            )
        self.options.append(spec)

    def add_child(self, child: CommandNode) -> None:
        if not self.is_root:
            raise InvalidUsageError("Only the root command can have subcommands")
        if child.name in self.children:
            raise CommandConflictError(f"Subcommand '{child.name}' is already registered")
        self.children[child.name] = child

    def invoke(self, parse: ParseResult) -> int:
        """Run the invocation closure against *parse*."""
        if self.action is None:
            return 0
        return self.action(parse)


# ---------------------------------------------------------------------------
# Name resolution
# ---------------------------------------------------------------------------


def resolve_command_name(raw: str) -> str:
    """Derive a stable command name from an override or a callable name.

    The segment after the last ``"__"`` is kept, then the segment before the
    first ``"|"``, then angle brackets are stripped and the result is
    lowercased.  This recovers the human part of compiler-style synthesised
    names.

    Example::

        >>> resolve_command_name("Program|__TopLevel__Other")
        'other'
        >>> resolve_command_name("<Main>$g__Other|0_0")
        'other'
        >>> resolve_command_name("<lambda>")
        'lambda'

    Raises:
        InvalidUsageError: If nothing usable is left.
    """
    name = raw.strip()
    if "__" in name:
        name = name[name.rindex("__") + 2 :]
    if "|" in name:
        name = name.split("|", 1)[0]
    name = name.strip("<>").lower()
    if not name:
        # Dunder names such as "__call__" lose everything to the "__" rule.
        name = raw.strip().strip("_<>|").lower()
    if not name:
        raise InvalidUsageError(f"Cannot derive a command name from {raw!r}")
    return name


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


class CommandAssembler:
    """Turn callables into :class:`CommandNode` objects.

    Args:
        registry: Settings registry shared by every command of one builder.
        resolver: Description source; ``None`` disables lookups.
        shared_options: Builder-level options by parameter name.  A
            parameter with a matching name is bound to the option instead
            of becoming a positional argument.
        strict: Reject every unsupported parameter, not only those without
            a default.
    """

    def __init__(
        self,
        registry: SettingsRegistry,
        resolver: Optional[DocumentationResolver] = None,
        *,
        shared_options: Optional[Mapping[str, OptionSpec]] = None,
        strict: bool = False,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._shared = shared_options if shared_options is not None else {}
        self._strict = strict

    def assemble(
        self,
        func: Union[Callable[..., Any], CallableSchema],
        name: Optional[str] = None,
        description: Optional[str] = None,
        *,
        node: Optional[CommandNode] = None,
        convention: NamingConvention = NamingConvention.SNAKE,
    ) -> CommandNode:
        """Build (or fill in *node*) for *func*.

        Args:
            func: The callable, or a pre-built
                :class:`~funcli.models.CallableSchema`.
            name: Command name override; ignored when *node* is given.
            description: Description override.
            node: Existing node to populate (the root command).
            convention: Naming convention for settings options declared
                by this command.

        Returns:
            The populated node, with its invocation closure set.

        Raises:
            UnsupportedParameterError: If a parameter cannot be mapped and
                has no default (or strict mode is on).
        """
        schema = func if isinstance(func, CallableSchema) else extract_callable_schema(func)

        if node is None:
            raw = name if name and name.strip() else schema.name
            node = CommandNode(name=resolve_command_name(raw))

        if description and description.strip():
            node.description = description.strip()
        elif self._resolver is not None:
            node.description = self._resolver.describe_callable(schema.func) or node.description

        bound: list[tuple[ParameterDescriptor, Extractor]] = []
        for param in schema.parameters:
            extractor = self._bind(param, schema, node, convention)
            if extractor is not None:
                bound.append((param, extractor))

        node.action = _make_action(schema, bound)
        logger.debug(
            "Assembled command '%s' from %s with %d bound parameter(s)",
            node.display_name,
            schema.qualname,
            len(bound),
        )
        return node

    def _bind(
        self,
        param: ParameterDescriptor,
        schema: CallableSchema,
        node: CommandNode,
        convention: NamingConvention,
    ) -> Optional[Extractor]:
        if param.variadic:
            self._unknown(param, node, required=False)
            return None

        shared = self._shared.get(param.name)
        if shared is not None:
            return shared.extractor

        binder = binder_for(param.kind)
        if binder is not None:
            # Root positionals get their own dest so a value given to the root
            # never reaches a subcommand parameter of the same name.
            dest = f"_root__{param.name}" if node.is_root else param.name
            spec = binder.declare_positional(
                param.name.rstrip("_") or param.name,
                dest,
                has_default=param.has_default,
                default=param.default,
                description=self._describe_parameter(schema, param.name),
                nullable=param.nullable,
            )
            node.add_argument(spec)
            return spec.extractor

        if param.settings_type is not None:
            return self._registry.ensure(param.settings_type, node, convention).factory

        self._unknown(param, node, required=not param.has_default)
        return None

    def _unknown(self, param: ParameterDescriptor, node: CommandNode, required: bool) -> None:
        output.warning(f"Unknown parameter: `{param.name}`")
        if required or self._strict:
            raise UnsupportedParameterError(param.name, node.display_name)

    def _describe_parameter(self, schema: CallableSchema, parameter: str) -> Optional[str]:
        if self._resolver is None:
            return None
        return self._resolver.describe_parameter(schema.func, parameter)


def _make_action(
    schema: CallableSchema,
    bound: list[tuple[ParameterDescriptor, Extractor]],
) -> Action:
    """Capture the extractor sequence and the callable in one closure."""
    func = schema.func
    int_result = schema.result in (ResultKind.INTEGER, ResultKind.UNDECLARED)

    def action(parse: ParseResult) -> int:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for param, extract in bound:
            value = extract(parse)
            if value is None:
                logger.debug(
                    "No value for parameter '%s' of %s; its own default applies",
                    param.name,
                    schema.qualname,
                )
                continue
            if param.positional_only:
                args.append(value)
            else:
                kwargs[param.name] = value

        result = func(*args, **kwargs)
        if int_result and isinstance(result, int) and not isinstance(result, bool):
            return result
        return 0

    return action


# ---------------------------------------------------------------------------
# Typer materialisation
# ---------------------------------------------------------------------------


class RootGroup(TyperGroup):
    """Root group whose positional arguments never swallow a subcommand name.

    Click lets a group's own arguments consume tokens greedily, so a root
    command with an optional positional would read ``gather`` as its value.
    Here the first token naming a registered subcommand always selects it;
    only the tokens before it are parsed against the root's parameters.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not any(isinstance(p, click.Argument) for p in self.params):
            return super().parse_args(ctx, args)
        index = self._subcommand_index(args)
        if index is None:
            return super().parse_args(ctx, args)

        head, tail = args[:index], args[index:]
        # Root arguments are irrelevant when a subcommand runs.
        relaxed = [p for p in self.params if isinstance(p, click.Argument) and p.required]
        for param in relaxed:
            param.required = False
        try:
            super().parse_args(ctx, head)
        finally:
            for param in relaxed:
                param.required = True

        leftover = [*_pending_tokens(ctx), *ctx.args]
        if leftover:
            ctx.fail(f"Got unexpected extra argument ({' '.join(leftover)})")
        _set_pending_tokens(ctx, tail)
        return ctx.args

    def _subcommand_index(self, args: list[str]) -> Optional[int]:
        value_options: set[str] = set()
        for param in self.params:
            if isinstance(param, click.Option) and not param.is_flag and not param.count:
                value_options.update(param.opts)
                value_options.update(param.secondary_opts)

        skip = False
        for index, token in enumerate(args):
            if skip:
                skip = False
                continue
            if token == "--":
                return None
            if token.startswith("-") and len(token) > 1:
                skip = token in value_options
                continue
            if token in self.commands:
                return index
        return None


def _pending_tokens(ctx: click.Context) -> list[str]:
    if hasattr(ctx, "_protected_args"):  # click >= 8.2
        return list(ctx._protected_args)
    return list(ctx.protected_args)


def _set_pending_tokens(ctx: click.Context, tokens: list[str]) -> None:
    if hasattr(ctx, "_protected_args"):  # click >= 8.2
        ctx._protected_args = tokens[:1]
    else:
        ctx.protected_args = tokens[:1]
    ctx.args = tokens[1:]


def build_typer_app(
    root: CommandNode,
    *,
    version: Optional[str] = None,
    add_completion: bool = False,
) -> typer.Typer:
    """Materialise the node tree into a :class:`typer.Typer` application.

    The root node becomes the app callback (it runs only when no subcommand
    is given) and each child becomes a subcommand.  Recursive root options
    are declared on every subcommand that does not declare the same flag
    itself.

    Args:
        root: The root :class:`CommandNode`.
        version: When set, adds an eager ``--version`` option to the root.
        add_completion: Add typer's shell-completion options.

    Returns:
        The app.  Run it with ``app()`` or through
        :class:`typer.testing.CliRunner`.
    """
    app = typer.Typer(
        name=root.name or None,
        cls=RootGroup,
        invoke_without_command=True,
        add_completion=add_completion,
    )

    extra = [_version_parameter(version)] if version else []
    app.callback()(_build_command_function(root, root.options, extra))

    recursive = [o for o in root.options if o.recursive]
    for child in root.children.values():
        local_flags = {o.flag for o in child.options}
        inherited = [o for o in recursive if o.flag not in local_flags]
        app.command(name=child.name)(_build_command_function(child, child.options + inherited))

    return app


def _make_dispatch(node: CommandNode) -> Callable[[], int]:
    def dispatch() -> int:
        ctx = click.get_current_context()
        if node.is_root and ctx.invoked_subcommand is not None:
            return 0
        if node.action is None:
            typer.echo(ctx.get_help())
            return 0
        code = node.invoke(ParseResult.from_context(ctx))
        if code:
            raise typer.Exit(code=code)
        return code

    return dispatch


def _version_parameter(version: str) -> tuple[str, Any, Any]:
    def show_version(ctx: typer.Context, value: bool) -> None:
        if value:
            typer.echo(f"{ctx.find_root().info_name} {version}")
            raise typer.Exit()

    return (
        "_version",
        bool,
        typer.Option(
            False,
            "--version",
            callback=show_version,
            is_eager=True,
            help="Show the version and exit.",
        ),
    )


def _build_command_function(
    node: CommandNode,
    options: Iterable[OptionSpec],
    extra: Iterable[tuple[str, Any, Any]] = (),
) -> Callable[..., int]:
    """Generate a Typer-compatible function declaring *node*'s parameters.

    Typer reads parameter annotations and defaults through
    :func:`inspect.signature`, so the function is built from source with the
    annotation and ``typer.Argument`` / ``typer.Option`` objects injected
    into its namespace.  The body only calls the node's dispatcher; values
    are read back from the click context, not from the arguments.
    """
    params: list[tuple[str, Any, Any]] = []
    for spec in [*node.arguments, *options]:
        annotation, default = binder_for(spec.kind).typer_parameter(spec)
        params.append((spec.dest, annotation, default))
    params.extend(extra)

    namespace: dict[str, Any] = {"_dispatch": _make_dispatch(node)}
    sig_parts: list[str] = []
    for idx, (dest, annotation, default) in enumerate(params):
        namespace[f"_ann_{idx}"] = annotation
        namespace[f"_default_{idx}"] = default
        sig_parts.append(f"{dest}: _ann_{idx} = _default_{idx}")

    label = node.name or "root"
    func_name = f"_cmd_{to_identifier(label)}"
    source = f"def {func_name}({', '.join(sig_parts)}):\n    return _dispatch()\n"

    code = compile(source, f"<funcli:{label}>", "exec")
    exec(code, namespace)  # noqa: S102 -- controlled code generation
    fn = namespace[func_name]
    fn.__doc__ = node.description
    return fn
