"""Per-kind binders between native values and typer parameters.

Each :class:`TypeBinder` knows one :class:`~funcli.models.ValueKind`.  It
declares positional arguments and ``--options`` as :class:`ArgumentSpec` /
:class:`OptionSpec` records, turns those records into the
``typer.Argument`` / ``typer.Option`` descriptors used in generated command
signatures, and converts parsed values back into the native type.

**Conversion rules when no value was parsed:**

* ``BOOLEAN`` -- ``False``.
* ``TEXT`` -- the declared default, else ``""``.
* ``INTEGER``, ``FLOAT``, ``DOUBLE`` -- the declared default, else zero.
* Anything declared ``Optional[...]`` -- ``None``.

``DOUBLE`` exists for positional arguments only; declaring it as an option
raises :class:`~funcli.exceptions.InvalidUsageError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import typer

from funcli.exceptions import InvalidUsageError
from funcli.generator.parse_result import MISSING, ParseResult
from funcli.models import ValueKind

Extractor = Callable[[ParseResult], Any]


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------


@dataclass
class ArgumentSpec:
    """A positional argument of one command.

    Attributes:
        name: Name shown in usage text (upper-cased as the metavar).
        dest: Click parameter name; the parameter name on subcommands and
            ``_root__<name>`` on the root command.
        kind: Value kind, selects the binder.
        has_default: ``False`` makes the argument required.
        default: Declared default value.
        description: Help text, if any was found.
        nullable: The declaration was ``Optional[...]``.
        extractor: ``ParseResult -> native value``, set by the binder.
    """

    name: str
    dest: str
    kind: ValueKind
    has_default: bool = False
    default: Any = None
    description: Optional[str] = None
    nullable: bool = False
    extractor: Optional[Extractor] = field(default=None, repr=False, compare=False)


@dataclass
class OptionSpec:
    """A named ``--option`` of one command.

    ``recursive`` options are declared on the root command and repeated on
    every subcommand, so they are accepted before or after the subcommand
    name.
    """

    name: str
    dest: str
    kind: ValueKind
    flag: str
    default: Any = None
    required: bool = False
    description: Optional[str] = None
    nullable: bool = False
    recursive: bool = False
    extractor: Optional[Extractor] = field(default=None, repr=False, compare=False)


Spec = Union[ArgumentSpec, OptionSpec]


# ---------------------------------------------------------------------------
# Binders
# ---------------------------------------------------------------------------


class TypeBinder:
    """Base binder; subclasses set the kind, native type and zero value."""

    kind: ValueKind
    python_type: type = str
    zero: Any = None
    option_capable: bool = True

    def declare_option(
        self,
        name: str,
        dest: str,
        *,
        default: Any = None,
        required: bool = False,
        description: Optional[str] = None,
        nullable: bool = False,
        recursive: bool = False,
    ) -> OptionSpec:
        """Declare ``--name`` and return its spec with the extractor bound.

        Raises:
            InvalidUsageError: If this kind cannot be an option.
        """
        if not self.option_capable:
            raise InvalidUsageError(
                f"Option '--{name}': {self.kind.value} values can only be "
                "declared as positional arguments"
            )
        spec = OptionSpec(
            name=name,
            dest=dest,
            kind=self.kind,
            flag=f"--{name}",
            default=default,
            required=required,
            description=description,
            nullable=nullable,
            recursive=recursive,
        )
        spec.extractor = self._extractor(spec)
        return spec

    def declare_positional(
        self,
        name: str,
        dest: str,
        *,
        has_default: bool = False,
        default: Any = None,
        description: Optional[str] = None,
        nullable: bool = False,
    ) -> ArgumentSpec:
        """Declare a positional argument; required unless *has_default*."""
        spec = ArgumentSpec(
            name=name,
            dest=dest,
            kind=self.kind,
            has_default=has_default,
            default=default,
            description=description,
            nullable=nullable,
        )
        spec.extractor = self._extractor(spec)
        return spec

    def _extractor(self, spec: Spec) -> Extractor:
        def extract(parse: ParseResult) -> Any:
            return self.convert(parse.get(spec.dest), spec)

        return extract

    # -- conversion ---------------------------------------------------------

    def convert(self, value: Any, spec: Spec) -> Any:
        """Convert a parsed *value* for *spec* to the native type."""
        if value is MISSING or value is None:
            return self.missing(spec)
        return self.coerce(value)

    def missing(self, spec: Spec) -> Any:
        if spec.nullable:
            return None
        if spec.default is not None:
            return self.coerce(spec.default)
        return self.zero

    def coerce(self, value: Any) -> Any:
        return self.python_type(value)

    # -- typer declaration --------------------------------------------------

    def annotation(self, spec: Spec) -> Any:
        return Optional[self.python_type] if spec.nullable else self.python_type

    def option_decls(self, spec: OptionSpec) -> list[str]:
        return [spec.flag]

    def typer_parameter(self, spec: Spec) -> tuple[Any, Any]:
        """Return ``(annotation, typer descriptor)`` for a generated signature."""
        if isinstance(spec, ArgumentSpec):
            default = spec.default if spec.has_default else ...
            return self.annotation(spec), typer.Argument(
                default,
                metavar=spec.name.upper(),
                help=spec.description,
                show_default=spec.has_default,
            )
        default = ... if spec.required else spec.default
        return self.annotation(spec), typer.Option(
            default,
            *self.option_decls(spec),
            help=spec.description,
        )


class TextBinder(TypeBinder):
    kind = ValueKind.TEXT
    python_type = str
    zero = ""


class IntegerBinder(TypeBinder):
    kind = ValueKind.INTEGER
    python_type = int
    zero = 0


class BooleanBinder(TypeBinder):
    """Options become ``--name/--no-name`` flags; positionals take click's
    boolean spellings (``true``/``false``, ``1``/``0``, ``yes``/``no``)."""

    kind = ValueKind.BOOLEAN
    python_type = bool
    zero = False

    def option_decls(self, spec: OptionSpec) -> list[str]:
        return [f"{spec.flag}/--no-{spec.name}"]


class FloatBinder(TypeBinder):
    kind = ValueKind.FLOAT
    python_type = float
    zero = 0.0


class DoubleBinder(FloatBinder):
    kind = ValueKind.DOUBLE
    option_capable = False


_BINDERS: dict[ValueKind, TypeBinder] = {
    binder.kind: binder
    for binder in (TextBinder(), IntegerBinder(), BooleanBinder(), FloatBinder(), DoubleBinder())
}


def binder_for(kind: Optional[ValueKind]) -> Optional[TypeBinder]:
    """Return the binder for *kind*, or ``None`` when it is unsupported."""
    if kind is None:
        return None
    return _BINDERS.get(kind)
