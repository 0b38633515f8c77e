"""Canonical Pydantic models shared across all funcli modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- resolved once per builder by
:func:`funcli.config.resolve_config`:
    :class:`NamingConvention` and :class:`BuilderConfig`.

**Schema models** -- produced by :mod:`funcli.schema.extractor` from plain
callables and settings classes, and consumed by the generator:
    :class:`ValueKind`, :class:`ResultKind`, :class:`ParameterDescriptor`,
    :class:`CallableSchema`, :class:`FieldDescriptor`, and
    :class:`SettingsSchema`.

Schemas are built ahead of time so that the binders in
:mod:`funcli.generator.binders` dispatch on a :class:`ValueKind` tag instead
of re-inspecting Python types at parse time.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class NamingConvention(str, enum.Enum):
    """Textual transform applied to settings field names to produce flag names."""

    SNAKE = "snake_case"
    CAMEL = "camelCase"
    KEBAB = "kebab-case"


class BuilderConfig(BaseModel):
    """Effective configuration of a :class:`~funcli.builder.CommandBuilder`.

    Resolved by :func:`~funcli.config.resolve_config` from explicit keyword
    overrides, ``FUNCLI_*`` environment variables, an optional JSON config
    file, and the defaults declared here.
    """

    naming_convention: NamingConvention = Field(
        default=NamingConvention.SNAKE,
        description="Convention applied to settings field names",
    )
    strict: bool = Field(
        default=False,
        description="Reject every unsupported parameter, not only required ones",
    )
    docs_paths: list[str] = Field(
        default_factory=list,
        description="Structured documentation artifacts (JSON or XML) to consult",
    )
    scan_source: bool = Field(
        default=True, description="Fall back to comments found in source files"
    )
    prog_name: Optional[str] = Field(
        default=None, description="Program name shown in usage text"
    )
    add_completion: bool = Field(
        default=False, description="Add typer's --install-completion options"
    )
    verbose: bool = Field(default=False, description="Print debug diagnostics")
    no_color: bool = Field(default=False, description="Disable coloured diagnostics")


# --- Schemas ---


class ValueKind(str, enum.Enum):
    """Primitive value kinds that can cross the command line.

    ``DOUBLE`` is positional-only. Python has a single ``float`` type, which
    maps to ``FLOAT``; ``DOUBLE`` is only produced by hand-written
    :class:`ParameterDescriptor` instances.
    """

    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DOUBLE = "double"


class ResultKind(str, enum.Enum):
    """What a callable declares it returns."""

    INTEGER = "integer"
    NONE = "none"
    UNDECLARED = "undeclared"


class ParameterDescriptor(BaseModel):
    """One parameter of a registered callable.

    Exactly one of ``kind`` and ``settings_type`` is set for a mappable
    parameter; both are ``None`` for a parameter the generator cannot map.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    kind: Optional[ValueKind] = None
    settings_type: Optional[Any] = None
    annotation: Any = None
    has_default: bool = False
    default: Any = None
    nullable: bool = False
    positional_only: bool = False
    variadic: bool = False


class CallableSchema(BaseModel):
    """Explicit description of a callable registered as a command action."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    func: Callable[..., Any]
    name: str
    qualname: str
    module: Optional[str] = None
    parameters: list[ParameterDescriptor] = Field(default_factory=list)
    result: ResultKind = ResultKind.UNDECLARED


class FieldDescriptor(BaseModel):
    """One field of a settings type, with the default of a fresh instance."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    kind: Optional[ValueKind] = None
    annotation: Any = None
    default: Any = None
    nullable: bool = False
    required: bool = False


class SettingsSchema(BaseModel):
    """Explicit description of a settings type whose fields become options.

    ``style`` records how instances are built: ``pydantic`` models and
    ``dataclass`` types are constructed with keyword overrides, ``plain``
    classes are constructed without arguments and then assigned to.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings_type: Any
    style: str = "plain"
    fields: list[FieldDescriptor] = Field(default_factory=list)

    def instantiate(self, overrides: dict[str, Any]) -> Any:
        """Create a fresh instance with *overrides* applied over the defaults."""
        if self.style in ("pydantic", "dataclass"):
            return self.settings_type(**overrides)
        instance = self.settings_type()
        for name, value in overrides.items():
            setattr(instance, name, value)
        return instance


def is_dataclass_type(value: Any) -> bool:
    """Return ``True`` when *value* is a dataclass type (not an instance)."""
    return isinstance(value, type) and dataclasses.is_dataclass(value)
