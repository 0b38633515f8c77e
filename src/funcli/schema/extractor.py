"""Extract explicit schemas from Python callables and settings types.

This module is the introspection half of funcli: everything that needs
:mod:`inspect` or :mod:`typing` happens here, once, at registration time.
The resulting :class:`~funcli.models.CallableSchema` and
:class:`~funcli.models.SettingsSchema` objects are plain data consumed by the
generator.

**Type resolution rules:**

* ``str``, ``int``, ``bool`` and ``float`` annotations map to the matching
  :class:`~funcli.models.ValueKind`.  ``Optional[X]`` unwraps to ``X`` and
  marks the value nullable.
* An unannotated parameter takes its kind from its default value; without
  a default it is treated as text.
* Pydantic models, dataclasses and plain classes that can be constructed
  without arguments and declare at least one public attribute of a
  supported kind are *settings types*.
* Anything else (lists, dicts, tuples, unions of several types, ...) is
  unsupported and gets neither a kind nor a settings type.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import logging
import types
import typing
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from funcli.models import (
    CallableSchema,
    FieldDescriptor,
    ParameterDescriptor,
    ResultKind,
    SettingsSchema,
    ValueKind,
    is_dataclass_type,
)

logger = logging.getLogger(__name__)

_KIND_MAP: dict[Any, ValueKind] = {
    str: ValueKind.TEXT,
    int: ValueKind.INTEGER,
    bool: ValueKind.BOOLEAN,
    float: ValueKind.FLOAT,
}

_NOT_SETTINGS = (str, bytes, bytearray, int, float, complex, bool, enum.Enum)


# ---------------------------------------------------------------------------
# Annotation helpers
# ---------------------------------------------------------------------------


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip ``None`` from ``Optional[X]`` / ``X | None``.

    Returns:
        ``(inner, nullable)``.  Unions of more than one non-``None`` type
        are returned unchanged (and are unsupported downstream).
    """
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def kind_for_annotation(annotation: Any) -> Optional[ValueKind]:
    """Map a resolved annotation to a :class:`~funcli.models.ValueKind`."""
    return _KIND_MAP.get(annotation)


def kind_for_value(value: Any) -> Optional[ValueKind]:
    """Infer a kind from a default value (``bool`` is checked before ``int``)."""
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.TEXT
    return None


def is_settings_type(annotation: Any) -> bool:
    """Return ``True`` when *annotation* is a class usable as a settings type."""
    if not inspect.isclass(annotation) or typing.get_origin(annotation) is not None:
        return False
    if issubclass(annotation, _NOT_SETTINGS):
        return False
    if issubclass(annotation, BaseModel) or is_dataclass_type(annotation):
        return True
    if annotation.__module__ == "builtins":
        return False
    try:
        inspect.signature(annotation).bind()
    except (TypeError, ValueError):
        return False
    hints = _resolve_hints(annotation)
    return any(
        field is not None and field.kind is not None
        for field in (
            _field(name, hints.get(name), getattr(annotation, name, None))
            for name in _plain_field_names(annotation)
        )
    )


def _resolve_hints(target: Any) -> dict[str, Any]:
    """Resolve (possibly string) annotations, tolerating unresolvable ones."""
    try:
        return typing.get_type_hints(target)
    except Exception:  # noqa: BLE001 -- forward refs to missing names, odd objects
        logger.debug("Could not resolve type hints of %r", target, exc_info=True)
        return dict(getattr(target, "__annotations__", {}) or {})


# ---------------------------------------------------------------------------
# Callables
# ---------------------------------------------------------------------------


def _unwrap_callable(func: Callable[..., Any]) -> Any:
    """Strip any number of ``functools.partial`` layers from *func*."""
    while isinstance(func, functools.partial):
        func = func.func
    return func


def callable_name(func: Callable[..., Any]) -> str:
    """Return the raw (unnormalised) name of *func*.

    ``functools.partial`` objects report the wrapped function's name and
    callable instances report their class name.
    """
    target = _unwrap_callable(func)
    name = getattr(target, "__name__", None)
    if not name:
        name = type(target).__name__
    return name


def documentation_target(func: Callable[..., Any]) -> Any:
    """Return the object whose docstring and source document *func*."""
    target = _unwrap_callable(func)
    if not (inspect.isfunction(target) or inspect.ismethod(target) or inspect.isclass(target)):
        call = getattr(type(target), "__call__", None)
        if call is not None and inspect.isfunction(call):
            return call
    return target


def extract_callable_schema(func: Callable[..., Any]) -> CallableSchema:
    """Build a :class:`~funcli.models.CallableSchema` for *func*.

    Args:
        func: Any Python callable: function, lambda, bound method,
            ``functools.partial`` or object with ``__call__``.

    Returns:
        The schema with one :class:`~funcli.models.ParameterDescriptor` per
        parameter, in declaration order.

    Raises:
        TypeError: If *func* is not callable or has no inspectable signature.
    """
    if not callable(func):
        raise TypeError(f"{func!r} is not callable")

    signature = inspect.signature(func)
    hints = _resolve_hints(documentation_target(func))
    target = _unwrap_callable(func)

    parameters = [
        _describe_parameter(param, hints.get(param.name, param.annotation))
        for param in signature.parameters.values()
    ]

    return CallableSchema(
        func=func,
        name=callable_name(func),
        qualname=getattr(target, "__qualname__", callable_name(func)),
        module=getattr(target, "__module__", None),
        parameters=parameters,
        result=_result_kind(hints.get("return", signature.return_annotation)),
    )


def _describe_parameter(param: inspect.Parameter, annotation: Any) -> ParameterDescriptor:
    has_default = param.default is not inspect.Parameter.empty
    default = param.default if has_default else None
    variadic = param.kind in (
        inspect.Parameter.VAR_POSITIONAL,
        inspect.Parameter.VAR_KEYWORD,
    )
    descriptor = ParameterDescriptor(
        name=param.name,
        has_default=has_default,
        default=default,
        positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
        variadic=variadic,
    )
    if variadic:
        return descriptor

    if annotation is inspect.Parameter.empty:
        # Unannotated: infer from the default, fall back to text.
        descriptor.kind = kind_for_value(default) if has_default else ValueKind.TEXT
        if has_default and default is None:
            descriptor.kind = ValueKind.TEXT
            descriptor.nullable = True
        return descriptor

    inner, nullable = unwrap_optional(annotation)
    descriptor.annotation = inner
    descriptor.nullable = nullable
    descriptor.kind = kind_for_annotation(inner)
    if descriptor.kind is None and is_settings_type(inner):
        descriptor.settings_type = inner
    return descriptor


def _result_kind(annotation: Any) -> ResultKind:
    if annotation is inspect.Signature.empty:
        return ResultKind.UNDECLARED
    if annotation is int:
        return ResultKind.INTEGER
    return ResultKind.NONE


# ---------------------------------------------------------------------------
# Settings types
# ---------------------------------------------------------------------------


def _plain_field_names(cls: type) -> list[str]:
    """Public annotated names and public data attributes of a plain class."""
    names: list[str] = []
    for klass in reversed(cls.__mro__[:-1]):
        for name in getattr(klass, "__annotations__", {}) or {}:
            if not name.startswith("_") and name not in names:
                names.append(name)
        for name, value in vars(klass).items():
            if name.startswith("_") or name in names:
                continue
            if callable(value) or isinstance(value, (property, classmethod, staticmethod)):
                continue
            names.append(name)
    return names


def _field(
    name: str,
    annotation: Any,
    default: Any,
    required: bool = False,
) -> Optional[FieldDescriptor]:
    """Describe one settings field; ``None`` for ``ClassVar`` declarations."""
    if annotation is None:
        return FieldDescriptor(name=name, kind=kind_for_value(default), default=default)
    if typing.get_origin(annotation) is typing.ClassVar:
        return None
    inner, nullable = unwrap_optional(annotation)
    return FieldDescriptor(
        name=name,
        kind=kind_for_annotation(inner),
        annotation=inner,
        default=default,
        nullable=nullable,
        required=required,
    )


def extract_settings_schema(settings_type: type) -> SettingsSchema:
    """Build a :class:`~funcli.models.SettingsSchema` for *settings_type*.

    Field defaults are taken from the type's own construction: declared
    defaults (or default factories) for pydantic models and dataclasses, and
    the attributes of a freshly constructed instance for plain classes.
    Fields without any default keep ``None`` and are flagged ``required``.

    Args:
        settings_type: A class accepted by :func:`is_settings_type`.

    Returns:
        The schema, with fields in declaration order.
    """
    fields: list[Optional[FieldDescriptor]] = []

    if issubclass(settings_type, BaseModel):
        # Pydantic has already resolved the annotations of its fields.
        for name, info in settings_type.model_fields.items():
            required = info.is_required()
            default = None if required else info.get_default(call_default_factory=True)
            fields.append(_field(name, info.annotation, default, required))
        return SettingsSchema(
            settings_type=settings_type,
            style="pydantic",
            fields=[f for f in fields if f is not None],
        )

    hints = _resolve_hints(settings_type)
    if is_dataclass_type(settings_type):
        for f in dataclasses.fields(settings_type):
            if not f.init:
                continue
            required = False
            if f.default is not dataclasses.MISSING:
                default = f.default
            elif f.default_factory is not dataclasses.MISSING:
                default = f.default_factory()
            else:
                default, required = None, True
            fields.append(_field(f.name, hints.get(f.name, f.type), default, required))
        style = "dataclass"
    else:
        instance = settings_type()
        for name in _plain_field_names(settings_type):
            fields.append(_field(name, hints.get(name), getattr(instance, name, None)))
        style = "plain"

    return SettingsSchema(
        settings_type=settings_type,
        style=style,
        fields=[f for f in fields if f is not None],
    )
