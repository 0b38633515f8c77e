"""Read parsed values back out of a completed click parse.

A :class:`ParseResult` is a read-only view over the parameter values of the
invoked command's :class:`click.Context` and all of its parents.  Extractors
built by :mod:`funcli.generator.binders` look values up by the click
parameter name (``dest``) they declared.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import click
from click.core import ParameterSource


class _Missing:
    """Sentinel type for a value the parse did not produce at all."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_DEFAULT_SOURCES = frozenset({None, ParameterSource.DEFAULT, ParameterSource.DEFAULT_MAP})


class ParseResult:
    """Parameter values of one invocation, innermost context first.

    A value supplied explicitly (command line, environment or prompt) wins
    over a default wherever it was parsed.  This lets a recursive root option
    be given either before or after the subcommand name: the root group and
    the subcommand both declare it, and whichever context saw it on the
    command line provides the value.

    Args:
        layers: ``(values, explicit_names)`` pairs, innermost first.
    """

    def __init__(
        self,
        layers: Optional[Iterable[tuple[Mapping[str, Any], frozenset[str]]]] = None,
    ) -> None:
        self._layers = [(dict(values), frozenset(explicit)) for values, explicit in layers or ()]

    @classmethod
    def from_context(cls, ctx: click.Context) -> ParseResult:
        """Collect the values of *ctx* and every parent context."""
        layers = []
        current: Optional[click.Context] = ctx
        while current is not None:
            explicit = frozenset(
                name
                for name in current.params
                if current.get_parameter_source(name) not in _DEFAULT_SOURCES
            )
            layers.append((current.params, explicit))
            current = current.parent
        return cls(layers)

    @classmethod
    def from_values(
        cls,
        values: Mapping[str, Any],
        explicit: Optional[Iterable[str]] = None,
    ) -> ParseResult:
        """Build a single-layer result, e.g. to call a command action directly.

        Every value is treated as explicitly given unless *explicit* names a
        subset.
        """
        names = frozenset(values if explicit is None else explicit)
        return cls([(values, names)])

    def __contains__(self, dest: object) -> bool:
        return any(dest in values for values, _ in self._layers)

    def is_explicit(self, dest: str) -> bool:
        """Return ``True`` when *dest* was given explicitly in any layer."""
        return any(dest in explicit for _, explicit in self._layers)

    def get(self, dest: str, default: Any = MISSING) -> Any:
        """Return the value parsed for *dest*, or *default* when absent."""
        for values, explicit in self._layers:
            if dest in explicit:
                return values[dest]
        for values, _ in self._layers:
            if dest in values:
                return values[dest]
        return default
