"""Identifier naming-convention transforms.

Settings field names are turned into option flags with one of three
conventions (see :class:`~funcli.models.NamingConvention`):

* **snake_case** -- an ``_`` is inserted before every uppercase letter that
  directly follows a lowercase letter or a digit, then everything is
  lowercased (``TestValue`` -> ``test_value``).  A run of capitals is not
  split (``IOStream`` -> ``iostream``).
* **kebab-case** -- the same boundary rule joined with ``-``.
* **camelCase** -- underscores are folded into an uppercase next letter and
  the first letter is lowercased (``test_value`` -> ``testValue``).

All functions are pure and total; an empty identifier yields ``""``.
"""

from __future__ import annotations

import re

from funcli.models import NamingConvention

# Lowercase letter or digit followed by an uppercase letter.
_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_UNDERSCORE_RE = re.compile(r"_(.?)", re.DOTALL)


def to_snake(identifier: str) -> str:
    """Convert *identifier* to snake_case.

    Example::

        >>> to_snake("TestValue")
        'test_value'
        >>> to_snake("IOStream")
        'iostream'
    """
    return _BOUNDARY_RE.sub("_", identifier).lower()


def to_kebab(identifier: str) -> str:
    """Convert *identifier* to kebab-case.

    Underscores already present are kept; only case boundaries are joined
    with ``-``.

    Example::

        >>> to_kebab("TestValue")
        'test-value'
    """
    return _BOUNDARY_RE.sub("-", identifier).lower()


def to_camel(identifier: str) -> str:
    """Convert a snake_case *identifier* to lowerCamelCase.

    Example::

        >>> to_camel("test_value")
        'testValue'
        >>> to_camel("alreadyCamel")
        'alreadyCamel'
    """
    folded = _UNDERSCORE_RE.sub(lambda m: m.group(1).upper(), identifier)
    return folded[:1].lower() + folded[1:]


_CONVERTERS = {
    NamingConvention.SNAKE: to_snake,
    NamingConvention.KEBAB: to_kebab,
    NamingConvention.CAMEL: to_camel,
}


def convert(identifier: str, convention: NamingConvention) -> str:
    """Convert *identifier* according to *convention*."""
    return _CONVERTERS[NamingConvention(convention)](identifier)


# Any character that cannot appear in a Python identifier.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def to_identifier(name: str) -> str:
    """Turn an arbitrary flag name into a valid Python identifier.

    Used for the click parameter names of generated commands, which must be
    identifiers because they appear in a synthesised function signature.

    Example::

        >>> to_identifier("dry-run")
        'dry_run'
    """
    result = _INVALID_IDENT_RE.sub("_", to_snake(name))
    if not result:
        return "value"
    if result[0].isdigit():
        result = f"_{result}"
    return result
