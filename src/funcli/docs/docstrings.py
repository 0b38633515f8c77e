"""Descriptions taken from docstrings and field metadata.

Recognised sources:

* Google-style ``Args:`` / ``Arguments:`` / ``Parameters:`` sections for
  parameters and ``Attributes:`` sections for settings fields.
* reST field lists: ``:param name:``, ``:ivar name:``, ``:var name:``.
* Pydantic ``Field(description=...)``.
* Dataclass ``field(metadata={"help": ...})`` (or ``"description"``).
"""

from __future__ import annotations

import dataclasses
import inspect
import re
from typing import Any, Optional

from pydantic import BaseModel

from funcli.docs.base import DescriptionProvider

_PARAM_SECTIONS = ("Args", "Arguments", "Parameters", "Params")
_FIELD_SECTIONS = ("Attributes", "Fields")
_SECTION_RE = re.compile(r"^([A-Z][A-Za-z ]*)\s*:\s*$")
_ENTRY_RE = re.compile(r"^(\s+)\*{0,2}(\w+)(?:\s*\([^)]*\))?\s*:\s*(.*)")
_REST_RE = re.compile(r"^\s*:(param|parameter|arg|ivar|var|cvar)\s+(?:[^:\s]+\s+)?(\w+)\s*:\s*(.*)")
_REST_PARAM_FIELDS = frozenset({"param", "parameter", "arg"})


def description(docstring: Optional[str]) -> Optional[str]:
    """Return the text of *docstring* that precedes its first section.

    Example::

        >>> description('''Greet someone.
        ...
        ... Args:
        ...     name: Who to greet.
        ... ''')
        'Greet someone.'
    """
    if not docstring:
        return None
    lines: list[str] = []
    for line in inspect.cleandoc(docstring).splitlines():
        stripped = line.strip()
        if _SECTION_RE.match(stripped) or stripped.startswith(":"):
            break
        lines.append(line.rstrip())
    text = "\n".join(lines).strip()
    return text or None


def parse_section(docstring: Optional[str], sections: tuple[str, ...]) -> dict[str, str]:
    """Parse ``name: description`` entries of the named Google-style sections.

    Continuation lines indented deeper than the entry are joined with single
    spaces.  A blank line inside the section is allowed; any other section
    header ends it.
    """
    docs: dict[str, str] = {}
    if not docstring:
        return docs

    in_section = False
    current: Optional[str] = None
    current_lines: list[str] = []
    entry_indent: Optional[int] = None

    def flush() -> None:
        if current:
            docs[current] = " ".join(current_lines).strip()

    for line in inspect.cleandoc(docstring).splitlines():
        stripped = line.strip()
        header = _SECTION_RE.match(stripped)
        if header and len(line) - len(line.lstrip()) == 0:
            flush()
            current, current_lines, entry_indent = None, [], None
            in_section = header.group(1) in sections
            continue
        if not in_section:
            continue
        if stripped and not line[0].isspace():
            flush()
            current, in_section = None, False
            continue

        m = _ENTRY_RE.match(line)
        if m and (entry_indent is None or len(m.group(1)) <= entry_indent):
            flush()
            entry_indent = len(m.group(1))
            current = m.group(2)
            desc = m.group(3).strip()
            current_lines = [desc] if desc else []
            continue

        if current and stripped:
            current_lines.append(stripped)

    flush()
    return docs


def parse_rest_fields(docstring: Optional[str], *, params: bool) -> dict[str, str]:
    """Parse reST ``:param x:`` (or ``:ivar x:`` when *params* is false) fields."""
    docs: dict[str, str] = {}
    if not docstring:
        return docs
    current: Optional[str] = None
    for line in inspect.cleandoc(docstring).splitlines():
        m = _REST_RE.match(line)
        if m:
            current = None
            if (m.group(1) in _REST_PARAM_FIELDS) == params:
                current = m.group(2)
                docs[current] = m.group(3).strip()
            continue
        stripped = line.strip()
        if current and stripped and not stripped.startswith(":"):
            docs[current] = f"{docs[current]} {stripped}".strip()
        else:
            current = None
    return docs


class DocstringProvider(DescriptionProvider):
    """Description provider backed by docstrings and field metadata."""

    @property
    def name(self) -> str:
        return "docstring"

    def callable_doc(self, target: Any) -> Optional[str]:
        return description(inspect.getdoc(target))

    def parameter_doc(self, target: Any, parameter: str) -> Optional[str]:
        doc = inspect.getdoc(target)
        found = parse_section(doc, _PARAM_SECTIONS).get(parameter)
        return found or parse_rest_fields(doc, params=True).get(parameter) or None

    def field_doc(self, settings_type: type, field_name: str) -> Optional[str]:
        if issubclass(settings_type, BaseModel):
            info = settings_type.model_fields.get(field_name)
            if info is not None and info.description:
                return info.description
        elif dataclasses.is_dataclass(settings_type):
            for f in dataclasses.fields(settings_type):
                if f.name == field_name:
                    text = f.metadata.get("help") or f.metadata.get("description")
                    if text:
                        return str(text)

        doc = settings_type.__doc__
        found = parse_section(doc, _FIELD_SECTIONS).get(field_name)
        return found or parse_rest_fields(doc, params=False).get(field_name) or None
