"""Descriptions from structured documentation files.

Two file formats are understood, both keyed by a member identifier of the
form ``kind:module.Qual.Name(paramTypes)``:

* **XML** in the layout emitted by documentation compilers::

      <doc>
        <members>
          <member name="M:examples.gather.gather">
            <summary>Collect things.</summary>
            <param name="test">Text echoed back.</param>
          </member>
          <member name="F:examples.gather.SomeSettings.other">
            <summary>Free text option.</summary>
          </member>
        </members>
      </doc>

* **JSON**, either ``{"members": {...}}`` or the mapping itself, where each
  value is a summary string or ``{"summary": ..., "params": {...}}``.

Member kinds: ``M`` callables, ``T`` types, ``F`` and ``P`` settings fields.
The parenthesised parameter list is ignored when matching, and a member id
written without its module (``M:gather``) matches any module.

Files come from :attr:`~funcli.models.BuilderConfig.docs_paths` and from
``<module>.xml`` / ``<module>.docs.json`` next to the module that defines the
documented object.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from funcli.docs.base import DescriptionProvider

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")
_ARGS_RE = re.compile(r"\(.*\)$")

ARTIFACT_SUFFIXES = (".xml", ".docs.json")


@dataclass
class MemberDoc:
    """Documentation recorded for one member id."""

    summary: Optional[str] = None
    params: dict[str, str] = field(default_factory=dict)


def normalize_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; ``None`` for empty text."""
    if text is None:
        return None
    collapsed = _WS_RE.sub(" ", text).strip()
    return collapsed or None


def member_key(member_id: str) -> str:
    """Strip the parameter-type list from *member_id*."""
    return _ARGS_RE.sub("", member_id.strip())


def _element_text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None:
        return None
    return normalize_text("".join(element.itertext()))


class DocArtifact:
    """The members of one documentation file."""

    def __init__(self, members: Optional[dict[str, MemberDoc]] = None) -> None:
        self.members: dict[str, MemberDoc] = {}
        for member_id, doc in (members or {}).items():
            self.add(member_id, doc)

    def add(self, member_id: str, doc: MemberDoc) -> None:
        self.members[member_key(member_id)] = doc

    def find(self, kind: str, module: Optional[str], qualname: str) -> Optional[MemberDoc]:
        """Look up a member by kind, module and qualified name."""
        if module:
            found = self.members.get(f"{kind}:{module}.{qualname}")
            if found is not None:
                return found
        return self.members.get(f"{kind}:{qualname}")

    @classmethod
    def load(cls, path: Path) -> DocArtifact:
        """Parse *path* as XML or JSON depending on its suffix.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If JSON content is malformed.
            SyntaxError: If XML content is malformed (``ET.ParseError``).
        """
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".xml":
            return cls.from_xml(text)
        return cls.from_json(text)

    @classmethod
    def from_xml(cls, text: str) -> DocArtifact:
        root = ET.fromstring(text)
        artifact = cls()
        for member in root.iter("member"):
            member_id = member.get("name")
            if not member_id:
                continue
            params = {
                p.get("name", ""): _element_text(p) or ""
                for p in member.findall("param")
                if p.get("name")
            }
            artifact.add(member_id, MemberDoc(_element_text(member.find("summary")), params))
        return artifact

    @classmethod
    def from_json(cls, text: str) -> DocArtifact:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("documentation JSON must be an object")
        members = data.get("members", data)
        artifact = cls()
        for member_id, value in members.items():
            if isinstance(value, str):
                artifact.add(member_id, MemberDoc(normalize_text(value)))
            elif isinstance(value, dict):
                params = {
                    str(k): normalize_text(str(v)) or ""
                    for k, v in (value.get("params") or {}).items()
                }
                artifact.add(member_id, MemberDoc(normalize_text(value.get("summary")), params))
        return artifact


def _identity(target: Any) -> tuple[Optional[str], str]:
    return getattr(target, "__module__", None), getattr(target, "__qualname__", "")


def _module_file(module_name: Optional[str]) -> Optional[Path]:
    module = sys.modules.get(module_name or "")
    filename = getattr(module, "__file__", None)
    return Path(filename) if filename else None


class ArtifactProvider(DescriptionProvider):
    """Description provider backed by structured documentation files.

    Args:
        paths: Artifact files consulted for every lookup.
        discover: Also look for ``<module>.xml`` / ``<module>.docs.json``
            beside the module that defines each documented object.
    """

    def __init__(self, paths: Iterable[str | Path] = (), discover: bool = True) -> None:
        self._paths = [Path(p).expanduser() for p in paths]
        self._discover = discover
        self._loaded: dict[Path, DocArtifact] = {}

    @property
    def name(self) -> str:
        return "artifact"

    def _artifact(self, path: Path) -> DocArtifact:
        cached = self._loaded.get(path)
        if cached is not None:
            return cached
        artifact = DocArtifact()
        if path.is_file():
            try:
                artifact = DocArtifact.load(path)
            except (OSError, ValueError, SyntaxError) as exc:
                logger.debug("Ignoring unreadable documentation file %s: %s", path, exc)
        self._loaded[path] = artifact
        return artifact

    def _artifacts_for(self, module: Optional[str]) -> list[DocArtifact]:
        paths = list(self._paths)
        source = _module_file(module) if self._discover else None
        if source is not None:
            stem = source.with_suffix("")
            paths.extend(stem.with_name(stem.name + suffix) for suffix in ARTIFACT_SUFFIXES)
        return [self._artifact(p) for p in paths]

    def _find(self, kinds: str, module: Optional[str], qualname: str) -> Optional[MemberDoc]:
        for artifact in self._artifacts_for(module):
            for kind in kinds:
                doc = artifact.find(kind, module, qualname)
                if doc is not None:
                    return doc
        return None

    def callable_doc(self, target: Any) -> Optional[str]:
        kinds = "T" if isinstance(target, type) else "M"
        doc = self._find(kinds, *_identity(target))
        return doc.summary if doc else None

    def parameter_doc(self, target: Any, parameter: str) -> Optional[str]:
        doc = self._find("M", *_identity(target))
        if doc is None:
            return None
        return doc.params.get(parameter) or None

    def field_doc(self, settings_type: type, field_name: str) -> Optional[str]:
        doc = self._find(
            "FP", settings_type.__module__, f"{settings_type.__qualname__}.{field_name}"
        )
        return doc.summary if doc else None
