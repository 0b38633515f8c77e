"""AST-based source scanner for comment documentation.

Reads the source file that defines a registered callable or settings type,
parses it with :mod:`ast`, and extracts:

* the ``#`` (or ``#:``) comment block immediately above a ``def``, a
  decorator, a ``lambda`` line or a ``class``;
* the comment block immediately above a parameter written on its own line
  in a multi-line signature;
* the comment block above a settings field assignment, or the string
  literal directly below it (an attribute docstring).

A comment block containing ``<summary>`` or ``<param name="...">`` tags is
parsed as an XML fragment; otherwise its lines are joined as plain text.
See :class:`SourceCommentProvider` for the main entry point.
"""

from __future__ import annotations

import ast
import inspect
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from funcli.docs.artifact import normalize_text
from funcli.docs.base import DescriptionProvider

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"^\s*#:?\s?(.*)$")
_XML_HINT_RE = re.compile(r"<(summary|param)\b")

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


@dataclass
class CommentDoc:
    """Documentation parsed from one comment block.

    Attributes:
        summary: The ``<summary>`` text, or the whole block for plain
            comments.
        params: Mapping of parameter name to its ``<param>`` text.
    """

    summary: Optional[str] = None
    params: dict[str, str] = field(default_factory=dict)


def parse_comment_block(lines: list[str]) -> Optional[CommentDoc]:
    """Parse the text of a comment block (comment markers already removed)."""
    text = "\n".join(lines).strip()
    if not text:
        return None
    if _XML_HINT_RE.search(text):
        try:
            root = ET.fromstring(f"<doc>{text}</doc>")
        except ET.ParseError as exc:
            logger.debug("Comment block is not well-formed XML: %s", exc)
        else:
            summary = root.find("summary")
            params = {
                p.get("name", ""): normalize_text("".join(p.itertext())) or ""
                for p in root.iter("param")
                if p.get("name")
            }
            return CommentDoc(
                normalize_text("".join(summary.itertext())) if summary is not None else None,
                params,
            )
    return CommentDoc(normalize_text(text))


class _SourceFile:
    """Lines and syntax tree of one source file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.lines = path.read_text(encoding="utf-8").splitlines()
        self.tree = ast.parse("\n".join(self.lines), filename=str(path))

    def comment_above(self, lineno: int) -> Optional[CommentDoc]:
        """Parse the contiguous comment block ending right above *lineno* (1-based)."""
        block: list[str] = []
        index = lineno - 2
        while index >= 0:
            m = _COMMENT_RE.match(self.lines[index])
            if not self.lines[index].strip().startswith("#") or m is None:
                break
            block.append(m.group(1).rstrip())
            index -= 1
        block.reverse()
        return parse_comment_block(block)

    def function_at(self, name: str, first_line: int) -> Optional[FunctionNode]:
        """Find the ``def`` of *name* whose first line (decorators included) is *first_line*."""
        for node in ast.walk(self.tree):
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name == name:
                start = min([node.lineno] + [d.lineno for d in node.decorator_list])
                if start == first_line or node.lineno == first_line:
                    return node
        return None

    def classes_named(self, name: str) -> list[ast.ClassDef]:
        return [
            node
            for node in ast.walk(self.tree)
            if isinstance(node, ast.ClassDef) and node.name == name
        ]


def _field_statement(cls: ast.ClassDef, field_name: str) -> Optional[int]:
    """Index in ``cls.body`` of the statement assigning *field_name*."""
    for index, node in enumerate(cls.body):
        if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            if node.target.id == field_name:
                return index
        elif isinstance(node, ast.Assign):
            if any(isinstance(t, ast.Name) and t.id == field_name for t in node.targets):
                return index
    return None


class SourceCommentProvider(DescriptionProvider):
    """Description provider that reads comments from source files.

    Parsed files are cached per path for the provider's lifetime; a file
    that cannot be read or parsed is remembered as unavailable.
    """

    def __init__(self) -> None:
        self._files: dict[Path, Optional[_SourceFile]] = {}

    @property
    def name(self) -> str:
        return "source"

    def _source(self, target: Any) -> Optional[_SourceFile]:
        try:
            filename = inspect.getsourcefile(target)
        except (TypeError, OSError):
            return None
        if not filename:
            return None
        path = Path(filename)
        if path not in self._files:
            try:
                self._files[path] = _SourceFile(path)
            except (OSError, SyntaxError, UnicodeDecodeError) as exc:
                logger.debug("Cannot scan %s for comments: %s", path, exc)
                self._files[path] = None
        return self._files[path]

    def _callable_comment(self, target: Any) -> tuple[Optional[_SourceFile], Optional[CommentDoc], int]:
        code = getattr(target, "__code__", None)
        if code is None:
            return None, None, 0
        source = self._source(target)
        if source is None:
            return None, None, 0
        return source, source.comment_above(code.co_firstlineno), code.co_firstlineno

    def callable_doc(self, target: Any) -> Optional[str]:
        if inspect.isclass(target):
            source = self._source(target)
            if source is None:
                return None
            for node in source.classes_named(target.__name__):
                start = min([node.lineno] + [d.lineno for d in node.decorator_list])
                doc = source.comment_above(start)
                if doc and doc.summary:
                    return doc.summary
            return None
        _, doc, _ = self._callable_comment(target)
        return doc.summary if doc else None

    def parameter_doc(self, target: Any, parameter: str) -> Optional[str]:
        source, doc, first_line = self._callable_comment(target)
        if doc and doc.params.get(parameter):
            return doc.params[parameter]
        if source is None:
            return None
        node = source.function_at(getattr(target, "__name__", ""), first_line)
        if node is None:
            return None
        all_args = node.args.posonlyargs + node.args.args + node.args.kwonlyargs
        for arg in all_args:
            if arg.arg == parameter and arg.lineno > node.lineno:
                found = source.comment_above(arg.lineno)
                return found.summary if found else None
        return None

    def field_doc(self, settings_type: type, field_name: str) -> Optional[str]:
        for klass in settings_type.__mro__[:-1]:
            if klass.__module__.partition(".")[0] == "pydantic":
                continue
            source = self._source(klass)
            if source is None:
                continue
            for cls_node in source.classes_named(klass.__name__):
                index = _field_statement(cls_node, field_name)
                if index is None:
                    continue
                following = cls_node.body[index + 1] if index + 1 < len(cls_node.body) else None
                if (
                    isinstance(following, ast.Expr)
                    and isinstance(following.value, ast.Constant)
                    and isinstance(following.value.value, str)
                ):
                    return normalize_text(inspect.cleandoc(following.value.value))
                doc = source.comment_above(cls_node.body[index].lineno)
                if doc and doc.summary:
                    return doc.summary
        return None
