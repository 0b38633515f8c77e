"""Tests for funcli.docs.scanner.

The documented objects below live in this module so the scanner reads
real comments from a real source file.

Covers:
- plain and XML-fragment comment blocks
- comments above functions, decorators, lambdas and classes
- comments above parameters in multi-line signatures
- settings fields documented by a comment or an attribute docstring
"""

from __future__ import annotations

from pydantic import BaseModel

from funcli.docs.scanner import CommentDoc, SourceCommentProvider, parse_comment_block


def _identity(func):
    return func


# Collect things
# from the tree.
def commented(test: str) -> None:
    pass


# <summary>Run the thing.</summary>
# <param name="count">How many times.</param>
def xml_commented(count: int) -> None:
    pass


def multiline(
    # Text echoed back.
    test: str,
    flag: bool = False,
) -> None:
    pass


# Decorated command.
@_identity
def decorated() -> None:
    pass


# Anonymous command.
anonymous = lambda: 0  # noqa: E731


def undocumented() -> None:
    pass


# Program settings.
class CommentedSettings:
    # Free text option.
    other: str = "x"
    Test: bool = False
    """Switch the test mode on."""


class ModelSettings(BaseModel):
    #: Verbosity level.
    level: int = 1


class TestParseCommentBlock:
    def test_plain(self) -> None:
        assert parse_comment_block(["Hello", "world."]) == CommentDoc("Hello world.")

    def test_empty(self) -> None:
        assert parse_comment_block([]) is None
        assert parse_comment_block(["", "  "]) is None

    def test_xml_fragment(self) -> None:
        doc = parse_comment_block(
            ["<summary>Run.</summary>", '<param name="n">Count.</param>']
        )
        assert doc == CommentDoc("Run.", {"n": "Count."})

    def test_malformed_xml_is_plain_text(self) -> None:
        assert parse_comment_block(["<summary>broken"]).summary == "<summary>broken"


class TestSourceCommentProvider:
    def test_name(self) -> None:
        assert SourceCommentProvider().name == "source"

    def test_plain_comment_above_function(self) -> None:
        assert SourceCommentProvider().callable_doc(commented) == "Collect things from the tree."

    def test_xml_comment_above_function(self) -> None:
        provider = SourceCommentProvider()
        assert provider.callable_doc(xml_commented) == "Run the thing."
        assert provider.parameter_doc(xml_commented, "count") == "How many times."

    def test_comment_above_parameter(self) -> None:
        provider = SourceCommentProvider()
        assert provider.parameter_doc(multiline, "test") == "Text echoed back."
        assert provider.parameter_doc(multiline, "flag") is None

    def test_comment_above_decorator(self) -> None:
        assert SourceCommentProvider().callable_doc(decorated) == "Decorated command."

    def test_comment_above_lambda(self) -> None:
        assert SourceCommentProvider().callable_doc(anonymous) == "Anonymous command."

    def test_no_comment(self) -> None:
        provider = SourceCommentProvider()
        assert provider.callable_doc(undocumented) is None
        assert provider.parameter_doc(undocumented, "x") is None

    def test_class_comment(self) -> None:
        assert SourceCommentProvider().callable_doc(CommentedSettings) == "Program settings."

    def test_field_comment(self) -> None:
        assert SourceCommentProvider().field_doc(CommentedSettings, "other") == "Free text option."

    def test_field_attribute_docstring(self) -> None:
        provider = SourceCommentProvider()
        assert provider.field_doc(CommentedSettings, "Test") == "Switch the test mode on."

    def test_pydantic_field_comment(self) -> None:
        assert SourceCommentProvider().field_doc(ModelSettings, "level") == "Verbosity level."

    def test_builtin_without_source(self) -> None:
        assert SourceCommentProvider().callable_doc(len) is None
