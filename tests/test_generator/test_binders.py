"""Tests for funcli.generator.binders.

Covers:
- binder_for lookup, including unsupported kinds
- option and positional declaration (flags, required-ness, extractors)
- DOUBLE rejected as an option
- conversion of missing values (zero, declared default, None when nullable)
- typer descriptors produced for arguments, options and boolean flags
"""

from __future__ import annotations

from typing import Optional

import pytest
from typer.models import ArgumentInfo, OptionInfo

from funcli.exceptions import InvalidUsageError
from funcli.generator.binders import (
    ArgumentSpec,
    BooleanBinder,
    DoubleBinder,
    IntegerBinder,
    OptionSpec,
    TextBinder,
    binder_for,
)
from funcli.generator.parse_result import ParseResult
from funcli.models import ValueKind


class TestBinderFor:
    @pytest.mark.parametrize(
        "kind, binder_type",
        [
            (ValueKind.TEXT, TextBinder),
            (ValueKind.INTEGER, IntegerBinder),
            (ValueKind.BOOLEAN, BooleanBinder),
            (ValueKind.DOUBLE, DoubleBinder),
        ],
    )
    def test_known_kinds(self, kind: ValueKind, binder_type: type) -> None:
        assert isinstance(binder_for(kind), binder_type)

    def test_none_is_unsupported(self) -> None:
        assert binder_for(None) is None


class TestDeclareOption:
    def test_flag_and_dest(self) -> None:
        spec = binder_for(ValueKind.TEXT).declare_option("other", "_s__other", default="x")
        assert isinstance(spec, OptionSpec)
        assert spec.flag == "--other"
        assert spec.dest == "_s__other"
        assert spec.kind is ValueKind.TEXT
        assert spec.recursive is False

    def test_recursive_flag_kept(self) -> None:
        spec = binder_for(ValueKind.INTEGER).declare_option("count", "c", recursive=True)
        assert spec.recursive is True

    def test_double_rejected(self) -> None:
        with pytest.raises(InvalidUsageError, match="positional"):
            binder_for(ValueKind.DOUBLE).declare_option("ratio", "ratio")

    def test_extractor_reads_dest(self) -> None:
        spec = binder_for(ValueKind.INTEGER).declare_option("count", "count")
        assert spec.extractor(ParseResult.from_values({"count": "7"})) == 7


class TestDeclarePositional:
    def test_required_without_default(self) -> None:
        spec = binder_for(ValueKind.TEXT).declare_positional("test", "test")
        assert isinstance(spec, ArgumentSpec)
        assert spec.has_default is False

    def test_double_allowed(self) -> None:
        spec = binder_for(ValueKind.DOUBLE).declare_positional("ratio", "ratio")
        assert spec.extractor(ParseResult.from_values({"ratio": 2.5})) == 2.5


class TestConvert:
    def test_missing_boolean_is_false(self) -> None:
        spec = binder_for(ValueKind.BOOLEAN).declare_option("flag", "flag")
        assert spec.extractor(ParseResult()) is False

    def test_missing_text_is_empty(self) -> None:
        spec = binder_for(ValueKind.TEXT).declare_positional("name", "name")
        assert spec.extractor(ParseResult()) == ""

    def test_missing_text_nullable_is_none(self) -> None:
        spec = binder_for(ValueKind.TEXT).declare_positional("name", "name", nullable=True)
        assert spec.extractor(ParseResult.from_values({"name": None})) is None

    def test_missing_integer_uses_declared_default(self) -> None:
        spec = binder_for(ValueKind.INTEGER).declare_positional(
            "count", "count", has_default=True, default=5
        )
        assert spec.extractor(ParseResult()) == 5

    def test_missing_integer_without_default_is_zero(self) -> None:
        spec = binder_for(ValueKind.INTEGER).declare_positional("count", "count")
        assert spec.extractor(ParseResult()) == 0

    def test_parsed_value_coerced(self) -> None:
        spec = binder_for(ValueKind.FLOAT).declare_positional("ratio", "ratio")
        assert spec.extractor(ParseResult.from_values({"ratio": 1})) == 1.0


class TestTyperParameter:
    def test_required_argument(self) -> None:
        binder = binder_for(ValueKind.TEXT)
        spec = binder.declare_positional("test", "test")
        annotation, info = binder.typer_parameter(spec)
        assert annotation is str
        assert isinstance(info, ArgumentInfo)
        assert info.default is ...
        assert info.metavar == "TEST"

    def test_optional_argument_default(self) -> None:
        binder = binder_for(ValueKind.INTEGER)
        spec = binder.declare_positional("count", "count", has_default=True, default=3)
        _, info = binder.typer_parameter(spec)
        assert info.default == 3

    def test_nullable_annotation(self) -> None:
        binder = binder_for(ValueKind.TEXT)
        spec = binder.declare_positional("name", "name", has_default=True, nullable=True)
        annotation, _ = binder.typer_parameter(spec)
        assert annotation == Optional[str]

    def test_option_decls(self) -> None:
        binder = binder_for(ValueKind.TEXT)
        spec = binder.declare_option("other", "_s__other", default="Default Value")
        annotation, info = binder.typer_parameter(spec)
        assert annotation is str
        assert isinstance(info, OptionInfo)
        assert info.param_decls == ("--other",)
        assert info.default == "Default Value"

    def test_required_option(self) -> None:
        binder = binder_for(ValueKind.INTEGER)
        spec = binder.declare_option("level", "level", required=True)
        _, info = binder.typer_parameter(spec)
        assert info.default is ...

    def test_boolean_option_is_flag_pair(self) -> None:
        binder = binder_for(ValueKind.BOOLEAN)
        spec = binder.declare_option("test", "_s__test", default=False)
        _, info = binder.typer_parameter(spec)
        assert info.param_decls == ("--test/--no-test",)
