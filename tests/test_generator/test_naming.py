"""Tests for funcli.generator.naming.

Covers:
- snake_case boundary rule (lower/digit followed by upper)
- runs of capitals are not split
- kebab-case and camelCase transforms
- idempotence of to_snake
- convert() dispatch by NamingConvention (enum or value string)
- to_identifier for flag names
"""

from __future__ import annotations

import pytest

from funcli.generator.naming import convert, to_camel, to_identifier, to_kebab, to_snake
from funcli.models import NamingConvention


class TestToSnake:
    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("TestValue", "test_value"),
            ("testValue", "test_value"),
            ("IOStream", "iostream"),
            ("already_snake", "already_snake"),
            ("Value2Go", "value2_go"),
            ("X", "x"),
            ("", ""),
        ],
    )
    def test_examples(self, identifier: str, expected: str) -> None:
        assert to_snake(identifier) == expected

    @pytest.mark.parametrize("identifier", ["TestValue", "IOStream", "someHTTPThing", "a1B2"])
    def test_idempotent(self, identifier: str) -> None:
        once = to_snake(identifier)
        assert to_snake(once) == once


class TestToKebab:
    def test_case_boundaries(self) -> None:
        assert to_kebab("TestValue") == "test-value"

    def test_keeps_existing_underscores(self) -> None:
        assert to_kebab("some_value") == "some_value"

    def test_empty(self) -> None:
        assert to_kebab("") == ""


class TestToCamel:
    def test_folds_underscores(self) -> None:
        assert to_camel("test_value") == "testValue"

    def test_lowercases_first_letter(self) -> None:
        assert to_camel("TestValue") == "testValue"

    def test_already_camel(self) -> None:
        assert to_camel("alreadyCamel") == "alreadyCamel"

    def test_trailing_underscore_dropped(self) -> None:
        assert to_camel("value_") == "value"

    def test_empty(self) -> None:
        assert to_camel("") == ""


class TestConvert:
    @pytest.mark.parametrize(
        "convention, expected",
        [
            (NamingConvention.SNAKE, "test_value"),
            (NamingConvention.KEBAB, "test-value"),
            (NamingConvention.CAMEL, "testValue"),
        ],
    )
    def test_dispatch(self, convention: NamingConvention, expected: str) -> None:
        assert convert("TestValue", convention) == expected

    def test_accepts_value_string(self) -> None:
        assert convert("TestValue", "kebab-case") == "test-value"


class TestToIdentifier:
    def test_dashes_become_underscores(self) -> None:
        assert to_identifier("dry-run") == "dry_run"

    def test_camel_flag(self) -> None:
        assert to_identifier("testValue") == "test_value"

    def test_leading_digit(self) -> None:
        assert to_identifier("1st") == "_1st"

    def test_empty_falls_back(self) -> None:
        assert to_identifier("") == "value"
