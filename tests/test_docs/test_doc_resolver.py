"""Tests for funcli.docs.resolver.

Covers:
- default provider ranking and from_config
- first non-empty answer wins
- provider failures are swallowed
- answers are cached per subject
- callable instances and partials are documented by their target
"""

from __future__ import annotations

import functools
from typing import Any, Optional

from funcli.docs.artifact import ArtifactProvider
from funcli.docs.base import DescriptionProvider
from funcli.docs.docstrings import DocstringProvider
from funcli.docs.resolver import DocumentationResolver
from funcli.docs.scanner import SourceCommentProvider
from funcli.models import BuilderConfig


class StaticProvider(DescriptionProvider):
    def __init__(self, answers: dict[str, str]) -> None:
        self.answers = answers
        self.calls = 0

    @property
    def name(self) -> str:
        return "static"

    def callable_doc(self, target: Any) -> Optional[str]:
        self.calls += 1
        return self.answers.get(getattr(target, "__name__", ""))

    def parameter_doc(self, target: Any, parameter: str) -> Optional[str]:
        return self.answers.get(f"{target.__name__}.{parameter}")

    def field_doc(self, settings_type: type, field_name: str) -> Optional[str]:
        return self.answers.get(f"{settings_type.__name__}.{field_name}")


class FailingProvider(DescriptionProvider):
    @property
    def name(self) -> str:
        return "failing"

    def callable_doc(self, target: Any) -> Optional[str]:
        raise RuntimeError("boom")


def gather(test: str) -> None:
    """Collect things.

    Args:
        test: Text echoed back.
    """


def bare(value: int) -> None:
    pass


class Counter:
    def __call__(self, amount: int = 1) -> None:
        """Count up.

        Args:
            amount: Step size.
        """


class Settings:
    other: str = "x"


class TestRanking:
    def test_default_is_docstrings(self) -> None:
        providers = DocumentationResolver().providers
        assert [type(p) for p in providers] == [DocstringProvider]

    def test_from_config(self) -> None:
        resolver = DocumentationResolver.from_config(BuilderConfig())
        assert [type(p) for p in resolver.providers] == [
            DocstringProvider,
            ArtifactProvider,
            SourceCommentProvider,
        ]

    def test_from_config_without_source_scan(self) -> None:
        resolver = DocumentationResolver.from_config(BuilderConfig(scan_source=False))
        assert SourceCommentProvider not in [type(p) for p in resolver.providers]

    def test_first_non_empty_wins(self) -> None:
        resolver = DocumentationResolver(
            [StaticProvider({}), StaticProvider({"bare": "Second."}), StaticProvider({"bare": "Third."})]
        )
        assert resolver.describe_callable(bare) == "Second."

    def test_docstring_beats_later_provider(self) -> None:
        resolver = DocumentationResolver([DocstringProvider(), StaticProvider({"gather": "Other."})])
        assert resolver.describe_callable(gather) == "Collect things."
        assert resolver.describe_parameter(gather, "test") == "Text echoed back."

    def test_field_lookup(self) -> None:
        resolver = DocumentationResolver([StaticProvider({"Settings.other": "Free text."})])
        assert resolver.describe_field(Settings, "other") == "Free text."
        assert resolver.describe_field(Settings, "missing") is None


class TestResilience:
    def test_failing_provider_skipped(self) -> None:
        resolver = DocumentationResolver([FailingProvider(), StaticProvider({"bare": "Found."})])
        assert resolver.describe_callable(bare) == "Found."

    def test_nothing_found(self) -> None:
        assert DocumentationResolver().describe_callable(bare) is None

    def test_answers_cached(self) -> None:
        provider = StaticProvider({"bare": "Once."})
        resolver = DocumentationResolver([provider])
        resolver.describe_callable(bare)
        resolver.describe_callable(bare)
        assert provider.calls == 1

    def test_missing_answers_cached(self) -> None:
        provider = StaticProvider({})
        resolver = DocumentationResolver([provider])
        assert resolver.describe_callable(bare) is None
        assert resolver.describe_callable(bare) is None
        assert provider.calls == 1


class TestTargets:
    def test_callable_instance_documented_by_call(self) -> None:
        resolver = DocumentationResolver()
        assert resolver.describe_callable(Counter()) == "Count up."
        assert resolver.describe_parameter(Counter(), "amount") == "Step size."

    def test_partial_documented_by_wrapped_function(self) -> None:
        resolver = DocumentationResolver()
        assert resolver.describe_callable(functools.partial(gather, "x")) == "Collect things."
