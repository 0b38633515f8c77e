"""Ranked, cached description lookup for commands, arguments and options.

:class:`DocumentationResolver` asks its providers in order and returns the
first non-empty answer.  The default ranking is:

1. :class:`~funcli.docs.docstrings.DocstringProvider` -- docstrings,
   ``Field(description=...)`` and dataclass metadata.
2. :class:`~funcli.docs.artifact.ArtifactProvider` -- structured XML/JSON
   documentation files.
3. :class:`~funcli.docs.scanner.SourceCommentProvider` -- comments in the
   source text (skipped when ``scan_source`` is off).

Lookups never fail: a provider that raises is logged at debug level and
skipped, and "no description" is a valid answer.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from funcli.docs.artifact import ArtifactProvider
from funcli.docs.base import DescriptionProvider
from funcli.docs.docstrings import DocstringProvider
from funcli.docs.scanner import SourceCommentProvider
from funcli.models import BuilderConfig
from funcli.schema.extractor import documentation_target

logger = logging.getLogger(__name__)


class DocumentationResolver:
    """Resolve descriptions through a ranked list of providers.

    Args:
        providers: Providers in priority order.  Defaults to docstrings
            only.
    """

    def __init__(self, providers: Optional[Sequence[DescriptionProvider]] = None) -> None:
        self._providers = list(providers) if providers is not None else [DocstringProvider()]
        # key -> (subject kept alive so its id stays unique, answer)
        self._cache: dict[tuple[Any, ...], tuple[Any, Optional[str]]] = {}

    @classmethod
    def from_config(cls, config: BuilderConfig) -> DocumentationResolver:
        """Build the default provider ranking for *config*."""
        providers: list[DescriptionProvider] = [
            DocstringProvider(),
            ArtifactProvider(config.docs_paths),
        ]
        if config.scan_source:
            providers.append(SourceCommentProvider())
        return cls(providers)

    @property
    def providers(self) -> list[DescriptionProvider]:
        return list(self._providers)

    def describe_callable(self, func: Callable[..., Any]) -> Optional[str]:
        """Describe a registered callable."""
        target = documentation_target(func)
        return self._lookup("callable_doc", target)

    def describe_parameter(self, func: Callable[..., Any], parameter: str) -> Optional[str]:
        """Describe parameter *parameter* of a registered callable."""
        target = documentation_target(func)
        return self._lookup("parameter_doc", target, parameter)

    def describe_field(self, settings_type: type, field_name: str) -> Optional[str]:
        """Describe field *field_name* of a settings type."""
        return self._lookup("field_doc", settings_type, field_name)

    def _lookup(self, hook: str, subject: Any, *args: str) -> Optional[str]:
        key = (hook, id(subject), *args)
        cached = self._cache.get(key)
        if cached is not None:
            return cached[1]

        answer: Optional[str] = None
        for provider in self._providers:
            try:
                answer = getattr(provider, hook)(subject, *args)
            except Exception as exc:
                logger.debug(
                    "Description provider '%s' failed on %r: %s",
                    provider.name,
                    subject,
                    exc,
                )
                answer = None
            if answer:
                break
        self._cache[key] = (subject, answer or None)
        return answer or None
