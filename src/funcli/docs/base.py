"""Abstract base class for description providers.

A provider answers three questions about a registered callable or settings
type: its description, the description of one parameter, and the
description of one settings field.  Every hook defaults to ``None`` so a
provider only overrides what its source can answer.

Providers are ranked by :class:`~funcli.docs.resolver.DocumentationResolver`;
the first non-empty answer wins.

Example:
    Minimal provider backed by a dictionary::

        class StaticProvider(DescriptionProvider):
            @property
            def name(self) -> str:
                return "static"

            def callable_doc(self, target):
                return {"gather": "Collect things."}.get(target.__name__)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class DescriptionProvider(ABC):
    """Base class for all description providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short identifier used in debug logs."""
        ...

    def callable_doc(self, target: Any) -> Optional[str]:
        """Describe the function, method or class *target*."""
        return None

    def parameter_doc(self, target: Any, parameter: str) -> Optional[str]:
        """Describe parameter *parameter* of *target*."""
        return None

    def field_doc(self, settings_type: type, field_name: str) -> Optional[str]:
        """Describe field *field_name* of *settings_type*."""
        return None
