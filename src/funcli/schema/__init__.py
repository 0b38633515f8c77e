"""Introspection of callables and settings types."""

from funcli.schema.extractor import (
    extract_callable_schema,
    extract_settings_schema,
    is_settings_type,
)

__all__ = ["extract_callable_schema", "extract_settings_schema", "is_settings_type"]
