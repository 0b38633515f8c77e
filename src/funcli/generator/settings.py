"""Project settings types onto ``--options`` and rebuild them after parsing.

:class:`SettingsRegistry` is memoised per settings type.  The first
:meth:`~SettingsRegistry.ensure` call for a type declares one option per
supported field on the given command node and caches a factory that builds
a fresh instance from a parse.  Later calls return the cached binding
unchanged, whatever node or naming convention they pass: the first
registration wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from funcli.generator.binders import OptionSpec, binder_for
from funcli.generator.naming import convert, to_identifier
from funcli.generator.parse_result import ParseResult
from funcli.models import NamingConvention, SettingsSchema
from funcli.schema.extractor import extract_settings_schema

if TYPE_CHECKING:
    from funcli.docs.resolver import DocumentationResolver
    from funcli.generator.command_tree import CommandNode

logger = logging.getLogger(__name__)


@dataclass
class SettingsBinding:
    """Options declared for one settings type and the factory that reads them.

    Attributes:
        schema: The extracted settings schema.
        options: Field name to declared option, for supported fields only.
        factory: ``ParseResult -> settings instance``.
        convention: Naming convention the options were declared with.
    """

    schema: SettingsSchema
    options: dict[str, OptionSpec]
    factory: Callable[[ParseResult], Any]
    convention: NamingConvention


class SettingsRegistry:
    """Per-type cache of :class:`SettingsBinding` objects.

    Args:
        resolver: Source of option help texts; ``None`` leaves them empty.
    """

    def __init__(self, resolver: Optional[DocumentationResolver] = None) -> None:
        self._resolver = resolver
        self._bindings: dict[type, SettingsBinding] = {}

    def __contains__(self, settings_type: object) -> bool:
        return settings_type in self._bindings

    def get(self, settings_type: type) -> Optional[SettingsBinding]:
        return self._bindings.get(settings_type)

    def ensure(
        self,
        settings_type: type,
        node: CommandNode,
        convention: NamingConvention = NamingConvention.SNAKE,
    ) -> SettingsBinding:
        """Return the binding for *settings_type*, declaring it on first use.

        Options are declared on *node*; they are recursive (visible to every
        subcommand) when *node* is the root command.  Fields of unsupported
        types are skipped and keep their default on built instances.

        Args:
            settings_type: A settings class (pydantic model, dataclass or
                plain class).
            node: The command that receives the options.
            convention: Naming convention for the option names.

        Returns:
            The (possibly pre-existing) binding.
        """
        existing = self._bindings.get(settings_type)
        if existing is not None:
            logger.debug(
                "Settings type %s already registered with %s names; ignoring re-registration",
                settings_type.__name__,
                existing.convention.value,
            )
            return existing

        schema = extract_settings_schema(settings_type)
        prefix = to_identifier(settings_type.__name__)
        options: dict[str, OptionSpec] = {}

        for field in schema.fields:
            binder = binder_for(field.kind)
            if binder is None:
                logger.debug(
                    "Skipping field %s.%s: unsupported type %r",
                    settings_type.__name__,
                    field.name,
                    field.annotation,
                )
                continue
            option = binder.declare_option(
                convert(field.name, convention),
                f"_{prefix}__{to_identifier(field.name)}",
                default=field.default,
                required=field.required,
                description=self._describe(settings_type, field.name),
                nullable=field.nullable,
                recursive=node.is_root,
            )
            node.add_option(option)
            options[field.name] = option

        binding = SettingsBinding(
            schema=schema,
            options=options,
            factory=_make_factory(schema, options),
            convention=NamingConvention(convention),
        )
        self._bindings[settings_type] = binding
        return binding

    def _describe(self, settings_type: type, field_name: str) -> Optional[str]:
        if self._resolver is None:
            return None
        return self._resolver.describe_field(settings_type, field_name)


def _make_factory(
    schema: SettingsSchema,
    options: dict[str, OptionSpec],
) -> Callable[[ParseResult], Any]:
    def build(parse: ParseResult) -> Any:
        overrides: dict[str, Any] = {}
        for field_name, option in options.items():
            value = option.extractor(parse)
            if value is not None:
                overrides[field_name] = value
        return schema.instantiate(overrides)

    return build
