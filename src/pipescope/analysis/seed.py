"""
Seed scope construction.

Before traversal starts, the variables available to the first step are
collected from external collaborators: the integration context, the input
reader's output schema and the option arguments. Collaborators are passed
in as async callables. A failing collaborator contributes nothing and is
logged; it never aborts the analysis.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from pipescope.analysis.scope import WILDCARD_SUFFIX, Scope, VarExistence
from pipescope.analysis.settings import DEFAULT_SETTINGS, VarAnalysisSettings
from pipescope.core.pipeline import AnalysisSource, IntegrationDependency
from pipescope.core.types import ContextObject, Schema

logger = logging.getLogger(__name__)

ReaderSchemaLookup = Callable[[str | None], Awaitable[Schema | None]]

IntegrationContextFactory = Callable[
    [Sequence[IntegrationDependency]], Awaitable[ContextObject]
]

SERVICE_KEY = "__service"


def get_vars_from_object(obj: Any) -> list[str]:
    """
    Flatten a nested object into dotted variable paths.

    Every key yields its own path; mapping and list values additionally
    yield the paths of their children, list items keyed by index.

    Params:
        obj: Mapping or list to flatten; scalars yield nothing

    Returns:
        Dotted paths in depth-first order

    Examples:
        {"a": {"b": 1}} -> ["a", "a.b"]
        {"xs": ["p"]} -> ["xs", "xs.0"]
    """
    if isinstance(obj, Mapping):
        entries = ((str(key), value) for key, value in obj.items())
    elif isinstance(obj, (list, tuple)):
        entries = ((str(index), value) for index, value in enumerate(obj))
    else:
        return []

    paths: list[str] = []
    for key, value in entries:
        paths.append(key)
        paths.extend(f"{key}.{nested}" for nested in get_vars_from_object(value))
    return paths


def schema_to_placeholder(schema: Schema, nested: bool = True) -> dict[str, Any]:
    """
    Build a placeholder object shaped like a JSON schema's properties.

    Params:
        schema: Object schema with a ``properties`` mapping
        nested: Descend into object properties that declare their own properties

    Returns:
        Mapping of property name to placeholder (empty string or nested mapping)
    """
    properties = schema.get("properties") or {}
    placeholder: dict[str, Any] = {}
    for name, property_schema in properties.items():
        if (
            nested
            and isinstance(property_schema, Mapping)
            and property_schema.get("properties")
        ):
            placeholder[name] = schema_to_placeholder(property_schema, nested)
        else:
            placeholder[name] = ""
    return placeholder


async def default_integration_context(
    integrations: Sequence[IntegrationDependency],
) -> ContextObject:
    """Bind a placeholder under ``@<output_key>`` for each integration.

    Only the service descriptor is known without reading the integration's
    configuration; its other properties are covered by a wildcard in the
    seed scope.
    """
    return {
        f"@{dependency.output_key}": {SERVICE_KEY: {}} for dependency in integrations
    }


async def _resolve_safely(description: str, resolver: Callable[..., Awaitable[Any]], *args: Any) -> Any:
    try:
        return await resolver(*args)
    except Exception as e:
        logger.warning("Failed to resolve %s, continuing without it: %s", description, e)
        return None


async def build_seed_scope(
    source: AnalysisSource,
    reader_schema_lookup: ReaderSchemaLookup | None = None,
    integration_context_factory: IntegrationContextFactory | None = default_integration_context,
    settings: VarAnalysisSettings = DEFAULT_SETTINGS,
) -> Scope:
    """
    Collect the variables bound before the first step runs.

    Params:
        source: Source being analysed
        reader_schema_lookup: Resolves the trigger's input reader schema
        integration_context_factory: Resolves the integration context
        settings: Namespaces and flattening options

    Returns:
        Scope with every seed variable bound DEFINITELY, followed by a MAYBE
        wildcard for each bound integration
    """
    context: dict[str, Any] = {}
    integration_wildcards: list[str] = []

    if source.integrations and integration_context_factory is not None:
        integration_context = await _resolve_safely(
            "integration context", integration_context_factory, source.integrations
        )
        if integration_context:
            context.update(integration_context)
            integration_wildcards = [
                f"@{dependency.output_key}{WILDCARD_SUFFIX}"
                for dependency in source.integrations
                if f"@{dependency.output_key}" in integration_context
            ]

    if reader_schema_lookup is not None:
        schema = await _resolve_safely(
            f"input schema for {source.trigger_type!r}",
            reader_schema_lookup,
            source.trigger_type,
        )
        if schema:
            reader_placeholder = schema_to_placeholder(
                schema, nested=settings.flatten_reader_properties
            )
            if reader_placeholder:
                context[settings.input_namespace] = reader_placeholder

    if source.options_args:
        context[settings.options_namespace] = source.options_args

    seed = Scope.definitely(get_vars_from_object(context))
    return seed.union(
        Scope((name, VarExistence.MAYBE) for name in integration_wildcards)
    )
