"""Schema provider component: resolves, caches and watches the project schema."""

from .providers import (
    EmptySchemaProvider,
    FileSchemaProvider,
    GraphQLSchemaProvider,
    SchemaChangeHandler,
    SchemaResolutionError,
    schema_provider_from_config,
)

__all__ = [
    "EmptySchemaProvider",
    "FileSchemaProvider",
    "GraphQLSchemaProvider",
    "SchemaChangeHandler",
    "SchemaResolutionError",
    "schema_provider_from_config",
]
