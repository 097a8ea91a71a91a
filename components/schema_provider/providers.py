"""Schema providers: where a project's GraphQL schema comes from."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union

from graphql import (
    GraphQLError,
    GraphQLSchema,
    build_client_schema,
    build_schema,
    print_schema,
)
from shared.config import Config

logger = logging.getLogger(__name__)

SchemaChangeHandler = Callable[[GraphQLSchema], None]
Unsubscribe = Callable[[], None]


class SchemaResolutionError(Exception):
    """Raised when a schema cannot be loaded."""


class GraphQLSchemaProvider(Protocol):
    async def resolve_schema(self) -> GraphQLSchema: ...

    def on_schema_change(self, handler: SchemaChangeHandler) -> Unsubscribe: ...


class _SchemaChangeNotifier:
    def __init__(self) -> None:
        self._handlers: List[SchemaChangeHandler] = []

    def on_schema_change(self, handler: SchemaChangeHandler) -> Unsubscribe:
        """Subscribe to schema changes; returns a function that unsubscribes."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _notify(self, schema: GraphQLSchema) -> None:
        for handler in list(self._handlers):
            try:
                handler(schema)
            except Exception as e:
                logger.error(f"Error in schema change handler: {e}", exc_info=True)


class FileSchemaProvider(_SchemaChangeNotifier):
    """
    Loads the schema from a file on disk and caches it.

    ``.json`` files are read as an introspection result (optionally wrapped in
    ``{"data": ...}``); anything else is read as SDL.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._schema: Optional[GraphQLSchema] = None

    def _load(self) -> GraphQLSchema:
        try:
            text = self.path.read_text(encoding="utf-8")
            if self.path.suffix == ".json":
                introspection = json.loads(text)
                introspection = introspection.get("data", introspection)
                return build_client_schema(introspection)
            return build_schema(text)
        except (OSError, ValueError, TypeError, GraphQLError) as e:
            raise SchemaResolutionError(
                f"Unable to load schema from {self.path}: {e}"
            ) from e

    async def resolve_schema(self) -> GraphQLSchema:
        if self._schema is None:
            logger.info(f"Loading schema from {self.path}")
            self._schema = await asyncio.to_thread(self._load)
        return self._schema

    async def refresh(self) -> bool:
        """
        Reload the schema file and notify subscribers if the schema changed.

        Returns:
            True when a different schema was loaded.
        """
        try:
            schema = await asyncio.to_thread(self._load)
        except SchemaResolutionError as e:
            logger.error(f"Schema reload failed, keeping previous schema: {e}")
            return False

        previous = self._schema
        if previous is not None and print_schema(previous) == print_schema(schema):
            logger.debug(f"Schema at {self.path} unchanged")
            return False

        self._schema = schema
        logger.info(f"Schema at {self.path} changed")
        self._notify(schema)
        return True


class EmptySchemaProvider(_SchemaChangeNotifier):
    """Provider used when no schema source is configured."""

    async def resolve_schema(self) -> GraphQLSchema:
        raise SchemaResolutionError(
            "No schema configured. Set schema.path in the project config."
        )


def schema_provider_from_config(config: Config) -> GraphQLSchemaProvider:
    """Create the schema provider described by the configuration."""
    schema_path = config.get_schema_path()
    if schema_path is None:
        logger.debug("No schema source configured")
        return EmptySchemaProvider()
    return FileSchemaProvider(schema_path)
