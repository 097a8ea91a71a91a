"""
The GraphQL project: a live index of the GraphQL documents of one project.

File events (from an editor or a filesystem watcher) come in through
``file_did_change``, ``document_did_change`` and ``file_was_deleted``. Each
event re-extracts the documents of one file and replaces its entry in the
document index; every effective change asks the scheduler for a validation
pass, and bursts of changes are coalesced into one pass. No pass runs before
the project's initialization tasks have all resolved.

File reads happen off the event loop thread and their results are applied in
completion order, so for overlapping events on the same file the index holds
the last *completed* read. The validation pass always sees the index as it is
when the pass runs.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Union

from components.document_extraction import GraphQLDocument, extract_graphql_documents
from components.engine_client import (
    ClientIdentity,
    EngineClient,
    EngineNotConfiguredError,
    engine_client_from_config,
)
from components.file_set import FileSet
from components.loading_handler import LoadingHandler
from components.schema_provider import (
    GraphQLSchemaProvider,
    SchemaChangeHandler,
    schema_provider_from_config,
)
from graphql import GraphQLSchema
from shared.config import Config
from shared.models import DocumentUri, Position, TextDocument
from shared.uris import normalize_uri, uri_to_path

from .diagnostics import DiagnosticsHandler, DiagnosticsSurface
from .document_index import DocumentIndex, TypeSystemNode
from .readiness import ReadinessGate
from .scheduler import RevalidationScheduler
from .variants import ProjectVariant

logger = logging.getLogger(__name__)

FILE_ASSOCIATIONS: Dict[str, str] = {
    ".graphql": "graphql",
    ".js": "javascript",
    ".ts": "typescript",
    ".jsx": "javascriptreact",
    ".tsx": "typescriptreact",
}


class GraphQLProject:
    """
    Orchestrates the document index, the readiness gate, the revalidation
    scheduler and the diagnostics surface of one project.

    Must be constructed inside a running event loop: construction starts the
    variant's initialization tasks.
    """

    def __init__(
        self,
        config: Config,
        file_set: FileSet,
        loading_handler: LoadingHandler,
        variant: ProjectVariant,
        schema_provider: Optional[GraphQLSchemaProvider] = None,
        client_identity: Optional[ClientIdentity] = None,
    ):
        self.config = config
        self.file_set = file_set
        self.loading_handler = loading_handler
        self.variant = variant
        self.schema_provider = schema_provider or schema_provider_from_config(config)
        self._engine_client = engine_client_from_config(config.engine, client_identity)

        self.diagnostics = DiagnosticsSurface()
        self._gate = ReadinessGate(
            self.display_name, on_error=loading_handler.show_error
        )
        self.scheduler = RevalidationScheduler(self._gate, self.validate)
        self.index = DocumentIndex(self.diagnostics, self.scheduler.invalidate)

        # Changes absorbed while initializing get one pass once ready
        self._gate.add_ready_callback(self.scheduler.invalidate)
        self._gate.start(variant.initialize(self))

    @property
    def display_name(self) -> str:
        return self.variant.display_name

    # Readiness

    @property
    def is_ready(self) -> bool:
        return self._gate.is_ready

    @property
    def initialization_failed(self) -> bool:
        return self._gate.failed

    async def when_ready(self) -> None:
        """
        Wait for initialization to finish.

        Raises:
            ProjectInitializationError: If any initialization task failed.
        """
        await self._gate.when_ready()

    # Collaborators

    @property
    def engine(self) -> Optional[EngineClient]:
        """The engine client, or None when no API key is configured."""
        return self._engine_client

    def require_engine(self) -> EngineClient:
        """
        Return the engine client for features that cannot work without it.

        Raises:
            EngineNotConfiguredError: If no engine API key is configured.
        """
        if self._engine_client is None:
            raise EngineNotConfiguredError("Unable to find ENGINE_API_KEY")
        return self._engine_client

    async def resolve_schema(self) -> GraphQLSchema:
        return await self.schema_provider.resolve_schema()

    def on_schema_change(self, handler: SchemaChangeHandler) -> Callable[[], None]:
        return self.schema_provider.on_schema_change(handler)

    def on_diagnostics(self, handler: Optional[DiagnosticsHandler]) -> None:
        self.diagnostics.on_diagnostics(handler)

    def includes_file(self, uri: Union[DocumentUri, Path]) -> bool:
        path = uri_to_path(uri) if isinstance(uri, str) else uri
        return self.file_set.includes_file(path)

    # File lifecycle

    async def scan_all_included_files(self) -> None:
        """Load every in-scope file that no editor event has loaded yet."""
        await self.loading_handler.handle(
            f"Loading queries for {self.display_name}", self._scan()
        )

    async def _scan(self) -> None:
        file_paths = await asyncio.to_thread(self.file_set.all_files)
        for file_path in file_paths:
            uri = normalize_uri(file_path)
            # Already opened or changed before the scan got to it
            if uri in self.index:
                continue
            await self.file_did_change(uri)

    async def file_did_change(self, uri: Union[DocumentUri, Path]) -> None:
        """Re-read a file from disk and re-index its documents."""
        uri = normalize_uri(uri)
        file_path = uri_to_path(uri)
        language_id = FILE_ASSOCIATIONS.get(file_path.suffix)
        if not language_id:
            return

        try:
            contents = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {file_path}: {e}")
            return

        self.document_did_change(
            TextDocument(uri=uri, language_id=language_id, text=contents)
        )

    def document_did_change(self, document: TextDocument) -> None:
        """Re-index a file from a text snapshot the caller already holds."""
        uri = normalize_uri(document.uri)
        if uri != document.uri:
            document = document.model_copy(update={"uri": uri})

        documents = extract_graphql_documents(document)
        if documents:
            self.index.set_documents(uri, documents)
        else:
            self.index.remove_documents(uri)

    def file_was_deleted(self, uri: Union[DocumentUri, Path]) -> None:
        self.index.remove_documents(normalize_uri(uri))

    # Validation

    def invalidate(self) -> None:
        self.scheduler.invalidate()

    def validate(self) -> Optional[Awaitable[None]]:
        return self.variant.validate(self)

    def clear_all_diagnostics(self) -> None:
        self.diagnostics.clear_all(self.index.uris())

    def dispose(self) -> None:
        """Tear the project down: clear published diagnostics, drop subscriptions."""
        self.clear_all_diagnostics()
        self.variant.dispose()

    # Queries

    def documents_at(
        self, uri: Union[DocumentUri, Path]
    ) -> Optional[List[GraphQLDocument]]:
        return self.index.documents_for(normalize_uri(uri))

    def document_at(
        self, uri: Union[DocumentUri, Path], position: Position
    ) -> Optional[GraphQLDocument]:
        return self.index.document_at(normalize_uri(uri), position)

    @property
    def documents(self) -> List[GraphQLDocument]:
        return self.index.all_documents()

    @property
    def type_system_definitions_and_extensions(self) -> List[TypeSystemNode]:
        return self.index.type_system_nodes()
