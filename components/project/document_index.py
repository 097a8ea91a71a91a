"""The mapping from each file to the GraphQL documents it currently contains."""

import logging
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Union

from components.document_extraction import GraphQLDocument
from graphql import (
    TypeSystemDefinitionNode,
    TypeSystemExtensionNode,
    is_type_system_definition_node,
    is_type_system_extension_node,
)
from shared.models import DocumentUri, Position

from .diagnostics import DiagnosticsSurface

logger = logging.getLogger(__name__)

TypeSystemNode = Union[TypeSystemDefinitionNode, TypeSystemExtensionNode]


class DocumentIndex:
    """
    Single source of truth for which documents are loaded.

    Every mutation replaces a file's entry as a whole; a file is never stored
    with an empty list. Removing a file publishes cleared diagnostics for it.
    Each effective mutation calls ``on_change`` (the revalidation trigger).
    """

    def __init__(
        self,
        diagnostics: DiagnosticsSurface,
        on_change: Callable[[], None],
    ):
        self._diagnostics = diagnostics
        self._on_change = on_change
        self._documents_by_file: Dict[DocumentUri, List[GraphQLDocument]] = {}

    def set_documents(
        self, uri: DocumentUri, documents: Optional[Sequence[GraphQLDocument]]
    ) -> None:
        """Replace the documents of ``uri``; no documents means remove the file."""
        if not documents:
            self.remove_documents(uri)
            return

        self._documents_by_file[uri] = list(documents)
        logger.debug(f"Indexed {len(documents)} documents for {uri}")
        self._on_change()

    def remove_documents(self, uri: DocumentUri) -> None:
        """Forget ``uri``; does nothing if it is not indexed."""
        if uri not in self._documents_by_file:
            return

        del self._documents_by_file[uri]
        logger.debug(f"Removed documents for {uri}")
        self._diagnostics.clear(uri)
        self._on_change()

    def documents_for(self, uri: DocumentUri) -> Optional[List[GraphQLDocument]]:
        documents = self._documents_by_file.get(uri)
        return list(documents) if documents is not None else None

    def document_at(
        self, uri: DocumentUri, position: Position
    ) -> Optional[GraphQLDocument]:
        """The first document of ``uri`` whose range contains ``position``."""
        for document in self._documents_by_file.get(uri, ()):
            if document.contains_position(position):
                return document
        return None

    def all_documents(self) -> List[GraphQLDocument]:
        documents: List[GraphQLDocument] = []
        for documents_for_file in self._documents_by_file.values():
            documents.extend(documents_for_file)
        return documents

    def type_system_nodes(self) -> List[TypeSystemNode]:
        """Top-level type system definitions and extensions of all documents."""
        nodes: List[TypeSystemNode] = []
        for document in self.all_documents():
            if not document.ast:
                continue
            for definition in document.ast.definitions:
                if is_type_system_definition_node(
                    definition
                ) or is_type_system_extension_node(definition):
                    nodes.append(definition)
        return nodes

    def uris(self) -> List[DocumentUri]:
        return list(self._documents_by_file)

    def items(self) -> Iterator:
        for uri, documents in self._documents_by_file.items():
            yield uri, list(documents)

    def __contains__(self, uri: object) -> bool:
        return uri in self._documents_by_file

    def __len__(self) -> int:
        return len(self._documents_by_file)
