"""
Project variants: what initializing and validating means for a project.

A ``GraphQLProject`` owns the document index and the scheduling; the variant
it is given decides which asynchronous work must finish before the project is
ready, and what a validation pass does with the indexed documents.

- ``ClientProjectVariant``: operations and fragments checked against a schema
  resolved from the schema provider.
- ``ServiceProjectVariant``: the project *is* the schema; its type system
  definitions are checked as SDL.
"""

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Dict, List, Optional, Protocol

from components.document_extraction import GraphQLDocument
from components.schema_provider import SchemaResolutionError
from graphql import (
    DocumentNode,
    FragmentDefinitionNode,
    GraphQLError,
    GraphQLSchema,
    NoUnusedFragmentsRule,
    extend_schema,
    is_executable_definition_node,
    specified_rules,
    validate,
)
from graphql.validation.validate import validate_sdl
from shared.config import Config

from .validation import belongs_to, diagnostics_for_errors, syntax_diagnostics

if TYPE_CHECKING:
    from .project import GraphQLProject

logger = logging.getLogger(__name__)

# Fragments can be spread from other files
CLIENT_VALIDATION_RULES = [
    rule for rule in specified_rules if rule is not NoUnusedFragmentsRule
]


class ProjectVariant(Protocol):
    display_name: str

    def initialize(self, project: "GraphQLProject") -> List[Awaitable[Any]]: ...

    def validate(self, project: "GraphQLProject") -> Optional[Awaitable[None]]: ...

    def dispose(self) -> None: ...


class ClientProjectVariant:
    """A project of operations validated against a schema."""

    def __init__(self, display_name: str = "Unnamed Project"):
        self.display_name = display_name
        self._unsubscribe = None

    def initialize(self, project: "GraphQLProject") -> List[Awaitable[Any]]:
        return [self._load_schema(project)]

    async def _load_schema(self, project: "GraphQLProject") -> None:
        await project.resolve_schema()
        self._unsubscribe = project.on_schema_change(
            lambda _schema: project.invalidate()
        )

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def validate(self, project: "GraphQLProject") -> None:
        try:
            schema = await project.resolve_schema()
        except SchemaResolutionError as e:
            logger.error(f"Skipping validation of {self.display_name}: {e}")
            return

        schema = self._with_client_extensions(project, schema)
        fragments = self._fragments(project.documents)

        for uri, documents in project.index.items():
            diagnostics = []
            for document in documents:
                diagnostics.extend(syntax_diagnostics(document))
                errors = self._validate_document(schema, document, fragments)
                diagnostics.extend(
                    diagnostics_for_errors(
                        document, errors, source="GraphQL: Validation"
                    )
                )
            project.diagnostics.publish(uri, diagnostics)

        logger.debug(f"Validated {len(project.index)} files of {self.display_name}")

    @staticmethod
    def _with_client_extensions(
        project: "GraphQLProject", schema: GraphQLSchema
    ) -> GraphQLSchema:
        """Apply type definitions and extensions declared in client documents."""
        nodes = project.type_system_definitions_and_extensions
        if not nodes:
            return schema
        try:
            return extend_schema(schema, DocumentNode(definitions=tuple(nodes)))
        except (GraphQLError, TypeError) as e:
            logger.warning(f"Ignoring invalid client schema extensions: {e}")
            return schema

    @staticmethod
    def _fragments(
        documents: List[GraphQLDocument],
    ) -> Dict[str, FragmentDefinitionNode]:
        fragments: Dict[str, FragmentDefinitionNode] = {}
        for document in documents:
            if not document.ast:
                continue
            for definition in document.ast.definitions:
                if isinstance(definition, FragmentDefinitionNode):
                    fragments.setdefault(definition.name.value, definition)
        return fragments

    @staticmethod
    def _validate_document(
        schema: GraphQLSchema,
        document: GraphQLDocument,
        fragments: Dict[str, FragmentDefinitionNode],
    ) -> List[GraphQLError]:
        if not document.ast:
            return []

        executable = [
            definition
            for definition in document.ast.definitions
            if is_executable_definition_node(definition)
        ]
        if not executable:
            return []

        local_fragments = {
            definition.name.value
            for definition in executable
            if isinstance(definition, FragmentDefinitionNode)
        }
        external_fragments = [
            fragment
            for name, fragment in fragments.items()
            if name not in local_fragments
        ]
        document_ast = DocumentNode(definitions=tuple(executable + external_fragments))
        errors = validate(schema, document_ast, CLIENT_VALIDATION_RULES)
        return [error for error in errors if belongs_to(error, document)]


class ServiceProjectVariant:
    """A project whose documents define the schema itself."""

    def __init__(self, display_name: str = "Unnamed Project"):
        self.display_name = display_name

    def initialize(self, project: "GraphQLProject") -> List[Awaitable[Any]]:
        return []

    def dispose(self) -> None:
        pass

    def validate(self, project: "GraphQLProject") -> None:
        nodes = project.type_system_definitions_and_extensions
        errors = validate_sdl(DocumentNode(definitions=tuple(nodes))) if nodes else []

        for uri, documents in project.index.items():
            diagnostics = []
            for document in documents:
                diagnostics.extend(syntax_diagnostics(document))
                diagnostics.extend(
                    diagnostics_for_errors(
                        document,
                        [
                            error
                            for error in errors
                            if error.source is document.source
                        ],
                        source="GraphQL: Schema",
                    )
                )
            project.diagnostics.publish(uri, diagnostics)


def variant_from_config(config: Config) -> ProjectVariant:
    """Pick the project variant named by ``project.kind``."""
    if config.project.kind == "service":
        return ServiceProjectVariant(config.project.name)
    return ClientProjectVariant(config.project.name)
