"""Document extraction component.

Turns the text of a source file into the GraphQL documents it contains:
whole ``.graphql`` files, or ``gql``/``graphql`` tagged template literals in
JavaScript and TypeScript sources.
"""

from .document import GraphQLDocument
from .extractor import EMBEDDING_LANGUAGES, extract_graphql_documents

__all__ = [
    "EMBEDDING_LANGUAGES",
    "GraphQLDocument",
    "extract_graphql_documents",
]
