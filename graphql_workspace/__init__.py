"""Incremental GraphQL project indexing with coalesced revalidation."""

from components.project import GraphQLProject
from shared.initializer import create_project

__version__ = "0.1.0"

__all__ = [
    "GraphQLProject",
    "create_project",
]
