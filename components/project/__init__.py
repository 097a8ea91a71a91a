"""Project component.

The incremental state core of a GraphQL project: the per-file document index,
the readiness gate, the coalescing revalidation scheduler and the diagnostics
surface, composed by ``GraphQLProject``.
"""

from .diagnostics import DiagnosticsHandler, DiagnosticsSurface
from .document_index import DocumentIndex
from .project import FILE_ASSOCIATIONS, GraphQLProject
from .readiness import ProjectInitializationError, ReadinessGate
from .scheduler import RevalidationScheduler
from .variants import (
    ClientProjectVariant,
    ProjectVariant,
    ServiceProjectVariant,
    variant_from_config,
)

__all__ = [
    "ClientProjectVariant",
    "DiagnosticsHandler",
    "DiagnosticsSurface",
    "DocumentIndex",
    "FILE_ASSOCIATIONS",
    "GraphQLProject",
    "ProjectInitializationError",
    "ProjectVariant",
    "ReadinessGate",
    "RevalidationScheduler",
    "ServiceProjectVariant",
    "variant_from_config",
]
