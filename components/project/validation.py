"""Conversion of graphql-core errors into file diagnostics."""

from typing import Iterable, List, Tuple

from components.document_extraction import GraphQLDocument
from graphql import GraphQLError
from shared.models import Diagnostic, DiagnosticSeverity, Range


def _error_span(error: GraphQLError) -> Tuple[int, int]:
    if error.nodes:
        loc = error.nodes[0].loc
        if loc is not None:
            return loc.start, loc.end
    if error.positions:
        return error.positions[0], error.positions[0]
    return 0, 0


def belongs_to(error: GraphQLError, document: GraphQLDocument) -> bool:
    """True when the error points into ``document`` (or nowhere in particular)."""
    return error.source is None or error.source is document.source


def diagnostics_for_errors(
    document: GraphQLDocument,
    errors: Iterable[GraphQLError],
    source: str,
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR,
) -> List[Diagnostic]:
    diagnostics = []
    for error in errors:
        start, end = _error_span(error)
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=document.position_at(start), end=document.position_at(end)
                ),
                message=error.message,
                severity=severity,
                source=source,
            )
        )
    return diagnostics


def syntax_diagnostics(document: GraphQLDocument) -> List[Diagnostic]:
    return diagnostics_for_errors(
        document, document.syntax_errors, source="GraphQL: Syntax"
    )
