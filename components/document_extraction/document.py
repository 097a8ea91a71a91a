"""The GraphQL document model: one parsed unit of GraphQL inside a file."""

import logging
from typing import List, Optional

from graphql import DocumentNode, GraphQLError, GraphQLSyntaxError, Source, parse
from shared.models import Position, Range

logger = logging.getLogger(__name__)


class GraphQLDocument:
    """
    A GraphQL document embedded in a source file.

    For ``.graphql`` files the document covers the whole file; for JavaScript
    and TypeScript files it covers the body of one tagged template literal.
    ``start`` is the file position of the first character of the body, so
    offsets into ``source.body`` can be mapped back to file positions.
    """

    def __init__(self, source: Source, start: Optional[Position] = None):
        self.source = source
        self.start = start or Position(line=0, character=0)
        self.syntax_errors: List[GraphQLError] = []
        self.ast: Optional[DocumentNode] = None

        try:
            self.ast = parse(source)
        except GraphQLSyntaxError as error:
            logger.debug(f"Syntax error in {source.name}: {error.message}")
            self.syntax_errors.append(error)

        self.range = Range(start=self.start, end=self.position_at(len(source.body)))

    @property
    def text(self) -> str:
        return self.source.body

    def position_at(self, offset: int) -> Position:
        """Map an offset into the document body to a position in the file."""
        offset = max(0, min(offset, len(self.source.body)))
        prefix = self.source.body[:offset]
        newlines = prefix.count("\n")
        if newlines == 0:
            return Position(
                line=self.start.line, character=self.start.character + offset
            )
        return Position(
            line=self.start.line + newlines,
            character=offset - prefix.rfind("\n") - 1,
        )

    def contains_position(self, position: Position) -> bool:
        return self.range.contains(position)

    def __repr__(self) -> str:
        return (
            f"GraphQLDocument(name={self.source.name!r}, "
            f"start={self.start.as_tuple()}, end={self.range.end.as_tuple()})"
        )
