"""Editor-facing data models shared by the project components."""

from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DocumentUri = str


class Position(BaseModel):
    """A zero-based line/character position inside a file."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=0, description="Zero-based line number")
    character: int = Field(..., ge=0, description="Zero-based character offset")

    def as_tuple(self) -> tuple:
        return (self.line, self.character)


class Range(BaseModel):
    """A span between two positions, both ends inclusive."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    def contains(self, position: Position) -> bool:
        """Check whether ``position`` lies within this range."""
        return (
            self.start.as_tuple() <= position.as_tuple() <= self.end.as_tuple()
        )


class DiagnosticSeverity(IntEnum):
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


class Diagnostic(BaseModel):
    """A single problem reported for a range of a file."""

    range: Range
    message: str = Field(..., description="Human readable description")
    severity: DiagnosticSeverity = Field(default=DiagnosticSeverity.ERROR)
    source: Optional[str] = Field(
        default=None, description="Name of the producer, e.g. 'GraphQL: Validation'"
    )


class PublishDiagnosticsParams(BaseModel):
    """The diagnostics notification for one file; an empty list clears it."""

    uri: DocumentUri
    diagnostics: List[Diagnostic] = Field(default_factory=list)


class TextDocument(BaseModel):
    """An already materialized snapshot of a file's text."""

    model_config = ConfigDict(frozen=True)

    uri: DocumentUri
    language_id: str
    version: int = -1
    text: str
