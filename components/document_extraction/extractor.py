"""Extraction of GraphQL documents from source file text."""

import logging
import re
from typing import Iterator, List, Optional, Tuple

from graphql import Source
from shared.models import Position, TextDocument

from .document import GraphQLDocument

logger = logging.getLogger(__name__)

EMBEDDING_LANGUAGES = frozenset(
    {"javascript", "typescript", "javascriptreact", "typescriptreact"}
)

# gql`...`, graphql`...`, gql.experimental`...`
_TEMPLATE_TAG = re.compile(r"\b(?:gql|graphql)(?:\.experimental)?\s*`")


def extract_graphql_documents(
    document: TextDocument,
) -> Optional[List[GraphQLDocument]]:
    """
    Extract the GraphQL documents contained in a text snapshot.

    Args:
        document: The file snapshot, with its language id.

    Returns:
        The documents in source order, or None when the file holds no GraphQL
        (blank ``.graphql`` file, no tagged templates, unknown language).
    """
    if document.language_id == "graphql":
        if not document.text.strip():
            return None
        return [GraphQLDocument(Source(document.text, document.uri))]

    if document.language_id in EMBEDDING_LANGUAGES:
        documents = [
            GraphQLDocument(
                Source(body, document.uri),
                start=_position_of(document.text, offset),
            )
            for offset, body in _template_bodies(document.text)
        ]
        if not documents:
            return None
        logger.debug(f"Found {len(documents)} embedded documents in {document.uri}")
        return documents

    return None


def _template_bodies(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(offset, body)`` for each tagged GraphQL template literal."""
    cursor = 0
    while True:
        match = _TEMPLATE_TAG.search(text, cursor)
        if not match:
            return
        body_start = match.end()
        body, body_end = _read_template(text, body_start)
        if body_end is None:
            logger.debug(f"Unterminated template literal at offset {body_start}")
            return
        yield body_start, body
        cursor = body_end + 1


def _read_template(text: str, start: int) -> Tuple[str, Optional[int]]:
    """
    Read a template literal body starting just after its opening backtick.

    Interpolations are replaced by spaces (newlines kept) so that offsets in
    the returned body match offsets in the file.
    """
    chars: List[str] = []
    i = start
    length = len(text)
    while i < length:
        char = text[i]
        if char == "\\" and i + 1 < length:
            chars.append(text[i : i + 2])
            i += 2
        elif char == "`":
            return "".join(chars), i
        elif char == "$" and i + 1 < length and text[i + 1] == "{":
            end = _interpolation_end(text, i + 2)
            if end is None:
                return "".join(chars), None
            chars.append(_blank(text[i : end + 1]))
            i = end + 1
        else:
            chars.append(char)
            i += 1
    return "".join(chars), None


def _interpolation_end(text: str, start: int) -> Optional[int]:
    depth = 1
    for i in range(start, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def _blank(segment: str) -> str:
    return "".join("\n" if c == "\n" else " " for c in segment)


def _position_of(text: str, offset: int) -> Position:
    prefix = text[:offset]
    line = prefix.count("\n")
    return Position(line=line, character=offset - prefix.rfind("\n") - 1)
