"""Tests for GraphQL document extraction."""

from components.document_extraction import (
    EMBEDDING_LANGUAGES,
    GraphQLDocument,
    extract_graphql_documents,
)
from graphql import OperationDefinitionNode, Source
from shared.models import Position, TextDocument

TS_SOURCE = (
    "const a = gql`\n"
    "  query A { a }\n"
    "`;\n"
    "const b = graphql`query B { b ${x} }`;\n"
)


def make_text_document(
    text: str, language_id: str, uri: str = "file:///a"
) -> TextDocument:
    return TextDocument(uri=uri, language_id=language_id, text=text)


def test_graphql_file_is_one_document():
    """A .graphql file yields a single document covering the whole file."""
    text = "query A { a }\n\nfragment F on T { f }\n"
    documents = extract_graphql_documents(make_text_document(text, "graphql"))

    assert len(documents) == 1
    document = documents[0]
    assert document.text == text
    assert document.range.start == Position(line=0, character=0)
    assert document.range.end == Position(line=3, character=0)
    assert len(document.ast.definitions) == 2


def test_blank_graphql_file_has_no_documents():
    assert extract_graphql_documents(make_text_document("  \n\t\n", "graphql")) is None


def test_tagged_templates_are_extracted_in_order():
    documents = extract_graphql_documents(make_text_document(TS_SOURCE, "typescript"))

    assert len(documents) == 2
    first, second = documents
    assert first.range.start == Position(line=0, character=14)
    assert first.range.end == Position(line=2, character=0)
    assert second.range.start == Position(line=3, character=18)

    names = [
        definition.name.value
        for document in documents
        for definition in document.ast.definitions
        if isinstance(definition, OperationDefinitionNode)
    ]
    assert names == ["A", "B"]


def test_interpolations_are_blanked_keeping_offsets():
    documents = extract_graphql_documents(make_text_document(TS_SOURCE, "typescript"))
    second = documents[1]

    assert second.text == "query B { b      }"
    assert len(second.text) == len("query B { b ${x} }")
    assert second.syntax_errors == []


def test_multiline_interpolation_keeps_newlines():
    text = "gql`query A { a }\n${\n  Fragment\n}`"
    documents = extract_graphql_documents(make_text_document(text, "javascript"))

    assert documents[0].text.count("\n") == 3
    assert documents[0].range.end == Position(line=3, character=1)


def test_source_without_templates_has_no_documents():
    text = "export const answer = 42;\n"
    for language_id in sorted(EMBEDDING_LANGUAGES):
        document = make_text_document(text, language_id)
        assert extract_graphql_documents(document) is None


def test_unknown_language_has_no_documents():
    document = make_text_document("query A { a }", "python")
    assert extract_graphql_documents(document) is None


def test_unterminated_template_is_ignored():
    text = "const a = gql`query A { a }"
    assert extract_graphql_documents(make_text_document(text, "javascript")) is None


def test_escaped_backtick_does_not_end_template():
    text = "gql`query A { a } # it\\`s fine\n`"
    documents = extract_graphql_documents(make_text_document(text, "javascript"))

    assert len(documents) == 1
    assert documents[0].text.endswith("\n")


def test_syntax_error_is_kept_on_document():
    documents = extract_graphql_documents(make_text_document("query {", "graphql"))

    document = documents[0]
    assert document.ast is None
    assert len(document.syntax_errors) == 1
    assert list(document.syntax_errors[0].positions) == [7]


class TestGraphQLDocument:
    """Tests for position mapping of a single document."""

    def test_position_at_first_line_is_shifted_by_start(self):
        document = GraphQLDocument(
            Source("query A { a }"), start=Position(line=3, character=18)
        )
        assert document.position_at(2) == Position(line=3, character=20)

    def test_position_at_later_lines_is_column_relative(self):
        document = GraphQLDocument(
            Source("\n  query A { a }\n"), start=Position(line=0, character=14)
        )
        assert document.position_at(3) == Position(line=1, character=2)

    def test_position_at_clamps_offset(self):
        document = GraphQLDocument(Source("query A { a }"))
        assert document.position_at(1000) == document.range.end

    def test_contains_position(self):
        document = GraphQLDocument(
            Source("\n  query A { a }\n"), start=Position(line=0, character=14)
        )
        assert document.contains_position(Position(line=1, character=4))
        assert document.contains_position(Position(line=0, character=14))
        assert not document.contains_position(Position(line=0, character=13))
        assert not document.contains_position(Position(line=2, character=1))
