"""Tests for schema providers."""

import json
from unittest.mock import Mock

import pytest
from graphql import GraphQLSchema, build_schema, introspection_from_schema
from shared.config import Config, ProjectConfig, SchemaConfig

from ..providers import (
    EmptySchemaProvider,
    FileSchemaProvider,
    SchemaResolutionError,
    schema_provider_from_config,
)

SDL = "type Query { hero: Hero }\ntype Hero { name: String }\n"


@pytest.fixture
def sdl_file(tmp_path):
    path = tmp_path / "schema.graphql"
    path.write_text(SDL)
    return path


@pytest.mark.asyncio
async def test_resolves_sdl_schema(sdl_file):
    provider = FileSchemaProvider(sdl_file)
    schema = await provider.resolve_schema()

    assert isinstance(schema, GraphQLSchema)
    assert schema.get_type("Hero") is not None


@pytest.mark.asyncio
async def test_resolved_schema_is_cached(sdl_file):
    provider = FileSchemaProvider(sdl_file)
    first = await provider.resolve_schema()
    sdl_file.write_text("type Query { other: Int }")

    assert await provider.resolve_schema() is first


@pytest.mark.asyncio
@pytest.mark.parametrize("wrap_in_data", [False, True])
async def test_resolves_introspection_json(tmp_path, wrap_in_data):
    introspection = introspection_from_schema(build_schema(SDL))
    payload = {"data": introspection} if wrap_in_data else introspection
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(payload))

    schema = await FileSchemaProvider(path).resolve_schema()

    assert schema.get_type("Hero") is not None


@pytest.mark.asyncio
async def test_missing_file_raises_resolution_error(tmp_path):
    provider = FileSchemaProvider(tmp_path / "missing.graphql")
    with pytest.raises(SchemaResolutionError, match="missing.graphql"):
        await provider.resolve_schema()


@pytest.mark.asyncio
async def test_invalid_sdl_raises_resolution_error(tmp_path):
    path = tmp_path / "broken.graphql"
    path.write_text("type Query {")
    with pytest.raises(SchemaResolutionError):
        await FileSchemaProvider(path).resolve_schema()


class TestRefresh:
    """Tests for reloading and change notification."""

    @pytest.mark.asyncio
    async def test_changed_schema_notifies_subscribers(self, sdl_file):
        provider = FileSchemaProvider(sdl_file)
        await provider.resolve_schema()
        handler = Mock()
        provider.on_schema_change(handler)

        sdl_file.write_text(SDL + "extend type Hero { age: Int }\n")
        assert await provider.refresh() is True

        handler.assert_called_once()
        new_schema = handler.call_args[0][0]
        assert "age" in new_schema.get_type("Hero").fields
        assert await provider.resolve_schema() is new_schema

    @pytest.mark.asyncio
    async def test_unchanged_schema_does_not_notify(self, sdl_file):
        provider = FileSchemaProvider(sdl_file)
        await provider.resolve_schema()
        handler = Mock()
        provider.on_schema_change(handler)

        assert await provider.refresh() is False
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_broken_reload_keeps_previous_schema(self, sdl_file):
        provider = FileSchemaProvider(sdl_file)
        schema = await provider.resolve_schema()
        handler = Mock()
        provider.on_schema_change(handler)

        sdl_file.write_text("type Query {")
        assert await provider.refresh() is False

        handler.assert_not_called()
        assert await provider.resolve_schema() is schema

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_notifications(self, sdl_file):
        provider = FileSchemaProvider(sdl_file)
        await provider.resolve_schema()
        handler = Mock()
        unsubscribe = provider.on_schema_change(handler)
        unsubscribe()

        sdl_file.write_text("type Query { other: Int }")
        await provider.refresh()

        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self, sdl_file):
        provider = FileSchemaProvider(sdl_file)
        await provider.resolve_schema()
        failing = Mock(side_effect=RuntimeError("boom"))
        handler = Mock()
        provider.on_schema_change(failing)
        provider.on_schema_change(handler)

        sdl_file.write_text("type Query { other: Int }")
        await provider.refresh()

        handler.assert_called_once()


@pytest.mark.asyncio
async def test_empty_provider_raises():
    with pytest.raises(SchemaResolutionError, match="No schema configured"):
        await EmptySchemaProvider().resolve_schema()


def test_provider_from_config(tmp_path):
    config = Config(
        project=ProjectConfig(root_dir=str(tmp_path)),
        schema_source=SchemaConfig(path="schema.graphql"),
    )
    provider = schema_provider_from_config(config)

    assert isinstance(provider, FileSchemaProvider)
    assert provider.path == (tmp_path / "schema.graphql").resolve()


def test_provider_from_config_without_schema():
    assert isinstance(schema_provider_from_config(Config()), EmptySchemaProvider)
