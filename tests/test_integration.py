"""Integration tests for a project built from configuration."""

import pytest
import pytest_asyncio
from shared.initializer import create_project
from shared.uris import normalize_uri


@pytest_asyncio.fixture
async def project(test_config, diagnostics_recorder):
    project = create_project(test_config)
    project.on_diagnostics(diagnostics_recorder)
    await project.when_ready()
    await project.scan_all_included_files()
    await project.scheduler.drain()
    yield project
    project.dispose()


@pytest.mark.asyncio
async def test_scan_indexes_in_scope_documents(project, project_dir):
    indexed = sorted(project.index.uris())

    assert indexed == sorted(
        normalize_uri(project_dir / "src" / name)
        for name in ("component.tsx", "fragments.graphql", "hero.graphql")
    )
    assert len(project.documents) == 3


@pytest.mark.asyncio
async def test_valid_project_publishes_empty_diagnostics(
    project, diagnostics_recorder
):
    assert set(diagnostics_recorder.latest) == set(project.index.uris())
    assert all(not diagnostics for diagnostics in diagnostics_recorder.latest.values())


@pytest.mark.asyncio
async def test_edit_introduces_and_fixes_an_error(
    project, project_dir, diagnostics_recorder
):
    hero = project_dir / "src" / "hero.graphql"
    uri = normalize_uri(hero)

    hero.write_text("query HeroName {\n  hero {\n    age\n  }\n}\n")
    await project.file_did_change(hero)
    await project.scheduler.drain()

    [diagnostic] = diagnostics_recorder.latest[uri]
    assert diagnostic.range.start.line == 2
    assert diagnostic.range.start.character == 4

    hero.write_text("query HeroName {\n  hero {\n    name\n  }\n}\n")
    await project.file_did_change(hero)
    await project.scheduler.drain()

    assert diagnostics_recorder.latest[uri] == []


@pytest.mark.asyncio
async def test_deleting_a_fragment_file_breaks_its_spreads(
    project, project_dir, diagnostics_recorder
):
    fragments = project_dir / "src" / "fragments.graphql"
    fragments.unlink()
    project.file_was_deleted(fragments)
    await project.scheduler.drain()

    assert diagnostics_recorder.latest[normalize_uri(fragments)] == []
    component = normalize_uri(project_dir / "src" / "component.tsx")
    [diagnostic] = diagnostics_recorder.latest[component]
    assert diagnostic.message == "Unknown fragment 'HeroFriends'."
    assert diagnostic.range.start.line == 4


@pytest.mark.asyncio
async def test_dispose_clears_every_file(project, diagnostics_recorder):
    diagnostics_recorder.calls.clear()
    project.dispose()

    assert {params.uri for params in diagnostics_recorder.calls} == set(
        project.index.uris()
    )
