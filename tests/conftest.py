"""Test fixtures and configuration."""

import logging
import sys
from pathlib import Path
from typing import Dict, List

import pytest
from shared.config import Config, ProjectConfig, SchemaConfig, WatcherConfig
from shared.models import PublishDiagnosticsParams

HERO_SCHEMA = """
type Query {
  hero: Hero
}

type Hero {
  name: String
  friends: [Hero]
}
"""


# --- This function enables logging visibility during tests ---
def pytest_configure(config):
    """Configure logging to be visible for all tests."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stdout,
    )


# -----------------------------------------------------------


class DiagnosticsRecorder:
    """Diagnostics handler that keeps every notification and the latest per file."""

    def __init__(self) -> None:
        self.calls: List[PublishDiagnosticsParams] = []
        self.latest: Dict[str, List] = {}

    def __call__(self, params: PublishDiagnosticsParams) -> None:
        self.calls.append(params)
        self.latest[params.uri] = params.diagnostics


@pytest.fixture
def diagnostics_recorder() -> DiagnosticsRecorder:
    return DiagnosticsRecorder()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a small client project on disk."""
    (tmp_path / "schema.graphql").write_text(HERO_SCHEMA)

    queries = tmp_path / "src"
    queries.mkdir()
    (queries / "hero.graphql").write_text(
        "query HeroName {\n  hero {\n    name\n  }\n}\n"
    )
    (queries / "fragments.graphql").write_text(
        "fragment HeroFriends on Hero {\n  friends { name }\n}\n"
    )
    (queries / "component.tsx").write_text(
        "import gql from 'graphql-tag';\n"
        "\n"
        "export const QUERY = gql`\n"
        "  query WithFriends {\n"
        "    hero { ...HeroFriends }\n"
        "  }\n"
        "`;\n"
    )
    (queries / "notes.md").write_text("# Not GraphQL\n")

    vendored = tmp_path / "node_modules" / "lib"
    vendored.mkdir(parents=True)
    (vendored / "ignored.graphql").write_text("query Ignored { nope }")
    return tmp_path


@pytest.fixture
def test_config(project_dir: Path) -> Config:
    """Create a client project configuration for the project on disk."""
    return Config(
        project=ProjectConfig(name="Heroes", root_dir=str(project_dir)),
        schema_source=SchemaConfig(path="schema.graphql"),
        watcher=WatcherConfig(enabled=False),  # Disable for tests
    )
