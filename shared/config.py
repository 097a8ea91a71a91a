"""Configuration management for GraphQL workspace projects."""

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

import toml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_ENDPOINT = "https://engine-graphql.apollographql.com/api/graphql"


class ProjectConfig(BaseModel):
    """Configuration for the project identity and its file scope."""

    name: str = Field(default="GraphQL project", description="Display name")
    root_dir: str = Field(default=".", description="Root directory of the project")
    kind: Literal["client", "service"] = Field(
        default="client",
        description="client: operations validated against a schema; "
        "service: type definitions validated as SDL",
    )
    includes: List[str] = Field(
        default_factory=lambda: [
            "**/*.graphql",
            "**/*.js",
            "**/*.ts",
            "**/*.jsx",
            "**/*.tsx",
        ],
        description="Glob patterns (relative to root_dir) of files in scope",
    )
    excludes: List[str] = Field(
        default_factory=lambda: ["**/node_modules/**", "**/__tests__/**"],
        description="Glob patterns (relative to root_dir) of files out of scope",
    )


class SchemaConfig(BaseModel):
    """Configuration for the schema source."""

    path: Optional[str] = Field(
        default=None,
        description="SDL (.graphql/.graphqls) or introspection result (.json)",
    )


class EngineConfig(BaseModel):
    """Configuration for the optional engine client."""

    api_key: Optional[str] = Field(default=None, description="Engine API key")
    endpoint: str = Field(
        default=DEFAULT_ENGINE_ENDPOINT, description="Engine GraphQL endpoint"
    )


class WatcherConfig(BaseModel):
    """Configuration for file watching."""

    enabled: bool = Field(default=True, description="Enable file watching")
    debounce_seconds: float = Field(
        default=0.25, description="Quiet period before a changed file is re-read"
    )


class Config(BaseModel):
    """Main configuration model."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    schema_source: SchemaConfig = Field(default_factory=SchemaConfig, alias="schema")
    engine: EngineConfig = Field(default_factory=EngineConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)

    model_config = ConfigDict(populate_by_name=True)

    def get_root_path(self) -> Path:
        """Get the project root directory as a Path object."""
        return Path(self.project.root_dir).expanduser().resolve()

    def get_schema_path(self) -> Optional[Path]:
        """Get the schema file, resolved against the project root."""
        if not self.schema_source.path:
            return None
        schema_path = Path(self.schema_source.path).expanduser()
        if not schema_path.is_absolute():
            schema_path = self.get_root_path() / schema_path
        return schema_path.resolve()


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load the project configuration.

    Relative paths inside the file are resolved against the directory that
    holds it. The engine API key falls back to the ENGINE_API_KEY environment
    variable.

    Args:
        config_path: Path to the TOML file. Defaults to ``graphql.toml`` in the
            current directory.

    Returns:
        The loaded Config.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
    """
    path = Path(config_path) if config_path else Path("graphql.toml")

    try:
        logger.info(f"Loading project config from: {path}")
        with open(path, "r") as f:
            config_data = toml.load(f)
    except FileNotFoundError:
        logger.error(f"Project config file not found at {path}. Aborting.")
        raise

    config = Config(**config_data)

    root = Path(config.project.root_dir).expanduser()
    if not root.is_absolute():
        config.project.root_dir = str((path.parent / root).resolve())

    if not config.engine.api_key:
        env_key = os.environ.get("ENGINE_API_KEY")
        if env_key:
            logger.debug("Using engine API key from ENGINE_API_KEY")
            config.engine.api_key = env_key

    return config
