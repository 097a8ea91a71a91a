"""
Centralized project initializer.

This module is responsible for parsing command-line arguments, loading the
configuration, and building a GraphQLProject together with its collaborators
(file set, schema provider, loading handler, project variant).
It provides a single entry point for building the project core, which the
command line runner, an editor integration or a test can drive.
"""

import argparse
import logging
from typing import Optional, Tuple

from components.engine_client import ClientIdentity
from components.file_set import FileSet
from components.loading_handler import LoadingHandler, LoggingLoadingHandler
from components.project import GraphQLProject, variant_from_config

from shared.config import Config, load_config

logger = logging.getLogger(__name__)


def create_arg_parser() -> argparse.ArgumentParser:
    """
    Creates and returns the command-line argument parser.

    Returns:
        An ArgumentParser instance with all common arguments defined.
    """
    parser = argparse.ArgumentParser(description="GraphQL workspace.")
    parser.add_argument(
        "-c",
        "--config",
        help="Path to the graphql.toml file to use.",
    )
    parser.add_argument(
        "--root-dir",
        help="Override the project root directory.",
    )
    parser.add_argument(
        "--schema",
        help="Override the schema file (SDL or introspection JSON).",
    )
    parser.add_argument(
        "--no-watch",
        action="store_true",
        help="Disable the file watcher.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def load_config_from_args(args: argparse.Namespace) -> Config:
    """Load the configuration file and apply command-line overrides."""
    config = load_config(args.config)

    if args.root_dir:
        logger.info(f"Overriding project root with: {args.root_dir}")
        config.project.root_dir = args.root_dir
    if args.schema:
        logger.info(f"Overriding schema file with: {args.schema}")
        config.schema_source.path = args.schema
    if args.no_watch:
        config.watcher.enabled = False

    return config


def create_project(
    config: Config,
    loading_handler: Optional[LoadingHandler] = None,
    client_identity: Optional[ClientIdentity] = None,
) -> GraphQLProject:
    """
    Builds a GraphQLProject from its configuration.

    Must be called from inside a running event loop, since the project starts
    its initialization tasks on construction.

    Args:
        config: The loaded configuration.
        loading_handler: Where progress and fatal errors are reported.
            Defaults to a LoggingLoadingHandler.
        client_identity: Optional identity sent to the engine.

    Returns:
        The project, initializing.
    """
    logger.info(f"Initializing GraphQL project {config.project.name!r}...")

    root_path = config.get_root_path()
    excludes = list(config.project.excludes)
    schema_path = config.get_schema_path()
    # The schema file is not a document of the project it describes
    if schema_path is not None and root_path in schema_path.parents:
        excludes.append(schema_path.relative_to(root_path).as_posix())

    file_set = FileSet(
        root_path,
        includes=config.project.includes,
        excludes=excludes,
    )
    project = GraphQLProject(
        config=config,
        file_set=file_set,
        loading_handler=loading_handler or LoggingLoadingHandler(),
        variant=variant_from_config(config),
        client_identity=client_identity,
    )
    return project


def initialize_project_from_args(
    args: argparse.Namespace,
) -> Tuple[Config, GraphQLProject]:
    """
    Loads configuration and builds the project based on command-line arguments.

    Args:
        args: Parsed command-line arguments from an ArgumentParser.

    Returns:
        A tuple containing the loaded Config object and the initializing
        GraphQLProject.
    """
    config = load_config_from_args(args)
    return config, create_project(config)
