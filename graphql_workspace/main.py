# graphql_workspace/main.py

import asyncio
import logging
import sys
from typing import Dict, List, Optional

from components.file_watcher import ProjectWatcher
from components.project import ProjectInitializationError
from shared.initializer import (
    create_arg_parser,
    initialize_project_from_args,
)
from shared.models import (
    Diagnostic,
    DiagnosticSeverity,
    DocumentUri,
    PublishDiagnosticsParams,
)
from shared.uris import uri_to_path

logger = logging.getLogger(__name__)


class DiagnosticsReporter:
    """Prints each diagnostics notification and remembers the latest set per file."""

    def __init__(self) -> None:
        self.latest: Dict[DocumentUri, List[Diagnostic]] = {}

    def __call__(self, params: PublishDiagnosticsParams) -> None:
        if params.diagnostics:
            self.latest[params.uri] = params.diagnostics
        else:
            self.latest.pop(params.uri, None)

        path = uri_to_path(params.uri)
        for diagnostic in params.diagnostics:
            start = diagnostic.range.start
            print(
                f"{path}:{start.line + 1}:{start.character + 1}: "
                f"{diagnostic.severity.name.lower()}: {diagnostic.message}"
            )

    @property
    def error_count(self) -> int:
        return sum(
            1
            for diagnostics in self.latest.values()
            for diagnostic in diagnostics
            if diagnostic.severity == DiagnosticSeverity.ERROR
        )


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Builds the project, loads every in-scope file and reports diagnostics.

    With ``--once`` the first complete validation pass decides the exit
    status; otherwise the project keeps watching the filesystem.
    """
    parser = create_arg_parser()
    parser.add_argument(
        "--once",
        action="store_true",
        help="Validate once and exit (status 1 if any errors were found).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    config, project = initialize_project_from_args(args)
    reporter = DiagnosticsReporter()
    project.on_diagnostics(reporter)

    try:
        await project.when_ready()
    except ProjectInitializationError as e:
        print(str(e), file=sys.stderr)
        return 2

    await project.scan_all_included_files()

    if args.once:
        await project.scheduler.drain()
        print(
            f"{len(project.documents)} documents in {len(project.index)} files, "
            f"{reporter.error_count} errors"
        )
        return 1 if reporter.error_count else 0

    watcher = ProjectWatcher(config, project)
    watcher.start()
    try:
        await asyncio.Event().wait()
    finally:
        watcher.stop()
        project.dispose()
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("Stopped watching.")


if __name__ == "__main__":
    run()
