"""File watcher for live project synchronization."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Set

from components.project import GraphQLProject
from components.schema_provider import FileSchemaProvider
from shared.config import Config
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class ProjectEventHandler(FileSystemEventHandler):
    """
    Forwards file system events to a GraphQLProject.

    Watchdog calls the ``on_*`` methods from its own thread; every event is
    handed to the event loop, where rapid events for the same path are
    debounced before the project sees them.
    """

    def __init__(
        self,
        project: GraphQLProject,
        loop: asyncio.AbstractEventLoop,
        debounce_seconds: float = 0.25,
    ):
        super().__init__()
        self.project = project
        self.loop = loop
        self.debounce_seconds = debounce_seconds

        # Pending operations per path, only touched on the loop thread
        self._pending_operations: Dict[str, asyncio.TimerHandle] = {}
        self._tasks: Set[asyncio.Task] = set()

        schema_provider = project.schema_provider
        self.schema_path: Optional[Path] = (
            schema_provider.path.resolve()
            if isinstance(schema_provider, FileSchemaProvider)
            else None
        )

    def on_created(self, event: Any) -> None:
        """Handle file creation events."""
        if not event.is_directory:
            self._schedule_operation(event.src_path, "changed")

    def on_modified(self, event: Any) -> None:
        """Handle file modification events."""
        if not event.is_directory:
            self._schedule_operation(event.src_path, "changed")

    def on_deleted(self, event: Any) -> None:
        """Handle file deletion events."""
        if not event.is_directory:
            self._schedule_operation(event.src_path, "deleted")

    def on_moved(self, event: Any) -> None:
        """Handle renames as a deletion of the old path and a change of the new one."""
        if not event.is_directory:
            self._schedule_operation(event.src_path, "deleted")
            self._schedule_operation(event.dest_path, "changed")

    def _schedule_operation(self, file_path: str, operation: str) -> None:
        if self.loop.is_closed():
            return
        self.loop.call_soon_threadsafe(self._debounce, file_path, operation)

    def _debounce(self, file_path: str, operation: str) -> None:
        """Restart the quiet period of ``file_path``; the latest operation wins."""
        handle = self._pending_operations.pop(file_path, None)
        if handle is not None:
            handle.cancel()
        self._pending_operations[file_path] = self.loop.call_later(
            self.debounce_seconds, self._process_file_operation, file_path, operation
        )

    def _process_file_operation(self, file_path: str, operation: str) -> None:
        """Process a single debounced file operation."""
        self._pending_operations.pop(file_path, None)
        path = Path(file_path)

        if self.schema_path is not None and path.resolve() == self.schema_path:
            logger.info(f"Schema file {operation}: {file_path}")
            self._spawn(self.project.schema_provider.refresh())
            return

        if operation == "deleted":
            logger.debug(f"Processing deletion of {file_path}")
            self.project.file_was_deleted(path)
            return

        if not self.project.includes_file(path):
            logger.debug(f"Skipping file {file_path} (not in project scope)")
            return

        # The file might have been deleted again before the quiet period ended
        if not path.exists():
            logger.debug(f"File {file_path} no longer exists, treating as deletion")
            self.project.file_was_deleted(path)
            return

        logger.debug(f"Processing change of {file_path}")
        self._spawn(self.project.file_did_change(path))

    def _spawn(self, coroutine: Any) -> None:
        task = self.loop.create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def stop(self) -> None:
        """Drop operations that have not been processed yet."""
        for handle in self._pending_operations.values():
            handle.cancel()
        self._pending_operations.clear()


class ProjectWatcher:
    """Watches a project's root directory and keeps the project up to date."""

    def __init__(self, config: Config, project: GraphQLProject):
        self.config = config
        self.project = project

        self.observer: Any = None
        self.event_handler: Optional[ProjectEventHandler] = None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Start watching the project for changes."""
        if not self.config.watcher.enabled:
            logger.info("File watching is disabled in configuration")
            return

        root_path = self.config.get_root_path()
        if not root_path.exists():
            logger.warning(f"Project directory does not exist: {root_path}")
            return

        logger.info(f"Starting file watcher for project: {root_path}")

        self.event_handler = ProjectEventHandler(
            self.project,
            loop or asyncio.get_running_loop(),
            debounce_seconds=self.config.watcher.debounce_seconds,
        )

        self.observer = Observer()
        self.observer.schedule(self.event_handler, str(root_path), recursive=True)

        schema_path = self.event_handler.schema_path
        if schema_path is not None and root_path not in schema_path.parents:
            self.observer.schedule(
                self.event_handler, str(schema_path.parent), recursive=False
            )
        self.observer.start()

        logger.info("File watcher started successfully")

    def stop(self) -> None:
        """Stop watching the project."""
        if self.observer:
            logger.info("Stopping file watcher")
            self.observer.stop()
            self.observer.join()
            self.observer = None

        if self.event_handler:
            self.event_handler.stop()
            self.event_handler = None

        logger.info("File watcher stopped")

    def is_running(self) -> bool:
        """Check if the watcher is currently running."""
        return self.observer is not None and self.observer.is_alive()
