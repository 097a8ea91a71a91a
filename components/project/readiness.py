"""Tracks whether a project's asynchronous initialization has completed."""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)


class ProjectInitializationError(Exception):
    """Raised from ``when_ready`` when an initialization task failed."""

    def __init__(self, display_name: str, errors: List[BaseException]):
        self.display_name = display_name
        self.errors = errors
        details = "; ".join(str(error) for error in errors)
        super().__init__(
            f'Error initializing GraphQL project "{display_name}": {details}'
        )


class ReadinessGate:
    """
    A one-way switch from "initializing" to "ready".

    The gate becomes ready exactly once, when every initialization task has
    resolved. If any task fails the gate never becomes ready: each failure is
    logged and passed to ``on_error`` and ``when_ready`` raises.
    """

    def __init__(
        self,
        display_name: str,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.display_name = display_name
        self._on_error = on_error
        self._ready = False
        self._errors: List[BaseException] = []
        self._on_ready: List[Callable[[], None]] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def failed(self) -> bool:
        return bool(self._errors)

    @property
    def errors(self) -> List[BaseException]:
        return list(self._errors)

    def add_ready_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the gate turns ready."""
        self._on_ready.append(callback)

    def start(self, tasks: Iterable[Awaitable]) -> None:
        """Begin waiting on the initialization tasks. Needs a running loop."""
        if self._task is not None:
            raise RuntimeError("Readiness gate already started")
        self._task = asyncio.ensure_future(self._run(list(tasks)))

    async def _run(self, tasks: List[Awaitable]) -> None:
        results = await asyncio.gather(*tasks, return_exceptions=True)
        errors = [result for result in results if isinstance(result, BaseException)]

        if errors:
            self._errors = errors
            for error in errors:
                message = (
                    f'Error initializing GraphQL project "{self.display_name}": {error}'
                )
                logger.error(message, exc_info=error)
                if self._on_error:
                    self._on_error(message)
            return

        self._ready = True
        logger.info(f'GraphQL project "{self.display_name}" is ready')
        for callback in self._on_ready:
            callback()

    async def when_ready(self) -> None:
        """
        Wait until initialization has settled.

        Raises:
            ProjectInitializationError: If any initialization task failed.
        """
        if self._task is None:
            raise RuntimeError("Readiness gate was never started")
        await asyncio.shield(self._task)
        if self._errors:
            raise ProjectInitializationError(self.display_name, self._errors)
