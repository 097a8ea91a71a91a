"""Operator-facing progress and error reporting."""

import logging
import time
from typing import Awaitable, List, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadingHandler(Protocol):
    async def handle(self, message: str, value: Awaitable[T]) -> T: ...

    def show_error(self, message: str) -> None: ...


class LoggingLoadingHandler:
    """
    Reports long-running work and fatal errors through the log.

    Every error shown is also kept in ``errors`` so a front end (or a test) can
    inspect what the operator was told.
    """

    def __init__(self, log: logging.Logger = logger):
        self.log = log
        self.errors: List[str] = []

    async def handle(self, message: str, value: Awaitable[T]) -> T:
        """
        Await ``value`` as one unit of reported work.

        Args:
            message: What is being done, e.g. "Loading queries for my-app".
            value: The awaitable doing the work.

        Returns:
            Whatever ``value`` resolved to.

        Raises:
            Exception: Any error raised by ``value``, after it was shown.
        """
        self.log.info(f"{message}...")
        started = time.monotonic()
        try:
            result = await value
        except Exception as e:
            self.show_error(f'Error in "{message}": {e}')
            raise
        self.log.info(f"{message} done in {time.monotonic() - started:.2f}s")
        return result

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        self.log.error(message)
