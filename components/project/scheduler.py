"""Coalesces bursts of document changes into single validation passes."""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from .readiness import ReadinessGate

logger = logging.getLogger(__name__)

ValidationHook = Callable[[], Any]


class RevalidationScheduler:
    """
    Runs the validation hook at most once per burst of invalidations.

    ``invalidate`` never validates synchronously: it schedules one pass on the
    next event loop turn, and further calls before that turn are absorbed.
    Before the readiness gate opens, invalidations are only remembered; the
    gate's ready callback is expected to call ``invalidate`` once.

    The hook may return an awaitable. Such a pass runs as a task, and a turn
    that comes due while it is still running waits for it, so passes never
    overlap.
    """

    def __init__(self, gate: ReadinessGate, validate: ValidationHook):
        self._gate = gate
        self._validate = validate
        self._needs_validation = False
        self._handle: Optional[asyncio.Handle] = None
        self._running: Optional[asyncio.Future] = None
        self._rerun_queued = False

    @property
    def needs_validation(self) -> bool:
        return self._needs_validation

    @property
    def is_validating(self) -> bool:
        return self._running is not None and not self._running.done()

    def invalidate(self) -> None:
        if not self._gate.is_ready:
            self._needs_validation = True
            return
        if self._handle is not None:
            return

        self._needs_validation = True
        loop = asyncio.get_running_loop()
        self._handle = loop.call_soon(self.validate_if_needed)

    def validate_if_needed(self) -> None:
        self._handle = None
        if not self._needs_validation or not self._gate.is_ready:
            return

        if self.is_validating:
            # Wait for the running pass; the flag stays set for the next one
            if not self._rerun_queued:
                self._rerun_queued = True
                self._running.add_done_callback(self._rerun_after_pass)
            return

        self._needs_validation = False
        result = self._validate()
        if inspect.isawaitable(result):
            self._running = asyncio.ensure_future(result)
            self._running.add_done_callback(self._log_failure)

    def _rerun_after_pass(self, _task: asyncio.Future) -> None:
        self._rerun_queued = False
        self._reschedule()

    def _reschedule(self) -> None:
        if self._handle is None:
            self._handle = asyncio.get_running_loop().call_soon(
                self.validate_if_needed
            )

    @staticmethod
    def _log_failure(task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Validation pass failed: {error}", exc_info=error)

    async def drain(self) -> None:
        """Wait until no pass is scheduled or running."""
        while self._handle is not None or self.is_validating:
            if self.is_validating:
                await asyncio.wait({self._running})
            else:
                await asyncio.sleep(0)
