"""The single channel through which per-file diagnostics are published."""

import logging
from typing import Callable, Iterable, Optional, Sequence

from shared.models import Diagnostic, DocumentUri, PublishDiagnosticsParams

logger = logging.getLogger(__name__)

DiagnosticsHandler = Callable[[PublishDiagnosticsParams], None]


class DiagnosticsSurface:
    """
    Publishes diagnostic sets to at most one subscriber.

    Registering a handler replaces the previous one. Without a handler,
    publishes are dropped.
    """

    def __init__(self) -> None:
        self._handler: Optional[DiagnosticsHandler] = None

    def on_diagnostics(self, handler: Optional[DiagnosticsHandler]) -> None:
        self._handler = handler

    @property
    def has_handler(self) -> bool:
        return self._handler is not None

    def publish(self, uri: DocumentUri, diagnostics: Sequence[Diagnostic]) -> None:
        if self._handler is None:
            return
        self._handler(PublishDiagnosticsParams(uri=uri, diagnostics=list(diagnostics)))

    def clear(self, uri: DocumentUri) -> None:
        """Publish an empty set for ``uri``."""
        self.publish(uri, [])

    def clear_all(self, uris: Iterable[DocumentUri]) -> None:
        if self._handler is None:
            return
        for uri in uris:
            logger.debug(f"Clearing diagnostics for {uri}")
            self.clear(uri)
