"""Client for the remote engine service (schema registry and telemetry)."""

import logging
from typing import Optional

from pydantic import BaseModel, Field
from shared.config import EngineConfig

logger = logging.getLogger(__name__)


class EngineNotConfiguredError(Exception):
    """Raised when the engine client is required but no API key is configured."""


class ClientIdentity(BaseModel):
    """Identifies the tool talking to the engine."""

    name: Optional[str] = Field(default=None, description="Client name")
    version: Optional[str] = Field(default=None, description="Client version")
    reference_id: Optional[str] = Field(default=None, description="Client reference id")


class EngineClient:
    """
    Holds the credentials and endpoint used to reach the engine.

    This is the surface engine-backed features build on: ``endpoint`` is where
    requests go, ``headers()`` authenticates and identifies them, and
    ``service_id`` names the registry entry a ``service:`` key belongs to.
    Requests themselves are made by those features, not by the project core.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        client_identity: Optional[ClientIdentity] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.client_identity = client_identity or ClientIdentity()

    @property
    def service_id(self) -> Optional[str]:
        """The service id encoded in a ``service:<id>:<token>`` API key."""
        parts = self.api_key.split(":")
        if len(parts) >= 3 and parts[0] == "service":
            return parts[1]
        return None

    def headers(self) -> dict:
        """HTTP headers to send with every engine request."""
        headers = {"x-api-key": self.api_key}
        if self.client_identity.name:
            headers["apollographql-client-name"] = self.client_identity.name
        if self.client_identity.version:
            headers["apollographql-client-version"] = self.client_identity.version
        return headers


def engine_client_from_config(
    engine: EngineConfig, client_identity: Optional[ClientIdentity] = None
) -> Optional[EngineClient]:
    """Build the engine client, or None when no API key is configured."""
    if not engine.api_key:
        logger.debug("No engine API key configured, engine client disabled")
        return None
    client = EngineClient(engine.api_key, engine.endpoint, client_identity)
    if client.service_id:
        logger.info(f"Engine client configured for service {client.service_id}")
    else:
        logger.info("Engine client configured with a non-service API key")
    return client
