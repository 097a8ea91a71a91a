from .client import (
    ClientIdentity,
    EngineClient,
    EngineNotConfiguredError,
    engine_client_from_config,
)

__all__ = [
    "ClientIdentity",
    "EngineClient",
    "EngineNotConfiguredError",
    "engine_client_from_config",
]
