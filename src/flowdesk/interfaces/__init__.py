"""Interface contracts for flowdesk.

This module exports all Protocol-based interfaces for dependency injection.
"""

from flowdesk.interfaces.storage import (
    DocumentCodecInterface,
    EntityGatewayInterface,
    KeyValueStoreInterface,
    StorageBackendInterface,
)

__all__ = [
    "DocumentCodecInterface",
    "EntityGatewayInterface",
    "KeyValueStoreInterface",
    "StorageBackendInterface",
]
