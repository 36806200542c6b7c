"""Storage clients for flowdesk."""

from flowdesk.infra.memory import InMemoryKeyValueStore

__all__ = ["InMemoryKeyValueStore"]
