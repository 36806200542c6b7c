"""In-process key/value store.

Keeps collections in a dict for local runs and tests. Nothing survives
the process.
"""

from flowdesk.interfaces.storage import KeyValueStoreInterface

__all__ = [
    "InMemoryKeyValueStore",
]


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed implementation of KeyValueStoreInterface."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored, keyed by collection key."""
        return dict(self._data)
