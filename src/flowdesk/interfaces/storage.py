"""Storage interfaces for flowdesk.

This module defines the Protocols for the persistence boundary: the raw
key/value store, the per-entity gateway the controllers talk to, and the
backend that hands gateways out.
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

from flowdesk.models.base import Entity

__all__ = [
    "DocumentCodecInterface",
    "EntityGatewayInterface",
    "KeyValueStoreInterface",
    "StorageBackendInterface",
]

EntityT = TypeVar("EntityT", bound=Entity)


@runtime_checkable
class KeyValueStoreInterface(Protocol):
    """Opaque asynchronous string store.

    Values written by flowdesk are always JSON-serialized arrays of
    entities. Failures surface as ``PersistenceError``.
    """

    async def get(self, key: str) -> str | None:
        """Get the value stored under key.

        Args:
            key: Collection key

        Returns:
            Stored string, or None if the key was never written
        """
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing what was there.

        Args:
            key: Collection key
            value: Serialized collection
        """
        ...


@runtime_checkable
class DocumentCodecInterface(Protocol):
    """Translates an entity's JSON shape to and from a stored document."""

    def encode(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    def decode(self, doc: dict[str, Any]) -> dict[str, Any]:
        ...


@runtime_checkable
class EntityGatewayInterface(Protocol[EntityT]):
    """CRUD contract for one entity collection.

    Implementations hide whether the collection lives in an opaque
    blob store or in a record store with per-record addressing.
    """

    async def get_all(self, *, strict: bool = False) -> list[EntityT]:
        """Load the whole collection.

        Args:
            strict: Raise PersistenceError instead of returning [] on failure

        Returns:
            Stored entities; [] if the collection does not exist yet
        """
        ...

    async def create(self, data: Mapping[str, Any] | BaseModel) -> EntityT:
        """Create an entity, assigning its id and creation time.

        Args:
            data: Entity fields without id/created_at

        Returns:
            The stored entity including generated fields

        Raises:
            ValidationError: If the fields do not form a valid entity
            PersistenceError: If the store failed
        """
        ...

    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT:
        """Merge fields onto a stored entity.

        Args:
            entity_id: Id of the entity to update
            fields: Partial fields; anything not named is preserved

        Returns:
            The merged entity as stored

        Raises:
            NotFoundError: If no entity has that id
            ValidationError: If the merged entity is invalid
            PersistenceError: If the store failed
        """
        ...

    async def increment(self, entity_id: str, field: str, amount: int = 1) -> EntityT:
        """Add amount to an integer field, computed from the stored value.

        Args:
            entity_id: Id of the entity to update
            field: Integer field, python name or camelCase key
            amount: Value to add

        Returns:
            The entity as stored after the increment

        Raises:
            NotFoundError: If no entity has that id
            ValidationError: If field is not an integer field
            PersistenceError: If the store failed
        """
        ...

    async def delete(self, entity_id: str) -> None:
        """Remove an entity. Deleting an absent id is a no-op.

        Args:
            entity_id: Id of the entity to remove
        """
        ...


@runtime_checkable
class StorageBackendInterface(Protocol):
    """Owner of a storage client and factory for gateways."""

    config_class: ClassVar[type | None] = None

    def gateway(
        self,
        collection: str,
        model: type[EntityT],
        codec: DocumentCodecInterface | None = None,
    ) -> EntityGatewayInterface[EntityT]:
        """Get the gateway for one entity collection.

        Args:
            collection: Collection key / name
            model: Entity class stored in the collection
            codec: Optional document codec (record stores only)
        """
        ...

    async def close(self) -> None:
        """Release owned resources."""
        ...
