"""Record-store collection gateway for flowdesk.

Entities are stored one document per record in a MongoDB collection,
so updates touch a single record. There is still no transaction across
collections.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from flowdesk.errors import FlowdeskError, NotFoundError, PersistenceError
from flowdesk.gateways.base import CollectionGateway, EntityT
from flowdesk.gateways.codecs import DocumentCodec
from flowdesk.interfaces.storage import DocumentCodecInterface, EntityGatewayInterface
from flowdesk.logging import get_logger
from flowdesk.utils.dates import now_iso

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

__all__ = [
    "DocumentCollectionGateway",
]

logger = get_logger(__name__)


class DocumentCollectionGateway(CollectionGateway[EntityT], EntityGatewayInterface[EntityT]):
    """Entity gateway over a MongoDB collection.

    Ids are generated by the driver (``ObjectId``) and mirrored into the
    ``id`` field, which carries a unique index.
    """

    def __init__(
        self,
        collection: "AsyncIOMotorCollection[dict[str, Any]]",
        name: str,
        model: type[EntityT],
        codec: DocumentCodecInterface | None = None,
    ) -> None:
        """Initialize gateway.

        Args:
            collection: Motor collection holding the records
            name: Collection name, for logs and errors
            model: Entity class of the collection
            codec: Document codec; defaults to storing the JSON shape as-is
        """
        super().__init__(name, model)
        self._records = collection
        self._codec = codec or DocumentCodec()

    def _from_doc(self, doc: dict[str, Any]) -> EntityT:
        doc = {key: value for key, value in doc.items() if key != "_id"}
        return self._parse(self._codec.decode(doc))

    async def get_all(self, *, strict: bool = False) -> list[EntityT]:
        """Load every record of the collection in insertion order."""
        try:
            cursor = self._records.find({}, {"_id": 0})
            return [self._from_doc(doc) async for doc in cursor]
        except (PyMongoError, FlowdeskError) as e:
            if strict:
                if isinstance(e, FlowdeskError):
                    raise
                raise PersistenceError(f"Failed to read '{self._collection}': {e}") from e
            logger.error("collection_load_failed", collection=self._collection, error=str(e))
            return []

    async def create(self, data: Mapping[str, Any] | BaseModel) -> EntityT:
        """Insert a new record with a driver-generated id."""
        object_id = ObjectId()
        entity = self._build_new(data, str(object_id))

        doc = self._codec.encode(entity.to_json())
        doc["_id"] = object_id
        try:
            await self._records.insert_one(doc)
        except PyMongoError as e:
            raise PersistenceError(f"Failed to insert into '{self._collection}': {e}") from e

        logger.debug("entity_created", collection=self._collection, entity_id=entity.id)
        return entity

    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT:
        """Merge fields onto one record and ``$set`` the changed ones."""
        try:
            doc = await self._records.find_one({"id": entity_id})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to read '{self._collection}': {e}") from e
        if doc is None:
            logger.warning(
                "entity_update_missing", collection=self._collection, entity_id=entity_id
            )
            raise NotFoundError(self._model.entity_name, entity_id)

        merged, changed = self._merge(self._from_doc(doc), fields)
        if changed:
            try:
                result = await self._records.update_one(
                    {"id": entity_id},
                    {"$set": self._codec.encode(changed)},
                )
            except PyMongoError as e:
                raise PersistenceError(f"Failed to update '{self._collection}': {e}") from e
            if result.matched_count == 0:
                # Deleted between the read and the write
                raise NotFoundError(self._model.entity_name, entity_id)

        logger.debug(
            "entity_updated",
            collection=self._collection,
            entity_id=entity_id,
            fields=sorted(changed),
        )
        return merged

    async def increment(self, entity_id: str, field: str, amount: int = 1) -> EntityT:
        """Apply ``$inc`` to one field and return the record as stored afterwards."""
        name, key = self._counter(field)
        update: dict[str, Any] = {"$inc": {key: amount}}
        if self._model.has_field("updated_at"):
            update["$set"] = {self._model.model_fields["updated_at"].alias: now_iso()}

        try:
            doc = await self._records.find_one_and_update(
                {"id": entity_id},
                update,
                projection={"_id": 0},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise PersistenceError(f"Failed to update '{self._collection}': {e}") from e
        if doc is None:
            logger.warning(
                "entity_update_missing", collection=self._collection, entity_id=entity_id
            )
            raise NotFoundError(self._model.entity_name, entity_id)

        entity = self._from_doc(doc)
        logger.debug(
            "entity_incremented",
            collection=self._collection,
            entity_id=entity_id,
            field=field,
            value=getattr(entity, name),
        )
        return entity

    async def delete(self, entity_id: str) -> None:
        """Delete the record; absent ids are ignored."""
        try:
            result = await self._records.delete_one({"id": entity_id})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to delete from '{self._collection}': {e}") from e
        if result.deleted_count:
            logger.debug("entity_deleted", collection=self._collection, entity_id=entity_id)
