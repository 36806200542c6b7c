"""Unit tests for the collection gateways.

Contract tests run against both backends; the variant-specific classes
cover the blob store's read-modify-write and the record store's codecs.
"""

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest
from mocks.mock_mongo import MockMongoClient

from flowdesk.backends import MongoBackend
from flowdesk.constants import CollectionKey
from flowdesk.errors import NotFoundError, PersistenceError, ValidationError
from flowdesk.gateways.blob import BlobCollectionGateway
from flowdesk.gateways.codecs import ChatbotDocumentCodec
from flowdesk.infra.memory import InMemoryKeyValueStore
from flowdesk.interfaces.storage import StorageBackendInterface
from flowdesk.models.chatbot import Chatbot
from flowdesk.models.feed import Feed, FeedItem, FeedStatus


class TestGatewayContract:
    """Contract shared by every gateway variant."""

    @pytest.mark.asyncio
    async def test_get_all_empty_collection(self, backend: StorageBackendInterface) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        assert await feeds.get_all() == []

    @pytest.mark.asyncio
    async def test_create_applies_feed_defaults(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)

        feed = await feeds.create(tech_news_data)
        data = feed.to_json()

        assert data["status"] == "active"
        assert data["itemCount"] == 0
        assert data["filters"] == []
        assert data["autoRefresh"] is True
        assert data["refreshInterval"] == 60
        assert feed.id
        assert feed.created_at

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)

        created = [await feeds.create(tech_news_data) for _ in range(10)]

        ids = [feed.id for feed in created]
        assert all(ids)
        assert len(set(ids)) == len(ids)

    @pytest.mark.asyncio
    async def test_create_ignores_client_supplied_id(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)

        first = await feeds.create(tech_news_data)
        second = await feeds.create({**tech_news_data, "id": first.id})

        assert second.id != first.id

    @pytest.mark.asyncio
    async def test_create_then_get_all_round_trip(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)

        feed = await feeds.create(tech_news_data)
        stored = await feeds.get_all()

        assert [f for f in stored if f.id == feed.id] == [feed]

    @pytest.mark.asyncio
    async def test_create_invalid_writes_nothing(self, backend: StorageBackendInterface) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)

        with pytest.raises(ValidationError):
            await feeds.create({"name": "No URL"})
        with pytest.raises(ValidationError):
            await feeds.create({"name": "Bad URL", "sourceUrl": "not a url"})

        assert await feeds.get_all() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "partial",
        [
            {"name": "Renamed"},
            {"status": "paused"},
            {"refreshInterval": 15, "autoRefresh": False},
            {"filters": [{"type": "domain", "action": "exclude", "value": "spam.example"}]},
            {"description": "Daily digest", "source_type": "blog"},
            {},
        ],
    )
    async def test_update_preserves_unnamed_fields(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
        partial: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create({**tech_news_data, "description": "Original"})

        updated = await feeds.update(feed.id, partial)

        before = feed.to_json()
        after = updated.to_json()
        named = {Feed.model_fields[Feed.field_name(key)].alias for key in partial}
        for key, value in before.items():
            if key not in named and key != "updatedAt":
                assert after[key] == value, key
        assert await feeds.get_all() == [updated]

    @pytest.mark.asyncio
    async def test_update_applies_named_fields(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        updated = await feeds.update(feed.id, {"status": "paused", "itemCount": 4})

        assert updated.status == FeedStatus.PAUSED
        assert updated.item_count == 4
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_created_at(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        updated = await feeds.update(
            feed.id, {"id": "hijacked", "createdAt": "1999-01-01T00:00:00+00:00"}
        )

        assert updated.id == feed.id
        assert updated.created_at == feed.created_at

    @pytest.mark.asyncio
    async def test_update_missing_id_raises_not_found(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        with pytest.raises(NotFoundError) as exc_info:
            await feeds.update("missing", {"name": "Ghost"})

        assert exc_info.value.entity_id == "missing"
        assert await feeds.get_all() == [feed]

    @pytest.mark.asyncio
    async def test_update_unknown_field_rejected(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        with pytest.raises(ValidationError, match="colour"):
            await feeds.update(feed.id, {"colour": "red"})

        assert await feeds.get_all() == [feed]

    @pytest.mark.asyncio
    async def test_update_invalid_value_leaves_record(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        with pytest.raises(ValidationError):
            await feeds.update(feed.id, {"sourceUrl": "javascript:alert(1)"})

        assert await feeds.get_all() == [feed]

    @pytest.mark.asyncio
    async def test_increment_reads_stored_value(
        self,
        backend: StorageBackendInterface,
        sales_bot_data: dict[str, Any],
    ) -> None:
        bots = backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())
        bot = await bots.create(sales_bot_data)
        await bots.update(bot.id, {"conversationsCount": 4})

        counted = await bots.increment(bot.id, "conversationsCount")

        assert counted.conversations_count == 5
        assert counted.updated_at is not None
        assert counted.name == "Sales Bot"
        assert await bots.get_all() == [counted]

    @pytest.mark.asyncio
    async def test_increment_missing_id_raises_not_found(
        self,
        backend: StorageBackendInterface,
    ) -> None:
        bots = backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())

        with pytest.raises(NotFoundError):
            await bots.increment("missing", "conversationsCount")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["name", "id", "createdAt", "nope"])
    async def test_increment_rejects_non_counters(
        self,
        backend: StorageBackendInterface,
        sales_bot_data: dict[str, Any],
        field: str,
    ) -> None:
        bots = backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())
        bot = await bots.create(sales_bot_data)

        with pytest.raises(ValidationError, match="not a counter"):
            await bots.increment(bot.id, field)

    @pytest.mark.asyncio
    async def test_delete_removes_entity(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        first = await feeds.create(tech_news_data)
        second = await feeds.create({**tech_news_data, "name": "Second"})

        await feeds.delete(first.id)

        assert await feeds.get_all() == [second]

    @pytest.mark.asyncio
    async def test_delete_absent_id_is_noop(
        self,
        backend: StorageBackendInterface,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        await feeds.delete("missing")
        await feeds.delete("missing")

        assert await feeds.get_all() == [feed]

    @pytest.mark.asyncio
    async def test_entities_without_created_at(self, backend: StorageBackendInterface) -> None:
        items = backend.gateway(CollectionKey.FEED_ITEMS, FeedItem)

        item = await items.create(
            {"feedId": "f1", "title": "Hello", "pubDate": "2024-01-01T00:00:00+00:00"}
        )

        assert item.feed_id == "f1"
        assert await items.get_all() == [item]


class TestBlobCollectionGateway:
    """Tests specific to the key/value variant."""

    @pytest.mark.asyncio
    async def test_collection_stored_as_json_array(
        self,
        kv_store: InMemoryKeyValueStore,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = BlobCollectionGateway(kv_store, CollectionKey.FEEDS, Feed)

        feed = await feeds.create(tech_news_data)

        stored = json.loads(kv_store.snapshot()["rssFeeds"])
        assert stored == [feed.to_json()]
        assert stored[0]["sourceUrl"] == "https://example.com"

    @pytest.mark.asyncio
    async def test_ids_are_timestamp_strings(
        self,
        kv_store: InMemoryKeyValueStore,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = BlobCollectionGateway(kv_store, CollectionKey.FEEDS, Feed)

        first = await feeds.create(tech_news_data)
        second = await feeds.create(tech_news_data)

        assert first.id.isdigit()
        assert int(second.id) > int(first.id)

    @pytest.mark.asyncio
    async def test_skips_ids_already_in_collection(
        self,
        tech_news_data: dict[str, Any],
    ) -> None:
        existing = {
            "id": "5",
            "name": "Existing",
            "sourceUrl": "https://example.com",
            "createdAt": "2024-01-01T00:00:00+00:00",
        }
        store = InMemoryKeyValueStore({"rssFeeds": json.dumps([existing])})
        ids = iter(["5", "5", "6"])
        feeds = BlobCollectionGateway(store, CollectionKey.FEEDS, Feed, id_factory=lambda: next(ids))

        feed = await feeds.create(tech_news_data)

        assert feed.id == "6"
        assert [f.id for f in await feeds.get_all()] == ["5", "6"]

    @pytest.mark.asyncio
    async def test_invalid_json_loads_empty(self) -> None:
        store = InMemoryKeyValueStore({"rssFeeds": "{not json"})
        feeds = BlobCollectionGateway(store, CollectionKey.FEEDS, Feed)

        assert await feeds.get_all() == []
        with pytest.raises(PersistenceError):
            await feeds.get_all(strict=True)

    @pytest.mark.asyncio
    async def test_non_array_payload_is_persistence_error(self) -> None:
        store = InMemoryKeyValueStore({"rssFeeds": json.dumps({"id": "1"})})
        feeds = BlobCollectionGateway(store, CollectionKey.FEEDS, Feed)

        with pytest.raises(PersistenceError):
            await feeds.get_all(strict=True)

    @pytest.mark.asyncio
    async def test_store_failure_on_load(self, failing_store: AsyncMock) -> None:
        feeds = BlobCollectionGateway(failing_store, CollectionKey.FEEDS, Feed)

        assert await feeds.get_all() == []
        with pytest.raises(PersistenceError, match="store unreachable"):
            await feeds.get_all(strict=True)

    @pytest.mark.asyncio
    async def test_failed_read_never_overwrites_collection(
        self,
        failing_store: AsyncMock,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = BlobCollectionGateway(failing_store, CollectionKey.FEEDS, Feed)

        with pytest.raises(PersistenceError):
            await feeds.create(tech_news_data)
        with pytest.raises(PersistenceError):
            await feeds.delete("1")

        failing_store.set.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_absent_id_skips_write(
        self,
        tech_news_data: dict[str, Any],
    ) -> None:
        store = AsyncMock()
        store.get.return_value = "[]"
        feeds = BlobCollectionGateway(store, CollectionKey.FEEDS, Feed)

        await feeds.delete("missing")

        store.set.assert_not_called()

    @pytest.mark.asyncio
    async def test_write_failure_is_persistence_error(
        self,
        tech_news_data: dict[str, Any],
    ) -> None:
        store = AsyncMock()
        store.get.return_value = None
        store.set.side_effect = TimeoutError("write timed out")
        feeds = BlobCollectionGateway(store, CollectionKey.FEEDS, Feed)

        with pytest.raises(PersistenceError, match="write timed out"):
            await feeds.create(tech_news_data)


class TestDocumentCollectionGateway:
    """Tests specific to the record-store variant."""

    @pytest.mark.asyncio
    async def test_ids_come_from_driver(
        self,
        mongo_backend: MongoBackend,
        mongo_client: MockMongoClient,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = mongo_backend.gateway(CollectionKey.FEEDS, Feed)

        feed = await feeds.create(tech_news_data)

        doc = mongo_client.collection("rssFeeds").documents[0]
        assert str(doc["_id"]) == feed.id
        assert doc["id"] == feed.id
        assert len(feed.id) == 24

    @pytest.mark.asyncio
    async def test_update_sets_only_changed_fields(
        self,
        mongo_backend: MongoBackend,
        mongo_client: MockMongoClient,
        tech_news_data: dict[str, Any],
    ) -> None:
        feeds = mongo_backend.gateway(CollectionKey.FEEDS, Feed)
        feed = await feeds.create(tech_news_data)

        await feeds.update(feed.id, {"status": "paused", "name": "Tech News"})

        last_update = mongo_client.collection("rssFeeds").updates[-1]
        assert set(last_update["$set"]) == {"status", "updatedAt"}

    @pytest.mark.asyncio
    async def test_knowledge_stored_as_json_text(
        self,
        mongo_backend: MongoBackend,
        mongo_client: MockMongoClient,
    ) -> None:
        bots = mongo_backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())

        bot = await bots.create(
            {
                "name": "Sales Bot",
                "knowledge": {
                    "faqs": [{"question": "Price?", "answer": "10 EUR"}],
                    "urls": ["https://example.com/docs"],
                    "text": "We sell widgets.",
                },
            }
        )

        doc = mongo_client.collection("chatbots").documents[0]
        assert doc["knowledge"]["faqs"] == json.dumps([{"question": "Price?", "answer": "10 EUR"}])
        assert doc["knowledge"]["urls"] == json.dumps(["https://example.com/docs"])
        assert doc["knowledge"]["files"] == "[]"
        assert doc["knowledge"]["text"] == "We sell widgets."
        assert await bots.get_all() == [bot]

    @pytest.mark.asyncio
    async def test_corrupt_knowledge_decodes_empty(
        self,
        mongo_backend: MongoBackend,
        mongo_client: MockMongoClient,
    ) -> None:
        bots = mongo_backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())
        bot = await bots.create(
            {"name": "Sales Bot", "knowledge": {"urls": ["https://example.com"]}}
        )
        mongo_client.collection("chatbots").documents[0]["knowledge"]["urls"] = "[broken"

        (loaded,) = await bots.get_all()

        assert loaded.id == bot.id
        assert loaded.knowledge.urls == []

    @pytest.mark.asyncio
    async def test_knowledge_update_re_encodes(
        self,
        mongo_backend: MongoBackend,
        mongo_client: MockMongoClient,
    ) -> None:
        bots = mongo_backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())
        bot = await bots.create({"name": "Sales Bot"})

        updated = await bots.update(
            bot.id, {"knowledge": {"faqs": [{"question": "Hours?", "answer": "9-5"}]}}
        )

        last_update = mongo_client.collection("chatbots").updates[-1]
        assert isinstance(last_update["$set"]["knowledge"]["faqs"], str)
        assert await bots.get_all() == [updated]

    @pytest.mark.asyncio
    async def test_increment_is_atomic_inc(
        self,
        mongo_backend: MongoBackend,
        mongo_client: MockMongoClient,
    ) -> None:
        bots = mongo_backend.gateway(CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec())
        bot = await bots.create({"name": "Sales Bot"})

        await bots.increment(bot.id, "conversations_count", amount=3)

        last_update = mongo_client.collection("chatbots").updates[-1]
        assert last_update["$inc"] == {"conversationsCount": 3}
        assert set(last_update["$set"]) == {"updatedAt"}
        assert mongo_client.collection("chatbots").documents[0]["conversationsCount"] == 3
