"""Shared test fixtures for flowdesk.

This module provides pytest fixtures used across all tests.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from mocks.mock_mongo import MockMongoClient

from flowdesk.backends import KeyValueBackend, MongoBackend
from flowdesk.infra.memory import InMemoryKeyValueStore
from flowdesk.interfaces.storage import StorageBackendInterface
from flowdesk.services.chatbot_dashboard import ChatbotDashboard
from flowdesk.services.feed_dashboard import FeedDashboard


# Storage fixtures
@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Create empty in-memory key/value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def kv_backend(kv_store: InMemoryKeyValueStore) -> KeyValueBackend:
    """Create key/value backend over the in-memory store."""
    return KeyValueBackend(kv_store)


@pytest.fixture
def mongo_client() -> MockMongoClient:
    """Create mock MongoDB client."""
    return MockMongoClient()


@pytest.fixture
def mongo_backend(mongo_client: MockMongoClient) -> MongoBackend:
    """Create record-store backend over the mock client."""
    return MongoBackend(mongo_client)  # type: ignore[arg-type]


@pytest.fixture(params=["kv", "mongo"])
def backend(
    request: pytest.FixtureRequest,
    kv_backend: KeyValueBackend,
    mongo_backend: MongoBackend,
) -> StorageBackendInterface:
    """Each storage backend in turn."""
    return kv_backend if request.param == "kv" else mongo_backend


@pytest.fixture
def failing_store() -> AsyncMock:
    """Key/value store whose every call fails."""
    store = AsyncMock()
    store.get.side_effect = ConnectionError("store unreachable")
    store.set.side_effect = ConnectionError("store unreachable")
    return store


# Controller fixtures
@pytest.fixture
def confirm() -> MagicMock:
    """Confirmation callback that always accepts."""
    return MagicMock(return_value=True)


@pytest.fixture
def feed_dashboard(backend: StorageBackendInterface, confirm: MagicMock) -> FeedDashboard:
    """Create feed dashboard wired to the current backend."""
    return FeedDashboard.from_backend(
        backend,
        confirm=confirm,
        widget_base_url="https://widgets.test/w",
    )


@pytest.fixture
def chatbot_dashboard(backend: StorageBackendInterface) -> ChatbotDashboard:
    """Create chatbot dashboard wired to the current backend."""
    return ChatbotDashboard.from_backend(backend)


# Sample data fixtures
@pytest.fixture
def tech_news_data() -> dict[str, Any]:
    """Minimal feed form as submitted by the create view."""
    return {
        "name": "Tech News",
        "sourceUrl": "https://example.com",
        "sourceType": "website",
    }


@pytest.fixture
def sales_bot_data() -> dict[str, Any]:
    """Minimal chatbot form."""
    return {"name": "Sales Bot", "description": "desc"}


@pytest.fixture
def feed_item_data() -> list[dict[str, Any]]:
    """Items of two feeds, keyed to feed ids filled in by the test."""
    return [
        {
            "title": "Python 3.13 released",
            "description": "Free-threaded builds land as an experiment.",
            "link": "https://example.com/python-313",
            "pubDate": "2024-10-07T12:00:00+00:00",
            "author": "Release Team",
            "categories": ["python"],
        },
        {
            "title": "Rust in the kernel",
            "description": "Another subsystem adopts Rust.",
            "link": "https://example.com/rust-kernel",
            "pubDate": "2024-10-08T08:30:00+00:00",
        },
        {
            "title": "Local elections",
            "description": "Turnout reached a record high.",
            "link": "https://news.example.org/elections",
            "pubDate": "2024-10-09T18:45:00+00:00",
        },
    ]
