"""View-state controller of the RSS feed dashboard.

This module owns the in-memory snapshot of feeds, items, bundles and
widgets that the presentation layer renders, and the intents that
mutate it through the persistence gateways.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Self

from flowdesk.config import FlowdeskConfig
from flowdesk.constants import CollectionKey
from flowdesk.errors import NotFoundError
from flowdesk.interfaces.storage import EntityGatewayInterface, StorageBackendInterface
from flowdesk.logging import get_logger
from flowdesk.models.bundle import Bundle
from flowdesk.models.feed import Feed, FeedItem, FeedStatus
from flowdesk.models.views import FeedView
from flowdesk.models.widget import Widget
from flowdesk.services.base import DashboardController, DashboardState
from flowdesk.services.embed import DEFAULT_WIDGET_BASE_URL, build_embed_code
from flowdesk.utils.dates import ensure_date

__all__ = [
    "DELETED_FEED_LABEL",
    "FeedDashboard",
    "FeedDashboardState",
    "FeedSummary",
]

logger = get_logger(__name__)

DELETED_FEED_LABEL = "(deleted feed)"

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]


@dataclass
class FeedDashboardState(DashboardState):
    """Everything the RSS dashboard renders."""

    feeds: list[Feed] = field(default_factory=list)
    feed_items: list[FeedItem] = field(default_factory=list)
    bundles: list[Bundle] = field(default_factory=list)
    widgets: list[Widget] = field(default_factory=list)
    selected_feed: Feed | None = None


@dataclass(frozen=True)
class FeedSummary:
    """Headline counts shown on the dashboard view."""

    active_feeds: int
    total_items: int
    items_today: int


class FeedDashboard(DashboardController[FeedDashboardState]):
    """Controller of the RSS feed dashboard.

    Example:
        dashboard = FeedDashboard.from_backend(backend, confirm=ask_user)
        await dashboard.load()
        feed = await dashboard.create_feed(
            {"name": "Tech News", "sourceUrl": "https://example.com"}
        )
    """

    view_enum = FeedView

    def __init__(
        self,
        *,
        feeds: EntityGatewayInterface[Feed],
        feed_items: EntityGatewayInterface[FeedItem],
        bundles: EntityGatewayInterface[Bundle],
        widgets: EntityGatewayInterface[Widget],
        confirm: ConfirmCallback,
        widget_base_url: str = DEFAULT_WIDGET_BASE_URL,
    ) -> None:
        """Initialize controller with its gateways.

        Args:
            feeds: Feed gateway
            feed_items: Feed item gateway
            bundles: Bundle gateway
            widgets: Widget gateway
            confirm: Asks the user to confirm a destructive action;
                may be sync or async
            widget_base_url: Host the embed snippets point at
        """
        super().__init__(FeedDashboardState())
        self._feeds = feeds
        self._feed_items = feed_items
        self._bundles = bundles
        self._widgets = widgets
        self._confirm = confirm
        self._widget_base_url = widget_base_url

    @classmethod
    def from_backend(
        cls,
        backend: StorageBackendInterface,
        *,
        confirm: ConfirmCallback,
        widget_base_url: str = DEFAULT_WIDGET_BASE_URL,
    ) -> Self:
        """Wire a dashboard to the collections of one backend."""
        return cls(
            feeds=backend.gateway(CollectionKey.FEEDS, Feed),
            feed_items=backend.gateway(CollectionKey.FEED_ITEMS, FeedItem),
            bundles=backend.gateway(CollectionKey.BUNDLES, Bundle),
            widgets=backend.gateway(CollectionKey.WIDGETS, Widget),
            confirm=confirm,
            widget_base_url=widget_base_url,
        )

    @classmethod
    def from_config(
        cls,
        backend: StorageBackendInterface,
        config: FlowdeskConfig,
        *,
        confirm: ConfirmCallback,
    ) -> Self:
        """Wire a dashboard with the widget host taken from config."""
        return cls.from_backend(backend, confirm=confirm, widget_base_url=config.widget_base_url)

    # === LOADING ===

    async def load(self) -> bool:
        """Load all collections in parallel and replace state wholesale.

        Returns:
            True if everything loaded; False if the error banner was set
        """

        async def operation() -> bool:
            feeds, items, bundles, widgets = await asyncio.gather(
                self._feeds.get_all(strict=True),
                self._feed_items.get_all(strict=True),
                self._bundles.get_all(strict=True),
                self._widgets.get_all(strict=True),
            )
            self._state.feeds = feeds
            self._state.feed_items = items
            self._state.bundles = bundles
            self._state.widgets = widgets
            logger.info(
                "feed_dashboard_loaded",
                feeds=len(feeds),
                items=len(items),
                bundles=len(bundles),
                widgets=len(widgets),
            )
            return True

        return bool(await self._run("load", operation))

    # === FEEDS ===

    async def create_feed(self, data: Mapping[str, Any]) -> Feed | None:
        """Create a feed and append the stored result."""

        async def operation() -> Feed:
            feed = await self._feeds.create(data)
            self._state.feeds = [*self._state.feeds, feed]
            logger.info("feed_created", feed_id=feed.id, name=feed.name)
            return feed

        return await self._run("create_feed", operation)

    async def update_feed(self, feed_id: str, fields: Mapping[str, Any]) -> Feed | None:
        """Update a feed and replace it with the stored result."""

        async def operation() -> Feed:
            feed = await self._feeds.update(feed_id, fields)
            self._state.feeds = self._replace(self._state.feeds, feed)
            if self._state.selected_feed and self._state.selected_feed.id == feed.id:
                self._state.selected_feed = feed
            return feed

        return await self._run("update_feed", operation)

    async def toggle_feed_status(self, feed_id: str) -> Feed | None:
        """Flip a feed between active and paused."""
        feed = self.resolve_feed(feed_id)
        status = FeedStatus.ACTIVE
        if feed is not None and feed.status == FeedStatus.ACTIVE:
            status = FeedStatus.PAUSED
        return await self.update_feed(feed_id, {"status": status})

    async def delete_feed(self, feed_id: str) -> bool:
        """Delete a feed once the user confirms.

        Bundles and widgets keep their references to the deleted feed.

        Returns:
            True if the feed was deleted; False if declined or failed
        """
        feed = self.resolve_feed(feed_id)
        label = feed.name if feed else feed_id
        confirmed = self._confirm(f"Delete feed '{label}'?")
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed:
            logger.debug("feed_delete_declined", feed_id=feed_id)
            return False

        async def operation() -> bool:
            await self._feeds.delete(feed_id)
            self._state.feeds = [f for f in self._state.feeds if f.id != feed_id]
            if self._state.selected_feed and self._state.selected_feed.id == feed_id:
                self._state.selected_feed = None
            logger.info("feed_deleted", feed_id=feed_id)
            return True

        return bool(await self._run("delete_feed", operation))

    # === FEED FORM ===

    def edit_feed(self, feed_id: str | None) -> bool:
        """Open the feed form, pre-filled with a feed or empty for a new one.

        Returns:
            False if feed_id names no loaded feed; the form stays closed
            and the error banner is set
        """
        feed = None
        if feed_id:
            feed = self.resolve_feed(feed_id)
            if feed is None:
                logger.warning("feed_edit_missing", feed_id=feed_id)
                self._state.error = str(NotFoundError(Feed.entity_name, feed_id))
                return False

        self._state.selected_feed = feed
        self.navigate(FeedView.CREATE)
        return True

    async def submit_feed_form(self, data: Mapping[str, Any]) -> Feed | None:
        """Save the feed form.

        Updates the selected feed, or creates one when nothing is
        selected. On success returns to the dashboard and clears the
        selection; on failure the form stays open.
        """
        selected = self._state.selected_feed
        if selected is not None:
            feed = await self.update_feed(selected.id, data)
        else:
            feed = await self.create_feed(data)

        if feed is not None:
            self._state.selected_feed = None
            self.navigate(FeedView.DASHBOARD)
        return feed

    # === BUNDLES ===

    async def create_bundle(
        self,
        name: str,
        feed_ids: list[str],
        description: str = "",
    ) -> Bundle | None:
        """Create a bundle over at least one feed."""

        async def operation() -> Bundle:
            bundle = await self._bundles.create(
                {"name": name, "description": description, "feedIds": list(feed_ids)}
            )
            self._state.bundles = [*self._state.bundles, bundle]
            logger.info("bundle_created", bundle_id=bundle.id, feeds=len(bundle.feed_ids))
            return bundle

        return await self._run("create_bundle", operation)

    # === WIDGETS ===

    async def generate_widget(
        self,
        name: str,
        feed_ids: list[str],
        theme: str = "light",
    ) -> Widget | None:
        """Create a widget and store its embed snippet.

        The snippet needs the stored id, so it is written by a second
        update once the widget exists.
        """

        async def operation() -> Widget:
            widget = await self._widgets.create(
                {
                    "name": name,
                    "feedIds": list(feed_ids),
                    "style": {"theme": theme},
                }
            )
            embed_code = build_embed_code(widget.id, self._widget_base_url)
            widget = await self._widgets.update(widget.id, {"embedCode": embed_code})
            self._state.widgets = [*self._state.widgets, widget]
            logger.info("widget_generated", widget_id=widget.id, theme=widget.style.theme)
            return widget

        return await self._run("generate_widget", operation)

    async def record_widget_view(self, widget_id: str) -> Widget | None:
        """Increment a widget's view counter in storage."""

        async def operation() -> Widget:
            widget = await self._widgets.increment(widget_id, "views")
            if self._find(self._state.widgets, widget_id) is None:
                self._state.widgets = [*self._state.widgets, widget]
            else:
                self._state.widgets = self._replace(self._state.widgets, widget)
            return widget

        return await self._run("record_widget_view", operation)

    # === READER ===

    def visible_items(self, feed_id: str | None = None, search: str = "") -> list[FeedItem]:
        """Items of one feed (or all), matching search in title or description."""
        items = self._state.feed_items
        if feed_id:
            items = [item for item in items if item.feed_id == feed_id]
        term = search.strip().lower()
        if term:
            items = [
                item
                for item in items
                if term in item.title.lower() or term in item.description.lower()
            ]
        return items

    def summary(self, now: datetime | None = None) -> FeedSummary:
        """Count active feeds, loaded items and items published today.

        Today is the calendar day of ``now`` in its own timezone. Items
        with a missing or unparseable publication date are not counted
        as today's.
        """
        now = now or datetime.now(UTC)
        items_today = 0
        for item in self._state.feed_items:
            if not item.pub_date:
                continue
            try:
                published = ensure_date(item.pub_date)
            except ValueError:
                logger.debug("feed_item_date_invalid", item_id=item.id, pub_date=item.pub_date)
                continue
            if published.tzinfo is not None and now.tzinfo is not None:
                published = published.astimezone(now.tzinfo)
            if published.date() == now.date():
                items_today += 1

        return FeedSummary(
            active_feeds=sum(1 for f in self._state.feeds if f.status == FeedStatus.ACTIVE),
            total_items=len(self._state.feed_items),
            items_today=items_today,
        )

    def resolve_feed(self, feed_id: str | None) -> Feed | None:
        """Feed by id, or None for an unknown or deleted feed."""
        return self._find(self._state.feeds, feed_id)

    def feed_label(self, feed_id: str) -> str:
        """Display name of a referenced feed, tolerating dangling ids."""
        feed = self.resolve_feed(feed_id)
        return feed.name if feed else DELETED_FEED_LABEL
