"""RSS feed models for flowdesk.

These models represent configured feeds, their filter rules, and the
items fetched for them.
"""

from enum import StrEnum
from typing import ClassVar
from urllib.parse import urlparse

from pydantic import Field, PositiveInt, field_validator

from flowdesk.models.base import Entity, Record
from flowdesk.utils.ids import new_timestamp_id

__all__ = [
    "Feed",
    "FeedItem",
    "FeedStatus",
    "FilterAction",
    "FilterRule",
    "FilterType",
    "SourceType",
]


class SourceType(StrEnum):
    """Where a feed's content comes from."""

    WEBSITE = "website"
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    REDDIT = "reddit"
    LINKEDIN = "linkedin"
    TIKTOK = "tiktok"
    TELEGRAM = "telegram"
    MEDIUM = "medium"
    BLOG = "blog"


class FeedStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    ERROR = "error"


class FilterType(StrEnum):
    KEYWORD = "keyword"
    DOMAIN = "domain"
    DATE = "date"


class FilterAction(StrEnum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


class FilterRule(Record):
    """Include/exclude rule applied to a feed's items.

    Attributes:
        id: Timestamp-derived id, generated when omitted
        type: What the value is matched against
        action: Whether matching items are kept or dropped
        value: Keyword, domain or date expression
    """

    id: str = Field(default_factory=new_timestamp_id)
    type: FilterType = FilterType.KEYWORD
    action: FilterAction = FilterAction.INCLUDE
    value: str = Field(min_length=1)

    @field_validator("value")
    @classmethod
    def _strip_value(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("filter value must not be blank")
        return value


class Feed(Entity):
    """A configured source of syndicated content.

    Attributes:
        name: Display name, required
        source_url: Absolute http(s) URL of the source
        source_type: Kind of source (website or social platform)
        status: active, paused or error
        item_count: Number of items fetched so far
        filters: Include/exclude rules
        auto_refresh: Stored preference; nothing schedules refreshes
        refresh_interval: Refresh period in minutes
    """

    entity_name: ClassVar[str] = "feed"

    name: str
    description: str = ""
    source_url: str
    source_type: SourceType = SourceType.WEBSITE
    created_at: str
    updated_at: str | None = None
    status: FeedStatus = FeedStatus.ACTIVE
    item_count: int = Field(default=0, ge=0)
    filters: list[FilterRule] = Field(default_factory=list)
    auto_refresh: bool = True
    refresh_interval: PositiveInt = 60

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value

    @field_validator("source_url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("source URL must be an absolute http(s) URL")
        return value


class FeedItem(Entity):
    """A single item published by a feed."""

    entity_name: ClassVar[str] = "feed item"
    generated_fields: ClassVar[frozenset[str]] = frozenset({"id"})

    feed_id: str
    title: str
    description: str = ""
    link: str = ""
    pub_date: str
    author: str | None = None
    categories: list[str] = Field(default_factory=list)
    content: str | None = None
    image_url: str | None = None
    is_pinned: bool = False
    is_hidden: bool = False
