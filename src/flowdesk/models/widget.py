"""Embeddable widget models for flowdesk."""

from enum import StrEnum
from typing import ClassVar

from pydantic import Field, PositiveInt, field_validator

from flowdesk.models.base import Entity, Record

__all__ = [
    "Widget",
    "WidgetStyle",
    "WidgetTheme",
]


class WidgetTheme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    CUSTOM = "custom"


class WidgetStyle(Record):
    """Visual configuration of an embedded widget."""

    theme: WidgetTheme = WidgetTheme.LIGHT
    primary_color: str | None = None
    font_family: str | None = None
    show_images: bool = True
    show_descriptions: bool = True
    items_per_page: PositiveInt = 10


class Widget(Entity):
    """Embeddable rendering of one or more feeds.

    Attributes:
        feed_ids: Feeds shown by the widget, at least one
        bundle_id: Optional bundle the widget was built from
        style: Visual configuration
        embed_code: Generated HTML snippet, opaque to flowdesk
        views: View counter
    """

    entity_name: ClassVar[str] = "widget"

    name: str
    feed_ids: list[str] = Field(min_length=1)
    bundle_id: str | None = None
    style: WidgetStyle = Field(default_factory=WidgetStyle)
    embed_code: str = ""
    created_at: str
    views: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value
