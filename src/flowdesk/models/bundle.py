"""Bundle model for flowdesk."""

from enum import StrEnum
from typing import ClassVar

from pydantic import Field, field_validator

from flowdesk.models.base import Entity

__all__ = [
    "Bundle",
    "BundleStatus",
    "SortField",
    "SortOrder",
]


class BundleStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"


class SortField(StrEnum):
    DATE = "date"
    TITLE = "title"
    SOURCE = "source"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class Bundle(Entity):
    """Named aggregation of feeds for combined display.

    ``feed_ids`` may outlive the feeds they point at; resolving a
    dangling id is the reader's job.
    """

    entity_name: ClassVar[str] = "bundle"

    name: str
    description: str = ""
    feed_ids: list[str] = Field(min_length=1)
    created_at: str
    status: BundleStatus = BundleStatus.ACTIVE
    sort_by: SortField = SortField.DATE
    sort_order: SortOrder = SortOrder.DESC

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value
