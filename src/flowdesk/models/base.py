"""Shared pydantic configuration for flowdesk entities.

Entities are stored as JSON objects with camelCase keys and exposed in
Python with snake_case attributes. Either spelling is accepted on input.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "Entity",
    "Record",
]


class Record(BaseModel):
    """Base for every persisted shape, nested or top level."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape used at rest."""
        return self.model_dump(mode="json", by_alias=True)


class Entity(Record):
    """Top-level entity addressed by a string id.

    Attributes:
        id: Unique identifier assigned at creation, never changed afterwards
    """

    entity_name: ClassVar[str] = "entity"

    # Fields the gateway assigns; callers cannot set or change them.
    generated_fields: ClassVar[frozenset[str]] = frozenset({"id", "created_at"})

    id: str = Field(min_length=1)

    @classmethod
    def has_field(cls, name: str) -> bool:
        return name in cls.model_fields

    @classmethod
    def field_name(cls, key: str) -> str | None:
        """Resolve a python name or a camelCase alias to the python field name."""
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return None
