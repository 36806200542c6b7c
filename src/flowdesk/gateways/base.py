"""Shared entity handling for collection gateways.

Both gateway variants build new entities and merge partial updates the
same way; only the storage round-trips differ.
"""

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

import pydantic
from pydantic import BaseModel

from flowdesk.errors import PersistenceError, ValidationError
from flowdesk.models.base import Entity
from flowdesk.utils.dates import now_iso

__all__ = [
    "CollectionGateway",
]

EntityT = TypeVar("EntityT", bound=Entity)


class CollectionGateway(Generic[EntityT]):
    """Entity construction, merging and parsing for one collection."""

    def __init__(self, collection: str, model: type[EntityT]) -> None:
        self._collection = collection
        self._model = model

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def model(self) -> type[EntityT]:
        return self._model

    def _normalize(self, data: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
        """Map input keys to python field names, dropping generated fields."""
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)

        fields: dict[str, Any] = {}
        unknown = []
        for key, value in data.items():
            name = self._model.field_name(key)
            if name is None:
                unknown.append(key)
            elif name not in self._model.generated_fields:
                fields[name] = value

        if unknown:
            raise ValidationError(
                f"Unknown {self._model.entity_name} field(s): {', '.join(sorted(unknown))}"
            )
        return fields

    def _validate(self, fields: dict[str, Any]) -> EntityT:
        try:
            return self._model.model_validate(fields)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(self._model.entity_name, e) from e

    def _build_new(self, data: Mapping[str, Any] | BaseModel, entity_id: str) -> EntityT:
        """Build a new entity with generated id and creation time."""
        fields = self._normalize(data)
        fields["id"] = entity_id
        if self._model.has_field("created_at"):
            fields["created_at"] = now_iso()
        return self._validate(fields)

    def _merge(
        self,
        stored: EntityT,
        changes: Mapping[str, Any],
    ) -> tuple[EntityT, dict[str, Any]]:
        """Merge partial fields onto a stored entity.

        Returns:
            Tuple of (merged entity, JSON of the fields whose value changed)
        """
        fields = stored.model_dump()
        fields.update(self._normalize(changes))
        if self._model.has_field("updated_at"):
            fields["updated_at"] = now_iso()
        merged = self._validate(fields)

        before = stored.to_json()
        after = merged.to_json()
        changed = {key: value for key, value in after.items() if before.get(key) != value}
        return merged, changed

    def _counter(self, field: str) -> tuple[str, str]:
        """Resolve an integer field to (python name, stored key).

        Raises:
            ValidationError: If field is unknown, generated or not an integer
        """
        name = self._model.field_name(field)
        info = self._model.model_fields[name] if name else None
        if info is None or name in self._model.generated_fields or info.annotation is not int:
            raise ValidationError(f"'{field}' is not a counter of {self._model.entity_name}")
        return name, info.alias or name

    def _parse(self, record: dict[str, Any]) -> EntityT:
        """Parse a stored record; corrupt records are a persistence failure."""
        try:
            return self._model.model_validate(record)
        except pydantic.ValidationError as e:
            raise PersistenceError(
                f"Stored {self._model.entity_name} in '{self._collection}' is invalid: {e}"
            ) from e
