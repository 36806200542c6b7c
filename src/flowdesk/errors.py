"""Error taxonomy for flowdesk.

Gateways raise these; controllers catch ``FlowdeskError`` per intent
and turn it into the dismissible error banner.
"""

from typing import Any

import pydantic

__all__ = [
    "FlowdeskError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]


class FlowdeskError(Exception):
    """Base class for every error flowdesk raises on purpose."""


class NotFoundError(FlowdeskError):
    """The entity addressed by an update does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class ValidationError(FlowdeskError):
    """Input rejected before anything was written.

    Raised for missing required fields, malformed URLs, unknown field
    names and unknown views.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, entity: str, exc: pydantic.ValidationError) -> "ValidationError":
        """Build a readable error from a pydantic validation failure."""
        parts = []
        for err in exc.errors():
            location = ".".join(str(p) for p in err.get("loc", ())) or entity
            parts.append(f"{location}: {err.get('msg', 'invalid value')}")
        return cls(f"Invalid {entity}: " + "; ".join(parts), errors=list(exc.errors()))


class PersistenceError(FlowdeskError):
    """The underlying store failed or returned something undecodable."""
