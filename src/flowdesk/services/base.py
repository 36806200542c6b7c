"""Shared view-state controller behaviour.

Both dashboards keep a current view, a loading flag and a dismissible
error banner, and run every intent the same way: await the gateway,
then apply the confirmed result. A failed intent leaves state as it was.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar, Generic, TypeVar

from flowdesk.errors import FlowdeskError, ValidationError
from flowdesk.logging import get_logger
from flowdesk.models.base import Entity

__all__ = [
    "DashboardController",
    "DashboardState",
]

logger = get_logger(__name__)

T = TypeVar("T")
EntityT = TypeVar("EntityT", bound=Entity)


@dataclass
class DashboardState:
    """State every dashboard exposes to the presentation layer."""

    current_view: str = "dashboard"
    loading: bool = False
    error: str | None = None


StateT = TypeVar("StateT", bound=DashboardState)


class DashboardController(Generic[StateT]):
    """Base class for the dashboard controllers."""

    view_enum: ClassVar[type[StrEnum]]

    def __init__(self, state: StateT) -> None:
        self._state = state

    @property
    def state(self) -> StateT:
        """Snapshot the presentation layer renders. Treat as read-only."""
        return self._state

    def navigate(self, view: str) -> None:
        """Switch the current view.

        Raises:
            ValidationError: If view is not one of the dashboard's views
        """
        try:
            self._state.current_view = self.view_enum(view).value
        except ValueError as e:
            raise ValidationError(f"Unknown view '{view}'") from e

    def dismiss_error(self) -> None:
        self._state.error = None

    async def _run(self, intent: str, operation: Callable[[], Awaitable[T]]) -> T | None:
        """Run one intent with the loading flag raised.

        FlowdeskError is logged and turned into the error banner; the
        intent then returns None.
        """
        self._state.loading = True
        try:
            return await operation()
        except FlowdeskError as e:
            logger.error("intent_failed", intent=intent, error=str(e))
            self._state.error = str(e)
            return None
        finally:
            self._state.loading = False

    @staticmethod
    def _find(entities: list[EntityT], entity_id: str | None) -> EntityT | None:
        if entity_id is None:
            return None
        return next((entity for entity in entities if entity.id == entity_id), None)

    @staticmethod
    def _replace(entities: list[EntityT], entity: EntityT) -> list[EntityT]:
        return [entity if current.id == entity.id else current for current in entities]
