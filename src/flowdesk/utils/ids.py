"""Identifier generation for flowdesk.

The key/value backend assigns ids on the client side as millisecond
timestamps rendered as strings. Two ids requested within the same
millisecond would collide, so the generator never hands out a value
lower than or equal to the previous one.
"""

import threading
import time

__all__ = [
    "TimestampIdFactory",
    "new_timestamp_id",
]


class TimestampIdFactory:
    """Strictly increasing, timestamp-derived string ids.

    Example:
        ids = TimestampIdFactory()
        ids()  # "1704067200000"
        ids()  # "1704067200001" when called within the same millisecond
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = now if now > self._last else self._last + 1
            return str(self._last)


_default_factory = TimestampIdFactory()


def new_timestamp_id() -> str:
    """Return the next id from the process-wide factory."""
    return _default_factory()
