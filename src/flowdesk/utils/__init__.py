"""Utility functions for flowdesk.

This module contains internal utility functions.
"""

from flowdesk.utils.dates import ensure_date, now_iso
from flowdesk.utils.ids import TimestampIdFactory, new_timestamp_id
from flowdesk.utils.lazy_import import lazy_import

__all__ = [
    "TimestampIdFactory",
    "ensure_date",
    "lazy_import",
    "new_timestamp_id",
    "now_iso",
]
