"""View selectors of the two dashboards.

Switching views is client-side state only; these enums are the whole
set of accepted values.
"""

from enum import StrEnum

__all__ = [
    "ChatbotView",
    "FeedView",
]


class FeedView(StrEnum):
    DASHBOARD = "dashboard"
    CREATE = "create"
    READER = "reader"
    BUNDLES = "bundles"
    WIDGETS = "widgets"
    ANALYTICS = "analytics"
    SETTINGS = "settings"


class ChatbotView(StrEnum):
    DASHBOARD = "dashboard"
    CREATE = "create"
    CONVERSATIONS = "conversations"
    INTEGRATIONS = "integrations"
    WIDGETS = "widgets"
    ANALYTICS = "analytics"
    SETTINGS = "settings"
