"""View-state controllers for flowdesk."""

from flowdesk.services.base import DashboardController, DashboardState
from flowdesk.services.chatbot_dashboard import ChatbotDashboard, ChatbotDashboardState
from flowdesk.services.embed import build_embed_code
from flowdesk.services.feed_dashboard import FeedDashboard, FeedDashboardState, FeedSummary

__all__ = [
    "ChatbotDashboard",
    "ChatbotDashboardState",
    "DashboardController",
    "DashboardState",
    "FeedDashboard",
    "FeedDashboardState",
    "FeedSummary",
    "build_embed_code",
]
