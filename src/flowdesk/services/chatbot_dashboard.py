"""View-state controller of the chatbot builder dashboard."""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from flowdesk.constants import CollectionKey
from flowdesk.errors import NotFoundError, ValidationError
from flowdesk.gateways.codecs import ChatbotDocumentCodec
from flowdesk.interfaces.storage import EntityGatewayInterface, StorageBackendInterface
from flowdesk.logging import get_logger
from flowdesk.models.chatbot import Chatbot
from flowdesk.models.conversation import Channel, Conversation, ConversationStatus
from flowdesk.models.views import ChatbotView
from flowdesk.services.base import DashboardController, DashboardState

__all__ = [
    "ChatbotDashboard",
    "ChatbotDashboardState",
]

logger = get_logger(__name__)

INTEGRATION_CHANNELS = (Channel.WHATSAPP, Channel.TELEGRAM)


@dataclass
class ChatbotDashboardState(DashboardState):
    """Everything the chatbot dashboard renders."""

    chatbots: list[Chatbot] = field(default_factory=list)
    conversations: list[Conversation] = field(default_factory=list)
    selected_bot: Chatbot | None = None


class ChatbotDashboard(DashboardController[ChatbotDashboardState]):
    """Controller of the chatbot builder dashboard.

    Chatbots have no delete path.

    Example:
        dashboard = ChatbotDashboard.from_backend(backend)
        await dashboard.load()
        bot = await dashboard.create_bot({"name": "Sales Bot"})
        await dashboard.add_conversation(bot.id, "hello")
    """

    view_enum = ChatbotView

    def __init__(
        self,
        *,
        chatbots: EntityGatewayInterface[Chatbot],
        conversations: EntityGatewayInterface[Conversation],
    ) -> None:
        super().__init__(ChatbotDashboardState())
        self._chatbots = chatbots
        self._conversations = conversations

    @classmethod
    def from_backend(cls, backend: StorageBackendInterface) -> Self:
        """Wire a dashboard to the collections of one backend."""
        return cls(
            chatbots=backend.gateway(
                CollectionKey.CHATBOTS, Chatbot, codec=ChatbotDocumentCodec()
            ),
            conversations=backend.gateway(CollectionKey.CONVERSATIONS, Conversation),
        )

    async def load(self) -> bool:
        """Load chatbots and conversations in parallel.

        Returns:
            True if everything loaded; False if the error banner was set
        """

        async def operation() -> bool:
            chatbots, conversations = await asyncio.gather(
                self._chatbots.get_all(strict=True),
                self._conversations.get_all(strict=True),
            )
            self._state.chatbots = chatbots
            self._state.conversations = conversations
            logger.info(
                "chatbot_dashboard_loaded",
                chatbots=len(chatbots),
                conversations=len(conversations),
            )
            return True

        return bool(await self._run("load", operation))

    # === CHATBOTS ===

    async def create_bot(self, data: Mapping[str, Any]) -> Chatbot | None:
        """Create a chatbot; it starts active with no conversations."""

        async def operation() -> Chatbot:
            bot = await self._chatbots.create(data)
            self._state.chatbots = [*self._state.chatbots, bot]
            logger.info("chatbot_created", bot_id=bot.id, name=bot.name)
            return bot

        return await self._run("create_bot", operation)

    async def update_bot(self, bot_id: str, fields: Mapping[str, Any]) -> Chatbot | None:
        """Update a chatbot with the server-confirmed result."""

        async def operation() -> Chatbot:
            return await self._update_bot(bot_id, fields)

        return await self._run("update_bot", operation)

    async def _update_bot(self, bot_id: str, fields: Mapping[str, Any]) -> Chatbot:
        return self._apply_bot(await self._chatbots.update(bot_id, fields))

    def _apply_bot(self, bot: Chatbot) -> Chatbot:
        self._state.chatbots = self._replace(self._state.chatbots, bot)
        if self._state.selected_bot and self._state.selected_bot.id == bot.id:
            self._state.selected_bot = bot
        return bot

    async def set_integration(self, bot_id: str, channel: str, enabled: bool) -> Chatbot | None:
        """Enable or disable a messaging channel of a chatbot."""

        async def operation() -> Chatbot:
            if channel not in INTEGRATION_CHANNELS:
                raise ValidationError(f"Unknown integration '{channel}'")
            bot = self._require_bot(bot_id)
            integrations = bot.integrations.to_json()
            integrations[str(channel)] = enabled
            return await self._update_bot(bot_id, {"integrations": integrations})

        return await self._run("set_integration", operation)

    def select_bot(self, bot_id: str | None) -> Chatbot | None:
        """Select a chatbot for the detail views; None clears the selection."""
        self._state.selected_bot = self.resolve_bot(bot_id)
        return self._state.selected_bot

    def resolve_bot(self, bot_id: str | None) -> Chatbot | None:
        """Chatbot by id, or None for an unknown id."""
        return self._find(self._state.chatbots, bot_id)

    def _require_bot(self, bot_id: str) -> Chatbot:
        bot = self.resolve_bot(bot_id)
        if bot is None:
            raise NotFoundError(Chatbot.entity_name, bot_id)
        return bot

    # === CONVERSATIONS ===

    async def add_conversation(
        self,
        bot_id: str,
        content: str,
        channel: str = Channel.WEB,
    ) -> Conversation | None:
        """Open a conversation with one user message and bump the bot's counter.

        The conversation insert and the counter increment are two separate
        writes; if the second fails the conversation stays and the error
        banner is set.
        """

        async def operation() -> Conversation:
            if not content.strip():
                raise ValidationError("Message content must not be empty")
            self._require_bot(bot_id)

            conversation = await self._conversations.create(
                {
                    "botId": bot_id,
                    "channel": channel,
                    "messages": [{"role": "user", "content": content}],
                }
            )
            self._state.conversations = [*self._state.conversations, conversation]

            # Counted from the stored record, not the loaded copy
            bot = self._apply_bot(await self._chatbots.increment(bot_id, "conversationsCount"))
            logger.info(
                "conversation_added",
                bot_id=bot_id,
                conversation_id=conversation.id,
                conversations_count=bot.conversations_count,
                channel=conversation.channel,
            )
            return conversation

        return await self._run("add_conversation", operation)

    async def close_conversation(self, conversation_id: str) -> Conversation | None:
        """Mark a conversation closed."""

        async def operation() -> Conversation:
            conversation = await self._conversations.update(
                conversation_id, {"status": ConversationStatus.CLOSED}
            )
            self._state.conversations = self._replace(self._state.conversations, conversation)
            return conversation

        return await self._run("close_conversation", operation)

    def conversations_for(self, bot_id: str) -> list[Conversation]:
        """Conversations of one chatbot, in stored order."""
        return [c for c in self._state.conversations if c.bot_id == bot_id]
