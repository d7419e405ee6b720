"""Chat feature: per-user sessions that log situations and decisions."""

from .router import create_chat_router
from .schemas import ChatMessagePayload, ChatSessionPayload, SendResultPayload
from .service import ChatMessage, ChatSession, ChatSessionManager, SendResult, bot_text, user_text

__all__ = [
    "ChatMessage",
    "ChatMessagePayload",
    "ChatSession",
    "ChatSessionManager",
    "ChatSessionPayload",
    "SendResult",
    "SendResultPayload",
    "bot_text",
    "create_chat_router",
    "user_text",
]
