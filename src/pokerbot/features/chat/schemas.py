from __future__ import annotations

from datetime import datetime

from pydantic import Field

from ..decision.schemas import DecisionPayload, _APIModel
from .service import ChatMessage, ChatSession, SendResult

__all__ = [
    "CreateChatSessionRequest",
    "ChatMessagePayload",
    "ChatSessionPayload",
    "MessageListPayload",
    "SendResultPayload",
    "SessionListPayload",
]


class CreateChatSessionRequest(_APIModel):
    title: str | None = None


class ChatMessagePayload(_APIModel):
    id: str
    role: str
    text: str
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_message(cls, message: ChatMessage) -> ChatMessagePayload:
        return cls(id=message.id, role=message.role, text=message.text, created_at=message.created_at)


class ChatSessionPayload(_APIModel):
    id: str
    user_id: str = Field(..., alias="userId")
    title: str
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_session(cls, session: ChatSession) -> ChatSessionPayload:
        return cls(id=session.id, user_id=session.user_id, title=session.title, created_at=session.created_at)


class SessionListPayload(_APIModel):
    sessions: list[ChatSessionPayload]


class MessageListPayload(_APIModel):
    messages: list[ChatMessagePayload]


class SendResultPayload(_APIModel):
    messages: list[ChatMessagePayload]
    decision: DecisionPayload

    @classmethod
    def from_result(cls, result: SendResult, *, uid: str) -> SendResultPayload:
        return cls(
            messages=[
                ChatMessagePayload.from_message(result.user_message),
                ChatMessagePayload.from_message(result.bot_message),
            ],
            decision=DecisionPayload.from_decision(result.decision, uid=uid),
        )
