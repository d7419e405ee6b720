from __future__ import annotations

import itertools
import logging
import secrets
import string
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ...core.models import Decision, Situation
from ...core.resolver import DecisionResolver, format_amount, format_percent
from .concurrency import run_blocking

__all__ = [
    "ChatMessage",
    "ChatSession",
    "ChatSessionManager",
    "SendResult",
    "bot_text",
    "user_text",
]

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_BOT = "bot"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChatMessage:
    id: str
    role: str
    text: str
    created_at: datetime
    seq: int


@dataclass
class ChatSession:
    id: str
    user_id: str
    title: str
    created_at: datetime
    seq: int
    messages: list[ChatMessage] = field(default_factory=list)


@dataclass(frozen=True)
class SendResult:
    user_message: ChatMessage
    bot_message: ChatMessage
    decision: Decision


def user_text(situation: Situation) -> str:
    """Render a situation the way it is logged in the chat."""

    return (
        f"Hand: {situation.hand}, Stage: {situation.stage or ''}, Style: {situation.style or ''}, "
        f"Players: {situation.num_players}, Board: {situation.board}, "
        f"Pot: {format_amount(situation.pot_size)}, To Call: {format_amount(situation.to_call)}"
    )


def bot_text(decision: Decision) -> str:
    probabilities = " | ".join(
        f"{entry.action}: {format_percent(entry.probability)}%" for entry in decision.breakdown
    )
    return (
        f"Action: {decision.best_action.upper()} (confidence {format_percent(decision.confidence)}%)\n"
        f"Probabilities: {probabilities}\n"
        f"Reasoning: {decision.explanation}"
    )


class ChatSessionManager:
    """In-memory chat sessions, each owned by one user."""

    def __init__(self, resolver: DecisionResolver) -> None:
        self._resolver = resolver
        self._sessions: dict[str, ChatSession] = {}
        self._lock = threading.Lock()
        # Monotonic ordering; wall-clock timestamps can tie.
        self._counter = itertools.count()

    @property
    def resolver(self) -> DecisionResolver:
        return self._resolver

    def create_session(self, user_id: str, title: str | None = None) -> ChatSession:
        created = _now()
        label = (title or "").strip() or f"Session {created.strftime('%Y-%m-%d %H:%M:%S')}"
        with self._lock:
            session = ChatSession(
                id=_sid(),
                user_id=user_id,
                title=label,
                created_at=created,
                seq=next(self._counter),
            )
            self._sessions[session.id] = session
        logger.debug("Created chat session %s for %s", session.id, user_id)
        return session

    async def create_session_async(self, user_id: str, title: str | None = None) -> ChatSession:
        return await run_blocking(self.create_session, user_id, title)

    def list_sessions(self, user_id: str) -> list[ChatSession]:
        with self._lock:
            owned = [session for session in self._sessions.values() if session.user_id == user_id]
        return sorted(owned, key=lambda session: session.seq, reverse=True)

    async def list_sessions_async(self, user_id: str) -> list[ChatSession]:
        return await run_blocking(self.list_sessions, user_id)

    def get_session(self, user_id: str, session_id: str) -> ChatSession:
        with self._lock:
            return self._require_session(user_id, session_id)

    def messages(self, user_id: str, session_id: str) -> list[ChatMessage]:
        with self._lock:
            session = self._require_session(user_id, session_id)
            return sorted(session.messages, key=lambda message: message.seq)

    async def messages_async(self, user_id: str, session_id: str) -> list[ChatMessage]:
        return await run_blocking(self.messages, user_id, session_id)

    def send(self, user_id: str, session_id: str, situation: Situation) -> SendResult:
        """Record a situation and the bot's answer to it.

        The decision is resolved before anything is written, so a hand that
        fails to parse leaves the session untouched.
        """

        with self._lock:
            self._require_session(user_id, session_id)
        decision = self._resolver.decide(situation)

        with self._lock:
            session = self._require_session(user_id, session_id)
            user_message = self._append(session, ROLE_USER, user_text(situation))
            bot_message = self._append(session, ROLE_BOT, bot_text(decision))
        logger.debug("Session %s: %s -> %s", session_id, situation.hand, decision.best_action)
        return SendResult(user_message=user_message, bot_message=bot_message, decision=decision)

    async def send_async(self, user_id: str, session_id: str, situation: Situation) -> SendResult:
        return await run_blocking(self.send, user_id, session_id, situation)

    def _append(self, session: ChatSession, role: str, text: str) -> ChatMessage:
        message = ChatMessage(id=_sid(), role=role, text=text, created_at=_now(), seq=next(self._counter))
        session.messages.append(message)
        return message

    def _require_session(self, user_id: str, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        # Foreign sessions look the same as missing ones.
        if session is None or session.user_id != user_id:
            raise KeyError(f"session '{session_id}' not found")
        return session


def _sid(length: int = 12) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))
