from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ...core.cards import HandFormatError
from ..decision.auth import TokenVerifier
from ..decision.router import user_dependency
from ..decision.schemas import DecideRequest
from .schemas import (
    ChatMessagePayload,
    ChatSessionPayload,
    CreateChatSessionRequest,
    MessageListPayload,
    SendResultPayload,
    SessionListPayload,
)
from .service import ChatSessionManager

__all__ = ["create_chat_router"]


class _ChatController:
    def __init__(self, manager: ChatSessionManager) -> None:
        self.manager = manager

    async def create(self, uid: str, body: CreateChatSessionRequest) -> JSONResponse:
        session = await self.manager.create_session_async(uid, body.title)
        payload = ChatSessionPayload.from_session(session)
        return JSONResponse(payload.model_dump(mode="json", by_alias=True), status_code=201)

    async def list_sessions(self, uid: str) -> JSONResponse:
        sessions = await self.manager.list_sessions_async(uid)
        payload = SessionListPayload(sessions=[ChatSessionPayload.from_session(s) for s in sessions])
        return JSONResponse(payload.model_dump(mode="json", by_alias=True))

    async def messages(self, uid: str, sid: str) -> JSONResponse:
        try:
            messages = await self.manager.messages_async(uid, sid)
        except KeyError as exc:
            raise HTTPException(404, f"session '{sid}' not found") from exc
        payload = MessageListPayload(messages=[ChatMessagePayload.from_message(m) for m in messages])
        return JSONResponse(payload.model_dump(mode="json", by_alias=True))

    async def send(self, uid: str, sid: str, body: DecideRequest) -> JSONResponse:
        if not body.hand:
            raise HTTPException(400, "hand is required")
        try:
            result = await self.manager.send_async(uid, sid, body.to_situation())
        except KeyError as exc:
            raise HTTPException(404, f"session '{sid}' not found") from exc
        except HandFormatError as exc:
            raise HTTPException(400, str(exc)) from exc
        payload = SendResultPayload.from_result(result, uid=uid)
        return JSONResponse(payload.model_dump(mode="json", by_alias=True, exclude_none=True))


def create_chat_router(manager: ChatSessionManager, verifier: TokenVerifier) -> APIRouter:
    controller = _ChatController(manager)
    current_user = user_dependency(verifier)

    router = APIRouter(prefix="/api/v1/chat/sessions", tags=["chat"])

    @router.post("")
    async def create_session(
        body: CreateChatSessionRequest | None = None, uid: str = Depends(current_user)
    ) -> JSONResponse:
        return await controller.create(uid, body or CreateChatSessionRequest())

    @router.get("")
    async def list_sessions(uid: str = Depends(current_user)) -> JSONResponse:
        return await controller.list_sessions(uid)

    @router.get("/{sid}/messages")
    async def get_messages(sid: str, uid: str = Depends(current_user)) -> JSONResponse:
        return await controller.messages(uid, sid)

    @router.post("/{sid}/messages")
    async def post_message(sid: str, body: DecideRequest, uid: str = Depends(current_user)) -> JSONResponse:
        return await controller.send(uid, sid, body)

    return router
