from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.cards import HandFormatError
from ...core.resolver import DecisionResolver
from .auth import AuthError, TokenVerifier, bearer_token
from .schemas import DecideRequest, DecisionPayload, ErrorPayload

__all__ = ["create_decision_router", "install_error_handlers", "user_dependency"]

logger = logging.getLogger(__name__)


def user_dependency(verifier: TokenVerifier) -> Callable[[Request], str]:
    """Build a dependency that resolves the caller's uid or answers 401."""

    def _current_user(request: Request) -> str:
        try:
            return verifier.verify(bearer_token(request))
        except AuthError as exc:
            logger.info("Rejected request to %s: %s", request.url.path, exc)
            raise HTTPException(401, str(exc)) from exc

    return _current_user


def install_error_handlers(app: FastAPI) -> None:
    """Render HTTP errors as ``{"error": ...}`` bodies."""

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_request: Request, exc: StarletteHTTPException) -> Response:
        payload = ErrorPayload(error=str(exc.detail)).to_dict()
        return JSONResponse(payload, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(_request: Request, exc: RequestValidationError) -> Response:
        errors = exc.errors()
        reason = errors[0].get("msg", "malformed") if errors else "malformed"
        payload = ErrorPayload(error=f"Invalid request body: {reason}").to_dict()
        return JSONResponse(payload, status_code=400)


class _DecisionController:
    def __init__(self, resolver: DecisionResolver) -> None:
        self.resolver = resolver

    def decide(self, uid: str, body: DecideRequest) -> DecisionPayload:
        if not body.hand:
            raise HTTPException(400, "hand is required")
        try:
            decision = self.resolver.decide(body.to_situation())
        except HandFormatError as exc:
            raise HTTPException(400, str(exc)) from exc
        logger.debug("Decision for %s: %s (%.2f)", uid, decision.best_action, decision.confidence)
        return DecisionPayload.from_decision(decision, uid=uid)


def create_decision_router(resolver: DecisionResolver, verifier: TokenVerifier) -> APIRouter:
    controller = _DecisionController(resolver)
    current_user = user_dependency(verifier)

    router = APIRouter(prefix="/api/poker", tags=["decision"])

    @router.post("/decide")
    def decide(body: DecideRequest, uid: str = Depends(current_user)) -> JSONResponse:
        return JSONResponse(controller.decide(uid, body).to_dict())

    return router
