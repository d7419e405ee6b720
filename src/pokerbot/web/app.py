from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from ..core import feature_flags
from ..core.config import Settings, configure_logging
from ..core.resolver import DecisionResolver
from ..data.rule_loader import get_table
from ..features.chat import ChatSessionManager, create_chat_router
from ..features.decision import TokenVerifier, create_decision_router, install_error_handlers, verifier_from_settings

__all__ = ["app", "create_app", "main"]

logger = logging.getLogger(__name__)


def _default_resolver(settings: Settings) -> DecisionResolver:
    # RuleTableError propagates: the app must not start without rules.
    return DecisionResolver(get_table(settings.rules_path))


def create_app(
    *,
    settings: Settings | None = None,
    resolver: DecisionResolver | None = None,
    verifier: TokenVerifier | None = None,
    chat: ChatSessionManager | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    resolver = resolver or _default_resolver(settings)
    verifier = verifier or verifier_from_settings(settings)
    chat = chat or ChatSessionManager(resolver)

    app = FastAPI(title="Poker Bot")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        # Browsers reject credentialed requests against a wildcard origin.
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return "Poker bot server is running."

    @app.get("/healthz")
    def healthz() -> dict[str, object]:
        return {"status": "ok", "rules": len(resolver.table), "features": sorted(feature_flags.enabled_flags())}

    app.include_router(create_decision_router(resolver, verifier))
    app.include_router(create_chat_router(chat, verifier))
    app.state.resolver = resolver
    app.state.chat = chat
    logger.info("Serving decisions from %d rules", len(resolver.table))
    return app


app = create_app()


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings=settings), host=settings.bind, port=settings.port)


if __name__ == "__main__":  # pragma: no cover
    main()
