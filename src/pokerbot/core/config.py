"""Process settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

__all__ = ["Settings", "SettingsError", "configure_logging", "parse_port", "parse_token_map"]

_TRUTHY = {"1", "true", "yes", "on"}


class SettingsError(ValueError):
    """An environment variable holds a value the service cannot use."""


def parse_port(raw: str | None, default: int = 8000) -> int:
    if raw is None or not raw.strip():
        return default
    message = f"PORT must be an integer between 1 and 65535, got {raw!r}"
    try:
        port = int(raw)
    except ValueError as exc:
        raise SettingsError(message) from exc
    if not 0 < port < 65536:
        raise SettingsError(message)
    return port


def parse_token_map(raw: str | None) -> dict[str, str]:
    """Parse ``"token:uid,token2:uid2"``; a bare token maps to itself."""

    tokens: dict[str, str] = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        token, _, uid = entry.partition(":")
        token = token.strip()
        if token:
            tokens[token] = uid.strip() or token
    return tokens


@dataclass(frozen=True)
class Settings:
    rules_path: Path | None = None
    api_tokens: dict[str, str] = field(default_factory=dict)
    auth_disabled: bool = False
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    bind: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> Settings:
        rules = os.environ.get("POKERBOT_RULES_PATH")
        origins = tuple(
            origin.strip() for origin in os.environ.get("POKERBOT_CORS_ORIGIN", "*").split(",") if origin.strip()
        )
        return cls(
            rules_path=Path(rules) if rules else None,
            api_tokens=parse_token_map(os.environ.get("POKERBOT_API_TOKENS")),
            auth_disabled=os.environ.get("POKERBOT_AUTH_DISABLED", "").strip().lower() in _TRUTHY,
            cors_origins=origins or ("*",),
            log_level=os.environ.get("POKERBOT_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            bind=os.environ.get("BIND", "0.0.0.0"),
            port=parse_port(os.environ.get("PORT")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
