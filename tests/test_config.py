from __future__ import annotations

from pathlib import Path

import pytest

from pokerbot.core.config import Settings, SettingsError, parse_port, parse_token_map
from pokerbot.features.decision import AllowAllVerifier, AuthError, StaticTokenVerifier, verifier_from_settings


def test_parse_token_map():
    assert parse_token_map(None) == {}
    assert parse_token_map(" a:alice , b:bob,,c ") == {"a": "alice", "b": "bob", "c": "c"}


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POKERBOT_RULES_PATH", "/tmp/rules.csv")
    monkeypatch.setenv("POKERBOT_API_TOKENS", "tok:user-1")
    monkeypatch.setenv("POKERBOT_AUTH_DISABLED", "yes")
    monkeypatch.setenv("POKERBOT_CORS_ORIGIN", "https://a.example, https://b.example")
    monkeypatch.setenv("POKERBOT_LOG_LEVEL", "debug")
    monkeypatch.setenv("PORT", "9000")
    settings = Settings.from_env()
    assert settings.rules_path == Path("/tmp/rules.csv")
    assert settings.api_tokens == {"tok": "user-1"}
    assert settings.auth_disabled is True
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "DEBUG"
    assert settings.port == 9000


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in ("POKERBOT_CORS_ORIGIN", "POKERBOT_LOG_LEVEL", "BIND", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.rules_path is None
    assert settings.auth_disabled is False
    assert settings.cors_origins == ("*",)
    assert (settings.bind, settings.port) == ("0.0.0.0", 8000)


def test_verifier_from_settings():
    assert isinstance(verifier_from_settings(Settings(auth_disabled=True)), AllowAllVerifier)
    verifier = verifier_from_settings(Settings(api_tokens={"tok": "user-1"}))
    assert isinstance(verifier, StaticTokenVerifier)
    assert verifier.verify("tok") == "user-1"
    with pytest.raises(AuthError):
        verifier.verify(None)
    with pytest.raises(AuthError):
        verifier.verify("other")


def test_parse_port():
    assert parse_port(None) == 8000
    assert parse_port(" ") == 8000
    assert parse_port("9000") == 9000
    for raw in ("abc", "0", "70000", "80.5"):
        with pytest.raises(SettingsError, match="PORT"):
            parse_port(raw)


def test_bad_port_is_reported_by_name(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PORT", "http")
    with pytest.raises(SettingsError, match="PORT must be an integer between 1 and 65535, got 'http'"):
        Settings.from_env()
