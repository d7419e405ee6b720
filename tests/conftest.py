from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("POKERBOT_FEATURES", "POKERBOT_RULES_PATH", "POKERBOT_API_TOKENS", "POKERBOT_AUTH_DISABLED"):
        monkeypatch.delenv(name, raising=False)
