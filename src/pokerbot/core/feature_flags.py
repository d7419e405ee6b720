"""Registry of opt-in behaviours.

Each flag names a behaviour that is off by default, usually one kept for
older clients.  A deployment enables flags with the ``POKERBOT_FEATURES``
environment variable (comma-separated, case-insensitive); tests and the CLI
switch them for a block of code with :func:`override`.

Only names listed in :data:`KNOWN_FLAGS` are accepted from code.  Unknown
names in the environment are logged and ignored so a stale deployment
setting cannot stop the service.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Final

__all__ = [
    "ENV_VAR",
    "KNOWN_FLAGS",
    "LAX_CARDS",
    "UnknownFlagError",
    "enabled_flags",
    "env_flags",
    "is_enabled",
    "override",
]

logger = logging.getLogger(__name__)

ENV_VAR: Final = "POKERBOT_FEATURES"

LAX_CARDS: Final = "parser.lax_cards"

KNOWN_FLAGS: Final[dict[str, str]] = {
    LAX_CARDS: "Accept any character as a card rank or suit instead of rejecting hands like 'XxYy'.",
}


class UnknownFlagError(ValueError):
    """Raised when code asks about a flag that is not registered."""


def _normalise(flag: str) -> str:
    return flag.strip().lower()


def _known(flag: str) -> str:
    key = _normalise(flag)
    if key not in KNOWN_FLAGS:
        raise UnknownFlagError(f"Unknown feature flag {flag!r} (known: {', '.join(sorted(KNOWN_FLAGS))})")
    return key


def env_flags(raw: str | None = None) -> frozenset[str]:
    """Flags enabled through the environment (or *raw*, when given)."""

    if raw is None:
        raw = os.getenv(ENV_VAR)
    flags: set[str] = set()
    for entry in (raw or "").split(","):
        key = _normalise(entry)
        if not key:
            continue
        if key not in KNOWN_FLAGS:
            logger.warning("Ignoring unknown feature flag %r in %s", entry.strip(), ENV_VAR)
            continue
        flags.add(key)
    return frozenset(flags)


_OVERRIDE_STACK: list[tuple[frozenset[str], frozenset[str]]] = []


def is_enabled(flag: str) -> bool:
    """Return True when *flag* is on; the innermost override wins."""

    key = _known(flag)
    for enabled, disabled in reversed(_OVERRIDE_STACK):
        if key in disabled:
            return False
        if key in enabled:
            return True
    return key in env_flags()


def enabled_flags() -> frozenset[str]:
    return frozenset(flag for flag in KNOWN_FLAGS if is_enabled(flag))


@contextmanager
def override(*, enable: Iterable[str] | None = None, disable: Iterable[str] | None = None) -> Iterator[None]:
    """Switch flags on or off within the block.

    Names are validated before the block runs.  Overrides nest.
    """

    enabled = frozenset(_known(flag) for flag in (enable or ()))
    disabled = frozenset(_known(flag) for flag in (disable or ()))
    _OVERRIDE_STACK.append((enabled, disabled))
    try:
        yield
    finally:
        _OVERRIDE_STACK.pop()
