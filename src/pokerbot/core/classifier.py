from __future__ import annotations

from enum import Enum

from .cards import BROADWAY, RANKS, HoleHand, parse_hand

__all__ = ["HandGroup", "classify", "classify_text"]

_PREMIUM_PAIRS = frozenset("AKQJT")


class HandGroup(str, Enum):
    """Coarse starting-hand buckets used as the rule table key."""

    PREMIUM = "premium"
    STRONG = "strong"
    SPECULATIVE = "speculative"
    TRASH = "trash"


def classify(hand: HoleHand) -> HandGroup:
    """Bucket two hole cards.

    Checks run in a fixed order and the first hit wins, so a suited broadway
    connector such as ``KsQs`` is premium rather than speculative.
    """

    suited = hand.suited
    low, high = hand.ranks

    if hand.pair:
        return HandGroup.PREMIUM if high in _PREMIUM_PAIRS else HandGroup.STRONG
    if low in BROADWAY and high in BROADWAY:
        return HandGroup.PREMIUM if suited else HandGroup.STRONG
    if suited and abs(RANKS.find(high) - RANKS.find(low)) == 1:
        return HandGroup.SPECULATIVE
    if suited and "A" in (low, high):
        return HandGroup.SPECULATIVE
    return HandGroup.TRASH


def classify_text(text: str) -> HandGroup:
    return classify(parse_hand(text))
