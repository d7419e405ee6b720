from __future__ import annotations

from dataclasses import dataclass

from . import feature_flags

RANKS = "23456789TJQKA"
SUITS = "shdc"  # spades, hearts, diamonds, clubs
BROADWAY = frozenset("TJQKA")

LAX_CARDS_FLAG = feature_flags.LAX_CARDS


class HandFormatError(ValueError):
    """Raised when a hole-hand string cannot be split into two cards."""


@dataclass(frozen=True, slots=True)
class Card:
    rank: str
    suit: str

    @property
    def rank_index(self) -> int:
        # Unknown ranks (lax mode only) sort below deuces.
        return RANKS.find(self.rank)

    def __str__(self) -> str:
        return self.rank + self.suit


@dataclass(frozen=True, slots=True)
class HoleHand:
    first: Card
    second: Card

    @property
    def cards(self) -> tuple[Card, Card]:
        return (self.first, self.second)

    @property
    def suited(self) -> bool:
        return self.first.suit == self.second.suit

    @property
    def ranks(self) -> tuple[str, str]:
        """Ranks ordered ``(low, high)`` by position in ``RANKS``."""

        low, high = sorted((self.first.rank, self.second.rank), key=RANKS.find)
        return low, high

    @property
    def pair(self) -> bool:
        return self.first.rank == self.second.rank

    def __str__(self) -> str:
        return f"{self.first}{self.second}"


def parse_card(token: str, *, lax: bool | None = None) -> Card:
    if lax is None:
        lax = feature_flags.is_enabled(LAX_CARDS_FLAG)
    if len(token) != 2:
        raise HandFormatError(f"Card must be two characters like 'As', got {token!r}")
    rank, suit = token[0], token[1]
    if lax:
        return Card(rank=rank, suit=suit)
    rank = rank.upper()
    suit = suit.lower()
    if rank not in RANKS:
        raise HandFormatError(f"Unknown rank {token[0]!r} in card {token!r}")
    if suit not in SUITS:
        raise HandFormatError(f"Unknown suit {token[1]!r} in card {token!r}")
    return Card(rank=rank, suit=suit)


def parse_hand(text: str, *, lax: bool | None = None) -> HoleHand:
    """Parse ``"AsKs"`` or ``"As Ks"`` into a :class:`HoleHand`."""

    raw = (text or "").strip()
    parts = raw.split()
    if len(parts) == 1:
        if len(raw) != 4:
            raise HandFormatError("Hand format must be like 'AsKs' or 'As Ks'")
        parts = [raw[:2], raw[2:]]
    if len(parts) != 2:
        raise HandFormatError("Exactly 2 cards required for Texas Hold'em hand.")
    first, second = (parse_card(part, lax=lax) for part in parts)
    return HoleHand(first=first, second=second)


def format_hand(hand: HoleHand, *, spaced: bool = False) -> str:
    sep = " " if spaced else ""
    return sep.join(str(card) for card in hand.cards)


def canonical_hand_abbrev(hand: HoleHand) -> str:
    # Return like 'A5s', 'KQo', or '55'
    low, high = hand.ranks
    if hand.pair:
        return high + low
    return f"{high}{low}{'s' if hand.suited else 'o'}"
