from __future__ import annotations

import pytest

from pokerbot.core import feature_flags
from pokerbot.core.cards import (
    RANKS,
    SUITS,
    Card,
    HandFormatError,
    canonical_hand_abbrev,
    format_hand,
    parse_card,
    parse_hand,
)


def test_parse_hand_accepts_compact_and_spaced_forms():
    compact = parse_hand("AsKs")
    spaced = parse_hand("As Ks")
    assert compact == spaced
    assert compact.cards == (Card("A", "s"), Card("K", "s"))
    assert parse_hand("  Qh   Jd ").cards == (Card("Q", "h"), Card("J", "d"))


def test_parse_hand_yields_two_cards_for_every_rank_and_suit():
    for rank in RANKS:
        for suit in SUITS:
            hand = parse_hand(f"{rank}{suit}2c")
            assert len(hand.cards) == 2
            assert hand.first == Card(rank, suit)


@pytest.mark.parametrize(
    "text",
    ["", "   ", "AsK", "AsKsQ", "AsKsQs", "As Ks Qs", "A s", "Ahh Kd", "As K"],
)
def test_parse_hand_rejects_bad_shapes(text: str):
    with pytest.raises(HandFormatError):
        parse_hand(text)


def test_hand_format_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_hand("nope")


def test_strict_parser_normalises_case_and_rejects_unknown_symbols():
    assert parse_hand("aSkS").cards == (Card("A", "s"), Card("K", "s"))
    with pytest.raises(HandFormatError, match="rank"):
        parse_card("Xs")
    with pytest.raises(HandFormatError, match="suit"):
        parse_card("Ax")


def test_lax_flag_accepts_any_characters():
    with feature_flags.override(enable={"parser.lax_cards"}):
        hand = parse_hand("XxYy")
    assert hand.cards == (Card("X", "x"), Card("Y", "y"))
    # Explicit argument wins over the flag.
    with pytest.raises(HandFormatError):
        parse_hand("XxYy", lax=False)


def test_hand_properties_and_formatting():
    hand = parse_hand("2c Ac")
    assert hand.suited
    assert not hand.pair
    assert hand.ranks == ("2", "A")
    assert format_hand(hand) == "2cAc"
    assert format_hand(hand, spaced=True) == "2c Ac"
    assert str(hand) == "2cAc"


def test_canonical_hand_abbrev_pairs_suited_offsuit():
    assert canonical_hand_abbrev(parse_hand("5sAs")) == "A5s"
    assert canonical_hand_abbrev(parse_hand("Kd Qh")) == "KQo"
    assert canonical_hand_abbrev(parse_hand("7h7c")) == "77"


def test_repeated_card_is_accepted():
    hand = parse_hand("AsAs")
    assert hand.pair
    assert hand.suited
    assert canonical_hand_abbrev(hand) == "AA"
