from __future__ import annotations

import pytest

from pokerbot.core.cards import HandFormatError
from pokerbot.core.models import Rule, Situation
from pokerbot.core.resolver import DecisionResolver
from pokerbot.data.rule_loader import RuleTable
from pokerbot.features.chat import ChatSessionManager, bot_text, user_text


def _manager() -> ChatSessionManager:
    table = RuleTable([Rule("preflop", "tight", "premium", "raise", 0.8)])
    return ChatSessionManager(DecisionResolver(table))


def test_send_records_user_then_bot_message():
    manager = _manager()
    session = manager.create_session("user-1")
    situation = Situation(hand="AsKs", stage="preflop", style="tight", num_players=6, board="", pot_size=0, to_call=0)

    result = manager.send("user-1", session.id, situation)

    assert result.decision.best_action == "raise"
    messages = manager.messages("user-1", session.id)
    assert [m.role for m in messages] == ["user", "bot"]
    assert messages[0] == result.user_message
    assert messages[0].text == "Hand: AsKs, Stage: preflop, Style: tight, Players: 6, Board: , Pot: 0, To Call: 0"
    assert messages[1].text == (
        "Action: RAISE (confidence 80%)\n"
        "Probabilities: fold: 10% | call: 10% | raise: 80%\n"
        "Reasoning: " + result.decision.explanation
    )


def test_messages_stay_in_send_order():
    manager = _manager()
    session = manager.create_session("user-1")
    for hand in ("AsKs", "7s2c", "9s8s"):
        manager.send("user-1", session.id, Situation(hand=hand))
    texts = [m.text for m in manager.messages("user-1", session.id) if m.role == "user"]
    assert [t.split(",")[0] for t in texts] == ["Hand: AsKs", "Hand: 7s2c", "Hand: 9s8s"]


def test_bad_hand_records_nothing():
    manager = _manager()
    session = manager.create_session("user-1")
    with pytest.raises(HandFormatError):
        manager.send("user-1", session.id, Situation(hand="AsK"))
    assert manager.messages("user-1", session.id) == []


def test_sessions_are_scoped_to_their_owner():
    manager = _manager()
    mine = manager.create_session("user-1", title="Friday game")
    manager.create_session("user-2")

    assert [s.id for s in manager.list_sessions("user-1")] == [mine.id]
    assert manager.get_session("user-1", mine.id).title == "Friday game"
    with pytest.raises(KeyError):
        manager.messages("user-2", mine.id)
    with pytest.raises(KeyError):
        manager.send("user-2", mine.id, Situation(hand="AsKs"))
    with pytest.raises(KeyError):
        manager.get_session("user-1", "missing")


def test_list_sessions_newest_first_with_default_titles():
    manager = _manager()
    first = manager.create_session("user-1")
    second = manager.create_session("user-1", title="  ")
    listed = manager.list_sessions("user-1")
    assert [s.id for s in listed] == [second.id, first.id]
    assert all(s.title.startswith("Session ") for s in listed)


def test_text_renderers_match_chat_format():
    manager = _manager()
    decision = manager.resolver.decide(Situation(hand="7s2c"))
    assert bot_text(decision).startswith("Action: FOLD (confidence 60%)\nProbabilities: fold: 60% | call: 20% | raise: 20%")
    text = user_text(Situation(hand="Qh Qd", stage="flop", style="loose", num_players=4, board="AhKdQs", pot_size=30, to_call=7.5))
    assert text == "Hand: Qh Qd, Stage: flop, Style: loose, Players: 4, Board: AhKdQs, Pot: 30, To Call: 7.5"


def test_bot_text_rounds_split_remainder_up():
    manager = ChatSessionManager(DecisionResolver(RuleTable([Rule("preflop", "loose", "premium", "raise", 0.75)])))
    decision = manager.resolver.decide(Situation(hand="AsKs", style="loose"))
    assert bot_text(decision).startswith(
        "Action: RAISE (confidence 75%)\nProbabilities: fold: 13% | call: 13% | raise: 75%\n"
    )
