from __future__ import annotations

from dataclasses import dataclass, field

STAGES: tuple[str, ...] = ("preflop", "flop", "turn", "river")
STYLES: tuple[str, ...] = ("tight", "loose", "aggressive", "passive")
# Breakdown order is fixed; the complement split assumes exactly three actions.
ACTIONS: tuple[str, ...] = ("fold", "call", "raise")

DEFAULT_STAGE = "preflop"
DEFAULT_STYLE = "tight"
DEFAULT_NUM_PLAYERS = 6


@dataclass(frozen=True, slots=True)
class Rule:
    stage: str
    style: str
    group: str
    action: str
    confidence: float


@dataclass(frozen=True, slots=True)
class Situation:
    hand: str
    stage: str | None = DEFAULT_STAGE
    style: str | None = DEFAULT_STYLE
    num_players: int = DEFAULT_NUM_PLAYERS
    board: str = ""
    pot_size: float = 0.0
    to_call: float = 0.0


@dataclass(frozen=True, slots=True)
class ActionProbability:
    action: str
    probability: float


@dataclass(frozen=True, slots=True)
class Decision:
    best_action: str
    confidence: float
    breakdown: tuple[ActionProbability, ...]
    explanation: str
    group: str
    # The rule that produced the decision; synthesized when nothing matched.
    rule: Rule | None = field(default=None, compare=False)
