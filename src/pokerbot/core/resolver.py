"""Turn a recorded situation into a recommended action.

The resolver classifies the hole cards, then walks the rule table from the
most specific key to the least specific one:

1. ``(stage, style, group)``
2. ``("preflop", style, group)``
3. ``("preflop", "tight", group)``

When no row matches, the hand is folded with a fixed confidence.  The
resulting breakdown is a presentation aid rather than a model output: the
best action carries the rule confidence and the other two actions split the
remainder evenly.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from .cards import parse_hand
from .classifier import classify
from .models import (
    ACTIONS,
    DEFAULT_STAGE,
    DEFAULT_STYLE,
    ActionProbability,
    Decision,
    Rule,
    Situation,
)

if TYPE_CHECKING:
    from ..data.rule_loader import RuleTable

__all__ = [
    "DEFAULT_FALLBACK_CONFIDENCE",
    "DecisionResolver",
    "breakdown_for",
    "format_amount",
    "format_percent",
]

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ACTION = "fold"
DEFAULT_FALLBACK_CONFIDENCE = 0.6


def breakdown_for(best_action: str, confidence: float) -> tuple[ActionProbability, ...]:
    rest = (1 - confidence) / 2
    return tuple(
        ActionProbability(action=action, probability=confidence if action == best_action else rest)
        for action in ACTIONS
    )


def format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_percent(fraction: float) -> str:
    """Render a probability as a whole percentage, rounding halves up."""

    # Decimal(float) is exact, so 0.125 becomes 13 and 0.45 stays 45.
    return str(Decimal(fraction * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class DecisionResolver:
    """Resolve decisions against an injected, read-only rule table."""

    def __init__(self, table: RuleTable) -> None:
        self._table = table

    @property
    def table(self) -> RuleTable:
        return self._table

    def resolve_rule(self, stage: str, style: str, group: str) -> Rule:
        tiers = (
            ("exact", stage, style),
            ("preflop-style", DEFAULT_STAGE, style),
            ("preflop-tight", DEFAULT_STAGE, DEFAULT_STYLE),
        )
        for tier, tier_stage, tier_style in tiers:
            rule = self._table.find(tier_stage, tier_style, group)
            if rule is not None:
                logger.debug("Rule matched at tier %s for %s/%s/%s", tier, stage, style, group)
                return rule
        logger.debug("No rule for %s/%s/%s; using default fold", stage, style, group)
        return Rule(
            stage=DEFAULT_STAGE,
            style=DEFAULT_STYLE,
            group=group,
            action=DEFAULT_FALLBACK_ACTION,
            confidence=DEFAULT_FALLBACK_CONFIDENCE,
        )

    def decide(self, situation: Situation) -> Decision:
        stage = (situation.stage or DEFAULT_STAGE).lower()
        style = (situation.style or DEFAULT_STYLE).lower()
        group = classify(parse_hand(situation.hand)).value

        rule = self.resolve_rule(stage, style, group)
        best_action = rule.action
        confidence = rule.confidence

        explanation = (
            f"You have a {group.upper()} {situation.hand} in a {style.upper()} style on {stage.upper()} "
            f"with {situation.num_players} players. The rules suggest {best_action.upper()} with confidence "
            f"{format_percent(confidence)}%. Pot: {format_amount(situation.pot_size)}, "
            f"to call: {format_amount(situation.to_call)}."
        )
        return Decision(
            best_action=best_action,
            confidence=confidence,
            breakdown=breakdown_for(best_action, confidence),
            explanation=explanation,
            group=group,
            rule=rule,
        )
