from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...core.models import DEFAULT_NUM_PLAYERS, Decision, Situation

__all__ = [
    "ActionProbabilityPayload",
    "DecideRequest",
    "DecisionPayload",
    "ErrorPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _coerce_number(value: object, default: float) -> float:
    if value in (None, "") or isinstance(value, bool):
        return default
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


class DecideRequest(_APIModel):
    hand: str = ""
    stage: str | None = None
    style: str | None = None
    num_players: int = Field(DEFAULT_NUM_PLAYERS, alias="numPlayers")
    board: str = ""
    pot_size: float = Field(0.0, alias="potSize")
    to_call: float = Field(0.0, alias="toCall")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for alias, name in (("potSize", "pot_size"), ("toCall", "to_call")):
            key = alias if alias in cleaned or name not in cleaned else name
            cleaned[key] = _coerce_number(cleaned.get(key), 0.0)
        key = "numPlayers" if "numPlayers" in cleaned or "num_players" not in cleaned else "num_players"
        players = int(_coerce_number(cleaned.get(key), DEFAULT_NUM_PLAYERS))
        cleaned[key] = players if players > 0 else DEFAULT_NUM_PLAYERS
        for field in ("hand", "board"):
            value = cleaned.get(field)
            cleaned[field] = value.strip() if isinstance(value, str) else ""
        for field in ("stage", "style"):
            value = cleaned.get(field)
            cleaned[field] = value.strip() if isinstance(value, str) and value.strip() else None
        return cleaned

    def to_situation(self) -> Situation:
        return Situation(
            hand=self.hand,
            stage=self.stage,
            style=self.style,
            num_players=self.num_players,
            board=self.board,
            pot_size=self.pot_size,
            to_call=self.to_call,
        )


class ActionProbabilityPayload(_APIModel):
    action: str
    probability: float


class DecisionPayload(_APIModel):
    uid: str | None = None
    best_action: str = Field(..., alias="bestAction")
    confidence: float
    breakdown: list[ActionProbabilityPayload]
    explanation: str
    group: str

    @classmethod
    def from_decision(cls, decision: Decision, *, uid: str | None = None) -> DecisionPayload:
        return cls(
            uid=uid,
            best_action=decision.best_action,
            confidence=decision.confidence,
            breakdown=[
                ActionProbabilityPayload(action=entry.action, probability=entry.probability)
                for entry in decision.breakdown
            ],
            explanation=decision.explanation,
            group=decision.group,
        )


class ErrorPayload(_APIModel):
    error: str
