from __future__ import annotations

import csv
import logging
import math
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.classifier import HandGroup
from ..core.models import ACTIONS, STAGES, STYLES, Rule

__all__ = [
    "REQUIRED_COLUMNS",
    "RuleTable",
    "RuleRepository",
    "RuleTableConfig",
    "RuleTableError",
    "default_rules_path",
    "get_table",
    "load_rules",
]

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("stage", "style", "group", "action", "confidence")

_GROUPS = tuple(group.value for group in HandGroup)


class RuleTableError(RuntimeError):
    """The rule resource is missing, unreadable, or malformed."""


def default_rules_path() -> Path:
    override = os.environ.get("POKERBOT_RULES_PATH")
    if override:
        return Path(override)
    return Path(__file__).with_name("rules") / "preflop_rules.csv"


@dataclass(slots=True)
class RuleTableConfig:
    """Where the rule table is read from."""

    resource: Path


class RuleTable:
    """Read-only, ordered collection of rules.

    Row order from the source resource is kept; lookups return the first row
    that matches.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: tuple[Rule, ...] | list[Rule] = ()) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def first_match(self, predicate: Callable[[Rule], bool]) -> Rule | None:
        return next((rule for rule in self._rules if predicate(rule)), None)

    def find(self, stage: str, style: str, group: str) -> Rule | None:
        return self.first_match(lambda r: r.stage == stage and r.style == style and r.group == group)


def _parse_confidence(raw: str, line: int) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuleTableError(f"Row {line}: confidence {raw!r} is not a number") from exc
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise RuleTableError(f"Row {line}: confidence {raw!r} must be between 0 and 1")
    return value


def _check_choice(column: str, value: str, allowed: tuple[str, ...], line: int) -> str:
    if value not in allowed:
        raise RuleTableError(f"Row {line}: unknown {column} {value!r} (expected one of {', '.join(allowed)})")
    return value


def _parse_row(row: dict[str, str | None], line: int) -> Rule:
    cells = {column: (row.get(column) or "").strip() for column in REQUIRED_COLUMNS}
    return Rule(
        stage=_check_choice("stage", cells["stage"].lower(), STAGES, line),
        style=_check_choice("style", cells["style"].lower(), STYLES, line),
        group=_check_choice("group", cells["group"].lower(), _GROUPS, line),
        action=_check_choice("action", cells["action"].lower(), ACTIONS, line),
        confidence=_parse_confidence(cells["confidence"], line),
    )


def load_rules(path: Path | str) -> RuleTable:
    """Read a ``stage,style,group,action,confidence`` CSV into a table."""

    resource = Path(path)
    try:
        with resource.open("r", encoding="utf-8-sig", newline="") as fh:
            reader = csv.DictReader(fh)
            fieldnames = [name.strip() for name in reader.fieldnames or []]
            missing = set(REQUIRED_COLUMNS) - set(fieldnames)
            if missing:
                raise RuleTableError(f"Missing required columns: {sorted(missing)}")
            reader.fieldnames = fieldnames
            rules: list[Rule] = []
            for row in reader:
                if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
                    continue
                rules.append(_parse_row(row, reader.line_num))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise RuleTableError(f"Cannot read rule table {resource}: {exc}") from exc

    logger.info("Loaded %d rules from %s", len(rules), resource)
    return RuleTable(rules)


class RuleRepository:
    def __init__(self, config: RuleTableConfig | None = None) -> None:
        resource = config.resource if config else default_rules_path()
        self._config = RuleTableConfig(resource=resource)
        self.table = load_rules(resource)

    @property
    def resource(self) -> Path:
        return self._config.resource


_REPOSITORIES: dict[Path, RuleRepository] = {}


def get_table(resource: Optional[Path] = None) -> RuleTable:
    """Return the shared table for *resource*, loading it on first use.

    ``None`` means :func:`default_rules_path`. A loaded table is never
    reloaded; a resource that fails to load is retried on the next call.
    """

    path = Path(resource) if resource is not None else default_rules_path()
    repository = _REPOSITORIES.get(path)
    if repository is None:
        repository = RuleRepository(RuleTableConfig(resource=path))
        _REPOSITORIES[path] = repository
    return repository.table
