from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core import feature_flags
from .core.cards import HandFormatError, canonical_hand_abbrev, parse_hand
from .core.config import Settings, configure_logging
from .core.models import DEFAULT_NUM_PLAYERS, STAGES, STYLES, Decision, Situation
from .core.resolver import DecisionResolver, format_percent
from .data.rule_loader import RuleTable, RuleTableError, default_rules_path, load_rules
from .features.decision.schemas import DecisionPayload

_ACTION_STYLE = {"fold": "red", "call": "yellow", "raise": "green"}


def _console(no_color: bool) -> Console:
    # Default: color ON, unless explicitly disabled via --no-color.
    if no_color:
        return Console(force_terminal=False, color_system=None, highlight=False)
    return Console(highlight=False)


def _load(path: str | None) -> RuleTable:
    return load_rules(Path(path) if path else default_rules_path())


def _render_decision(console: Console, situation: Situation, decision: Decision) -> None:
    hand = parse_hand(situation.hand)
    color = _ACTION_STYLE.get(decision.best_action, "bold")
    header = (
        f"[bold]{situation.hand}[/] [dim]({canonical_hand_abbrev(hand)})[/] is "
        f"[bold]{decision.group.upper()}[/]\n"
        f"Recommended: [bold {color}]{decision.best_action.upper()}[/] "
        f"({format_percent(decision.confidence)}% confidence)"
    )
    console.print(Panel(header, title="Poker Bot", border_style="bold cyan", expand=False))

    table = Table(box=box.SIMPLE_HEAVY, show_edge=False)
    table.add_column("Action", style="bold")
    table.add_column("Probability", justify="right")
    for entry in decision.breakdown:
        marker = " ◀" if entry.action == decision.best_action else ""
        table.add_row(entry.action, f"{format_percent(entry.probability)}%{marker}")
    console.print(table)
    console.print(decision.explanation, soft_wrap=True)


def _cmd_decide(args: argparse.Namespace) -> int:
    console = _console(args.no_color)
    situation = Situation(
        hand=" ".join(args.hand),
        stage=args.stage,
        style=args.style,
        num_players=args.players,
        board=args.board,
        pot_size=args.pot,
        to_call=args.to_call,
    )
    lax = {feature_flags.LAX_CARDS} if args.lax_cards else None
    with feature_flags.override(enable=lax):
        try:
            resolver = DecisionResolver(_load(args.rules))
            decision = resolver.decide(situation)
        except (HandFormatError, RuleTableError) as exc:
            console.print(f"[bold red]error:[/] {escape(str(exc))}", soft_wrap=True)
            return 2
        if args.json:
            print(json.dumps(DecisionPayload.from_decision(decision).to_dict(), indent=2))
        else:
            _render_decision(console, situation, decision)
    return 0


def _cmd_rules(args: argparse.Namespace) -> int:
    console = _console(args.no_color)
    try:
        table = _load(args.rules)
    except RuleTableError as exc:
        console.print(f"[bold red]error:[/] {escape(str(exc))}", soft_wrap=True)
        return 2
    grid = Table(title=f"{len(table)} rules", box=box.SIMPLE_HEAVY)
    for column in ("Stage", "Style", "Group", "Action"):
        grid.add_column(column)
    grid.add_column("Confidence", justify="right")
    for rule in table:
        if args.stage and rule.stage != args.stage:
            continue
        color = _ACTION_STYLE.get(rule.action, "bold")
        grid.add_row(rule.stage, rule.style, rule.group, f"[{color}]{rule.action}[/]", f"{rule.confidence:.2f}")
    console.print(grid)
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:  # pragma: no cover - runner
    import uvicorn

    from .web.app import create_app

    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)
    uvicorn.run(
        create_app(settings=settings),
        host=args.host or settings.bind,
        port=args.port or settings.port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pokerbot", description="Rule-based poker action advisor")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--rules", type=str, default=None, help="Rule table CSV (defaults to the packaged table)")
    sub = parser.add_subparsers(dest="command", required=True)

    decide = sub.add_parser("decide", help="Recommend an action for a hole hand")
    decide.add_argument("hand", nargs="+", help="Hole cards, e.g. AsKs or 'As Ks'")
    decide.add_argument("--stage", type=str.lower, choices=STAGES, default="preflop")
    decide.add_argument("--style", type=str.lower, choices=STYLES, default="tight")
    decide.add_argument("--players", type=int, default=DEFAULT_NUM_PLAYERS, help="Players at the table")
    decide.add_argument("--board", type=str, default="", help="Board cards (informational)")
    decide.add_argument("--pot", type=float, default=0.0, help="Pot size")
    decide.add_argument("--to-call", type=float, default=0.0, help="Amount to call")
    decide.add_argument("--json", action="store_true", help="Print the decision payload as JSON")
    decide.add_argument("--lax-cards", action="store_true", help="Accept unknown rank or suit characters")
    decide.set_defaults(func=_cmd_decide)

    rules = sub.add_parser("rules", help="Show the loaded rule table")
    rules.add_argument("--stage", type=str.lower, choices=STAGES, default=None)
    rules.set_defaults(func=_cmd_rules)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--log-level", type=str, default=None)
    serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
