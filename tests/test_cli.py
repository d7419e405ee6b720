from __future__ import annotations

import json
from pathlib import Path

import pytest

from pokerbot.cli import build_parser, main


def test_decide_json_output(capsys: pytest.CaptureFixture[str]):
    code = main(["--no-color", "decide", "AsKs", "--json"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["bestAction"] == "raise"
    assert data["group"] == "premium"
    assert [b["action"] for b in data["breakdown"]] == ["fold", "call", "raise"]


def test_decide_accepts_spaced_cards_and_renders_table(capsys: pytest.CaptureFixture[str]):
    code = main(["--no-color", "decide", "9s", "8s", "--style", "LOOSE", "--pot", "12", "--to-call", "4"])
    assert code == 0
    out = capsys.readouterr().out
    assert "SPECULATIVE" in out
    assert "CALL" in out
    assert "Pot: 12, to call: 4." in out


def test_decide_reports_bad_hands(capsys: pytest.CaptureFixture[str]):
    assert main(["--no-color", "decide", "AsK"]) == 2
    assert "error" in capsys.readouterr().out


def test_rules_command_uses_custom_table(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    path = tmp_path / "rules.csv"
    path.write_text("stage,style,group,action,confidence\nriver,passive,trash,fold,0.95\n", encoding="utf-8")
    assert main(["--no-color", "--rules", str(path), "rules"]) == 0
    out = capsys.readouterr().out
    assert "1 rules" in out
    assert "passive" in out


def test_missing_rules_file_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["--no-color", "--rules", str(tmp_path / "nope.csv"), "decide", "AsKs"]) == 2
    assert "Cannot read" in capsys.readouterr().out


def test_parser_rejects_unknown_stage():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["decide", "AsKs", "--stage", "showdown"])


def test_lax_cards_switch_accepts_unknown_characters(capsys: pytest.CaptureFixture[str]):
    assert main(["--no-color", "decide", "XsYs"]) == 2
    capsys.readouterr()
    assert main(["--no-color", "decide", "XsYs", "--lax-cards", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["group"] == "trash"
