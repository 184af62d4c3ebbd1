from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kousei.cli import build_parser, configure_runner, main


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "draft.txt"
    path.write_text(text, encoding="utf-8")
    return path


def _run(tmp_path: Path, *args: str) -> int:
    return main([*args, "--tokenizer", "none", "--dotenv", str(tmp_path / "missing.env")])


def test_text_output_reports_issue_location(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "良い天気です。\n頭痛が痛い。\n")

    exit_code = _run(tmp_path, str(path))

    out = capsys.readouterr().out
    assert exit_code == 0
    assert f"{path}:2:1: warning [redundant-expression]" in out
    assert "頭が痛い" in out


def test_json_output_lists_only_paragraphs_with_issues(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(tmp_path, "良い天気です。\n頭痛が痛い。\n")

    exit_code = _run(tmp_path, str(path), "--format", "json")

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [entry["paragraphIndex"] for entry in payload] == [1]
    issue = payload[0]["issues"][0]
    assert issue["ruleId"] == "redundant-expression"
    assert (issue["from"], issue["to"]) == (0, 5)


def test_strict_preset_errors_set_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "頭痛が痛い。")

    exit_code = _run(tmp_path, str(path), "--preset", "strict")

    assert exit_code == 1
    assert "error [redundant-expression]" in capsys.readouterr().out


def test_clean_text_prints_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "良い天気です。")

    assert _run(tmp_path, str(path)) == 0
    assert capsys.readouterr().out == ""


def test_rule_config_file_disables_rule(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "頭痛が痛い。")
    config = tmp_path / "rules.json"
    config.write_text(json.dumps({"redundant-expression": {"enabled": False}}), encoding="utf-8")

    assert _run(tmp_path, str(path), "--rule-config", str(config)) == 0
    assert "redundant-expression" not in capsys.readouterr().out


def test_invalid_rule_config_returns_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(tmp_path, "頭痛が痛い。")
    config = tmp_path / "rules.json"
    config.write_text("{not json", encoding="utf-8")

    assert _run(tmp_path, str(path), "--rule-config", str(config)) == 2
    assert "not valid JSON" in capsys.readouterr().err


def test_missing_input_file_returns_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(tmp_path, str(tmp_path / "absent.txt")) == 2
    assert "cannot read" in capsys.readouterr().err


def test_unknown_mode_is_rejected_by_parser() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["draft.txt", "--mode", "poetry"])


def test_configure_runner_uses_mode_preset_and_guidelines() -> None:
    args = build_parser().parse_args(
        ["draft.txt", "--mode", "academic", "--guideline", "novel-manuscript"]
    )

    runner = configure_runner(args, tokenizer=None)

    assert runner.active_guidelines == ["novel-manuscript"]
    assert runner.get_config("sentence-length").skip_dialogue is False
