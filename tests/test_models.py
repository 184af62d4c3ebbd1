from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kousei.models import (
    LintFix,
    LintIssue,
    LintRuleConfig,
    ParagraphIssues,
    Severity,
    Token,
    ValidationStatus,
)


def _issue(**overrides: object) -> LintIssue:
    data: dict[str, object] = {
        "rule_id": "redundant-expression",
        "severity": Severity.WARNING,
        "message": "Redundant",
        "message_ja": "二重表現です",
        "from_": 0,
        "to": 5,
    }
    data.update(overrides)
    return LintIssue(**data)


def test_issue_serialises_with_editor_aliases() -> None:
    issue = _issue(
        fix=LintFix(label="Replace", label_ja="置換", replacement="頭が痛い"),
        original_text="頭痛が痛い",
    )

    dumped = issue.model_dump(mode="json", by_alias=True, exclude_none=True)

    assert dumped["ruleId"] == "redundant-expression"
    assert dumped["from"] == 0
    assert dumped["to"] == 5
    assert dumped["messageJa"] == "二重表現です"
    assert dumped["fix"]["labelJa"] == "置換"
    assert dumped["originalText"] == "頭痛が痛い"
    assert "validationStatus" not in dumped


def test_issue_accepts_alias_input() -> None:
    issue = LintIssue.model_validate(
        {
            "ruleId": "x",
            "severity": "info",
            "message": "m",
            "messageJa": "m",
            "from": 2,
            "to": 3,
        }
    )

    assert issue.from_ == 2
    assert issue.severity is Severity.INFO


def test_issue_rejects_inverted_range() -> None:
    with pytest.raises(ValidationError):
        _issue(from_=4, to=2)


def test_issue_rejects_blank_rule_id() -> None:
    with pytest.raises(ValidationError):
        _issue(rule_id="   ")


def test_issue_copies_do_not_mutate_original() -> None:
    issue = _issue()

    confirmed = issue.with_status(ValidationStatus.CONFIRMED)
    shifted = issue.shifted(10)
    escalated = issue.with_severity(Severity.ERROR)

    assert issue.validation_status is None
    assert confirmed.validation_status is ValidationStatus.CONFIRMED
    assert (shifted.from_, shifted.to) == (10, 15)
    assert escalated.severity is Severity.ERROR
    assert issue.severity is Severity.WARNING


def test_issue_sort_key_orders_by_range_then_rule() -> None:
    issues = [
        _issue(rule_id="b", from_=1, to=2),
        _issue(rule_id="a", from_=1, to=2),
        _issue(rule_id="c", from_=0, to=9),
    ]

    ordered = sorted(issues, key=LintIssue.sort_key)

    assert [i.rule_id for i in ordered] == ["c", "a", "b"]


def test_rule_config_merge_preserves_unspecified_fields() -> None:
    base = LintRuleConfig(
        severity=Severity.INFO, skip_dialogue=True, options={"threshold": 3, "window_size": 5}
    )

    merged = base.merge({"severity": "error", "options": {"threshold": 4}})

    assert merged.severity is Severity.ERROR
    assert merged.skip_dialogue is True
    assert merged.enabled is True
    assert merged.options == {"threshold": 4, "window_size": 5}
    assert base.severity is Severity.INFO


def test_rule_config_merge_accepts_camel_case_and_models() -> None:
    base = LintRuleConfig()

    from_alias = base.merge({"skipDialogue": True})
    from_model = from_alias.merge(LintRuleConfig(enabled=False))

    assert from_alias.skip_dialogue is True
    assert from_model.enabled is False
    # Only fields explicitly set on the partial model are applied
    assert from_model.skip_dialogue is True


def test_rule_config_merge_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        LintRuleConfig().merge({"colour": "red"})


def test_token_normalised_form_falls_back_to_surface() -> None:
    verb = Token(surface="行っ", pos="動詞", basic_form="行く", start=0, end=2)
    unknown = Token(surface="ブログ", pos="名詞", basic_form="*", start=0, end=3)
    missing = Token(surface="犬", pos="名詞", basic_form=None, start=0, end=1)

    assert verb.normalized_form == "行く"
    assert unknown.normalized_form == "ブログ"
    assert missing.basic_form == "*"
    assert missing.normalized_form == "犬"


def test_token_is_pos() -> None:
    token = Token(surface="3", pos="名詞", pos_detail_1="数", start=0, end=1)

    assert token.is_pos("名詞")
    assert token.is_pos("名詞", "数")
    assert not token.is_pos("名詞", "一般")
    assert not token.is_pos("動詞")


def test_token_rejects_inverted_offsets() -> None:
    with pytest.raises(ValidationError):
        Token(surface="x", start=3, end=1)


def test_paragraph_issues_alias() -> None:
    result = ParagraphIssues(paragraph_index=2, issues=[_issue()])

    dumped = result.model_dump(by_alias=True)

    assert dumped["paragraphIndex"] == 2
    assert len(dumped["issues"]) == 1


def test_enum_all_values() -> None:
    assert Severity.all_values() == ["error", "warning", "info"]
    assert "confirmed" in ValidationStatus.all_values()
