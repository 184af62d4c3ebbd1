"""Text-only (L1) rules run directly, without the runner."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kousei.linting.rules import (
    ConjugationErrorRule,
    DialoguePunctuationRule,
    RedundantExpressionRule,
    SentenceLengthRule,
)
from kousei.models import Severity


class TestRedundantExpression:
    rule = RedundantExpressionRule()

    def test_flags_tautology_with_fix(self) -> None:
        text = "頭痛が痛いので休みます。"

        issues = self.rule.lint(text, self.rule.default_config)

        assert len(issues) == 1
        issue = issues[0]
        assert (issue.from_, issue.to) == (0, 5)
        assert issue.original_text == "頭痛が痛い"
        assert issue.fix is not None
        assert issue.fix.replacement == "頭が痛い"
        assert issue.reference is not None
        assert "二重表現" in issue.message_ja

    def test_dialogue_is_masked_when_configured(self) -> None:
        text = "「頭痛が痛い」と言った。"

        assert self.rule.lint(text, self.rule.default_config) == []

        unmasked = self.rule.default_config.merge({"skip_dialogue": False})
        issues = self.rule.lint(text, unmasked)
        assert [(i.from_, i.to) for i in issues] == [(1, 6)]

    def test_empty_text(self) -> None:
        assert self.rule.lint("", self.rule.default_config) == []


class TestConjugationErrors:
    rule = ConjugationErrorRule()

    def test_ra_nuki(self) -> None:
        issues = self.rule.lint("あの映画は見れる。", self.rule.default_config)

        assert len(issues) == 1
        assert issues[0].original_text == "見れる"
        assert issues[0].fix is not None
        assert issues[0].fix.replacement == "見られる"
        assert issues[0].severity is Severity.WARNING

    def test_standard_form_is_clean(self) -> None:
        assert self.rule.lint("あの映画は見られる。", self.rule.default_config) == []

    def test_sa_ire(self) -> None:
        issues = self.rule.lint("本を読まさせる。", self.rule.default_config)

        assert [i.fix.replacement for i in issues if i.fix] == ["読ませる"]

    def test_i_nuki_is_always_info(self) -> None:
        config = self.rule.default_config.merge({"severity": "error"})

        issues = self.rule.lint("今は本を読んでる。", config)

        assert len(issues) == 1
        assert issues[0].severity is Severity.INFO
        assert issues[0].fix is not None
        assert issues[0].fix.replacement == "読んでいる"


class TestDialoguePunctuation:
    rule = DialoguePunctuationRule()

    def test_nested_brackets_get_double_bracket_fix(self) -> None:
        text = "「彼が「はい」と言った」"

        issues = self.rule.lint(text, self.rule.default_config)

        assert len(issues) == 1
        assert (issues[0].from_, issues[0].to) == (3, 7)
        assert issues[0].fix is not None
        assert issues[0].fix.replacement == "『はい』"

    def test_empty_and_unmatched_brackets(self) -> None:
        text = "「」と言った」"

        issues = self.rule.lint(text, self.rule.default_config)

        ranges = sorted((i.from_, i.to) for i in issues)
        assert ranges == [(0, 2), (6, 7)]

    def test_unclosed_bracket_is_flagged_on_the_bracket(self) -> None:
        issues = self.rule.lint("彼は「待って", self.rule.default_config)

        assert [(i.from_, i.to) for i in issues] == [(2, 3)]
        assert "」" in issues[0].message_ja

    def test_clean_dialogue(self) -> None:
        assert self.rule.lint("「おはよう」と言った。", self.rule.default_config) == []


class TestSentenceLength:
    rule = SentenceLengthRule()

    def test_long_sentence_is_flagged(self) -> None:
        config = self.rule.default_config.merge({"options": {"max_length": 5}})
        text = "短い。これはとても長い文です。"

        issues = self.rule.lint(text, config)

        assert len(issues) == 1
        assert (issues[0].from_, issues[0].to) == (3, 14)
        assert "11文字" in issues[0].message_ja

    def test_dialogue_characters_do_not_count(self) -> None:
        config = self.rule.default_config.merge({"options": {"max_length": 5}})

        assert self.rule.lint("「とても長い台詞です」と。", config) == []

    def test_invalid_option_falls_back_to_default(self) -> None:
        config = self.rule.default_config.merge({"options": {"max_length": "many"}})

        assert self.rule.lint("あ" * 100 + "。", config) == []
        assert len(self.rule.lint("あ" * 101 + "。", config)) == 1
