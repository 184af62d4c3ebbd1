from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kousei.linting.rules import WordRepetitionRule
from kousei.models import Token


def _noun(surface: str, start: int, detail: str = "一般") -> Token:
    return Token(
        surface=surface,
        pos="名詞",
        pos_detail_1=detail,
        basic_form=surface,
        start=start,
        end=start + len(surface),
    )


def _tokens_for(text: str, word: str, detail: str = "一般") -> list[Token]:
    tokens = []
    index = text.find(word)
    while index != -1:
        tokens.append(_noun(word, index, detail))
        index = text.find(word, index + len(word))
    return tokens


def test_third_occurrence_in_window_is_reported() -> None:
    rule = WordRepetitionRule()
    text = "学校へ行く。学校で遊ぶ。学校が好きだ。"

    issues = rule.lint_with_tokens(text, _tokens_for(text, "学校"), rule.default_config)

    assert len(issues) == 1
    assert (issues[0].from_, issues[0].to) == (12, 14)
    assert "学校" in issues[0].message_ja


def test_below_threshold_is_clean() -> None:
    rule = WordRepetitionRule()
    text = "学校へ行く。学校で遊ぶ。"

    assert rule.lint_with_tokens(text, _tokens_for(text, "学校"), rule.default_config) == []


def test_occurrences_outside_the_window_do_not_accumulate() -> None:
    rule = WordRepetitionRule()
    config = rule.default_config.merge({"options": {"window_size": 2}})
    text = "学校だ。雨だ。学校だ。雨だ。学校だ。"

    assert rule.lint_with_tokens(text, _tokens_for(text, "学校"), config) == []


def test_overlapping_windows_do_not_duplicate_anchor() -> None:
    rule = WordRepetitionRule()
    config = rule.default_config.merge({"options": {"window_size": 3, "threshold": 2}})
    text = "学校だ。学校だ。雨だ。雨だ。"

    issues = rule.lint_with_tokens(text, _tokens_for(text, "学校"), config)

    # Windows [0-2] and [1-3]: only the first reaches the threshold, anchored at 学校 #2
    assert [(i.from_, i.to) for i in issues] == [(4, 6)]


def test_single_character_and_functional_words_are_not_counted() -> None:
    rule = WordRepetitionRule()
    text = "猫だ。猫だ。猫だ。"

    assert rule.lint_with_tokens(text, _tokens_for(text, "猫"), rule.default_config) == []

    pronoun_text = "彼女だ。彼女だ。彼女だ。"
    pronouns = _tokens_for(pronoun_text, "彼女", detail="代名詞")
    assert rule.lint_with_tokens(pronoun_text, pronouns, rule.default_config) == []


def test_dialogue_is_skipped_by_default() -> None:
    rule = WordRepetitionRule()
    text = "「学校だ。学校だ。学校だ。」"

    assert rule.lint_with_tokens(text, _tokens_for(text, "学校"), rule.default_config) == []
