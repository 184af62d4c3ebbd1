from __future__ import annotations

from kousei.models import LintIssue, LintReference, LintRuleConfig, RuleLevel

from ..base_rule import LintRule
from ..dialogue_mask import scan_dialogue
from ..presets import LINT_DEFAULT_CONFIGS
from ..text_utils import SENTENCE_TERMINATORS, split_sentences

STYLE_GUIDE_REF = LintReference(standard="日本語スタイルガイド")
DEFAULT_MAX_LENGTH = 100


class SentenceLengthRule(LintRule):
    """Flag sentences longer than ``options["max_length"]`` characters.

    Dialogue characters do not count towards the length.
    """

    id = "sentence-length"
    name = "Sentence length"
    name_ja = "長文の検出"
    description = "Flags sentences exceeding a configurable length threshold"
    description_ja = "設定した文字数を超える文を検出します"
    level = RuleLevel.L1
    default_config = LINT_DEFAULT_CONFIGS["sentence-length"]

    def lint(self, text: str, config: LintRuleConfig) -> list[LintIssue]:
        if not text:
            return []
        max_length = self._int_option(config, "max_length", DEFAULT_MAX_LENGTH)
        mask = scan_dialogue(text)

        issues: list[LintIssue] = []
        for sentence in split_sentences(text):
            end = sentence.end
            if text[end - 1] in SENTENCE_TERMINATORS:
                end -= 1
            length = sum(
                1 for offset in range(sentence.start, end) if not mask.is_in_dialogue(offset)
            )
            if length <= max_length:
                continue
            issues.append(
                self._create_issue(
                    text,
                    sentence.start,
                    end,
                    config,
                    message=f"Sentence is {length} characters long (limit {max_length})",
                    message_ja=(
                        f"日本語スタイルガイドに基づき、この文は{length}文字です。"
                        f"{max_length}文字以内に分割することを推奨します"
                    ),
                    reference=STYLE_GUIDE_REF,
                )
            )
        return issues

