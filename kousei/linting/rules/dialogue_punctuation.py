from __future__ import annotations

from kousei.models import LintFix, LintIssue, LintReference, LintRuleConfig, RuleLevel

from ..base_rule import LintRule
from ..dialogue_mask import OPEN_TO_CLOSE, scan_dialogue
from ..presets import LINT_DEFAULT_CONFIGS

JIS_REF = LintReference(standard="JIS X 4051:2004")


class DialoguePunctuationRule(LintRule):
    """Bracket hygiene for dialogue: nesting, empty pairs, unmatched brackets."""

    id = "dialogue-punctuation"
    name = "Dialogue punctuation"
    name_ja = "台詞の約物チェック"
    description = "Detects formatting errors in dialogue brackets"
    description_ja = "台詞のカギ括弧の書式エラーを検出します"
    level = RuleLevel.L1
    default_config = LINT_DEFAULT_CONFIGS["dialogue-punctuation"]

    def lint(self, text: str, config: LintRuleConfig) -> list[LintIssue]:
        if not text:
            return []
        mask = scan_dialogue(text)
        issues: list[LintIssue] = []

        for pair in mask.nested_single_pairs:
            inner = text[pair.inner_start : pair.inner_end]
            issues.append(
                self._create_issue(
                    text,
                    pair.open,
                    pair.close + 1,
                    config,
                    message="Nested dialogue should use double brackets 『』",
                    message_ja=(
                        "JIS X 4051:2004に基づき、カギ括弧内の引用には"
                        "二重カギ括弧『』を使用してください"
                    ),
                    reference=JIS_REF,
                    fix=LintFix(
                        label="Replace with double brackets",
                        label_ja="二重カギ括弧に変換",
                        replacement=f"『{inner}』",
                    ),
                )
            )

        for pair in mask.empty_pairs:
            issues.append(
                self._create_issue(
                    text,
                    pair.open,
                    pair.close + 1,
                    config,
                    message="Empty brackets detected",
                    message_ja="JIS X 4051:2004に基づき、空のカギ括弧が検出されました",
                    reference=JIS_REF,
                )
            )

        for bracket in mask.unmatched:
            if bracket.is_open:
                message = f"Bracket '{bracket.char}' is never closed"
                message_ja = f"「{bracket.char}」に対応する閉じ括弧「{OPEN_TO_CLOSE[bracket.char]}」がありません"
            else:
                message = f"Closing bracket '{bracket.char}' has no opening bracket"
                message_ja = f"閉じ括弧「{bracket.char}」に対応する開き括弧がありません"
            issues.append(
                self._create_issue(
                    text,
                    bracket.offset,
                    bracket.offset + 1,
                    config,
                    message=message,
                    message_ja=f"JIS X 4051:2004に基づき、{message_ja}",
                    reference=JIS_REF,
                )
            )
        return issues
