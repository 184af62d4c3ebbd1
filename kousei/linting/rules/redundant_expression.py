from __future__ import annotations

from kousei.models import LintIssue, LintReference, LintRuleConfig, RuleLevel

from ..base_rule import LintRule, replace_fix
from ..data.redundant_expressions import REDUNDANT_EXPRESSIONS
from ..dialogue_mask import mask_dialogue
from ..presets import LINT_DEFAULT_CONFIGS
from ..text_utils import find_all

STYLE_GUIDE_REF = LintReference(standard="日本語スタイルガイド")


class RedundantExpressionRule(LintRule):
    """Flag tautologies such as 頭痛が痛い and suggest the concise form."""

    id = "redundant-expression"
    name = "Redundant expression detection"
    name_ja = "二重表現の検出"
    description = "Detect tautological expressions where the same meaning is expressed twice"
    description_ja = "意味が重複している冗長な表現を検出"
    level = RuleLevel.L1
    default_config = LINT_DEFAULT_CONFIGS["redundant-expression"]

    def lint(self, text: str, config: LintRuleConfig) -> list[LintIssue]:
        if not text:
            return []
        scan_text = mask_dialogue(text) if config.skip_dialogue else text

        issues: list[LintIssue] = []
        for entry in REDUNDANT_EXPRESSIONS:
            for start in find_all(scan_text, entry.pattern):
                issues.append(
                    self._create_issue(
                        text,
                        start,
                        start + len(entry.pattern),
                        config,
                        message=(
                            f'Redundant expression "{entry.pattern}" can be replaced '
                            f'with "{entry.suggestion}"'
                        ),
                        message_ja=(
                            f"日本語スタイルガイドに基づき、「{entry.pattern}」は二重表現です。"
                            f"{entry.description_ja}。「{entry.suggestion}」への書き換えを推奨します"
                        ),
                        reference=STYLE_GUIDE_REF,
                        fix=replace_fix(entry.suggestion),
                    )
                )
        return issues
