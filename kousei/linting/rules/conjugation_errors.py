from __future__ import annotations

from kousei.models import LintIssue, LintReference, LintRuleConfig, RuleLevel, Severity

from ..base_rule import LintRule, replace_fix
from ..data.conjugation_forms import I_NUKI_PAIRS, SA_IRE_PAIRS, ra_nuki_pairs
from ..dialogue_mask import mask_dialogue
from ..presets import LINT_DEFAULT_CONFIGS
from ..text_utils import find_all

KEIGO_REF = LintReference(standard="文化庁「敬語の指針」(2007)")

_KIND_LABELS = {
    "ra-nuki": "ら抜き言葉",
    "sa-ire": "さ入れ言葉",
    "i-nuki": "い抜き言葉",
}


class ConjugationErrorRule(LintRule):
    """Detect ra-nuki, sa-ire and i-nuki conjugations.

    i-nuki is common in casual prose, so it is always reported as info.
    """

    id = "conjugation-errors"
    name = "Conjugation error detection"
    name_ja = "活用の誤り検出"
    description = "Detect ra-nuki, sa-ire and i-nuki conjugation errors"
    description_ja = "ら抜き・さ入れ・い抜き言葉の検出"
    level = RuleLevel.L1
    default_config = LINT_DEFAULT_CONFIGS["conjugation-errors"]

    def lint(self, text: str, config: LintRuleConfig) -> list[LintIssue]:
        if not text:
            return []
        scan_text = mask_dialogue(text) if config.skip_dialogue else text

        issues: list[LintIssue] = []
        for wrong, correct in ra_nuki_pairs():
            issues.extend(self._check(text, scan_text, wrong, correct, "ra-nuki", config))
        for wrong, correct in SA_IRE_PAIRS.items():
            issues.extend(self._check(text, scan_text, wrong, correct, "sa-ire", config))
        for wrong, correct in I_NUKI_PAIRS.items():
            issues.extend(
                self._check(
                    text, scan_text, wrong, correct, "i-nuki", config, Severity.INFO
                )
            )
        return issues

    def _check(
        self,
        text: str,
        scan_text: str,
        wrong: str,
        correct: str,
        kind: str,
        config: LintRuleConfig,
        severity: Severity | None = None,
    ) -> list[LintIssue]:
        return [
            self._create_issue(
                text,
                start,
                start + len(wrong),
                config,
                message=f'"{wrong}" is {kind}. Standard form: "{correct}"',
                message_ja=(
                    f"文化庁「敬語の指針」に基づき、「{wrong}」は{_KIND_LABELS[kind]}です。"
                    f"「{correct}」が標準的です"
                ),
                reference=KEIGO_REF,
                fix=replace_fix(correct),
                severity=severity,
            )
            for start in find_all(scan_text, wrong)
        ]
