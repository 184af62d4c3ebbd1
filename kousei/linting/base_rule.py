"""Abstract lint rule.

A rule advertises its detection tier through ``level`` and overrides the
capability method(s) for that tier. Every capability defaults to returning
an empty list, so the runner can call any of them on any rule.
"""

from __future__ import annotations

from abc import ABC
from typing import Sequence

from kousei.models import (
    LintFix,
    LintIssue,
    LintReference,
    LintRuleConfig,
    Paragraph,
    ParagraphIssues,
    RuleLevel,
    Severity,
    Token,
)


class LintRule(ABC):
    """Base class for every rule.

    Subclasses set the class attributes and override one or more of
    :meth:`lint`, :meth:`lint_with_tokens` and :meth:`lint_document`.
    Rules are pure: they never raise for empty or malformed input.
    """

    id: str = ""
    name: str = ""
    name_ja: str = ""
    description: str = ""
    description_ja: str = ""
    level: RuleLevel = RuleLevel.L1
    document_level: bool = False
    default_config: LintRuleConfig = LintRuleConfig()

    def lint(self, text: str, config: LintRuleConfig) -> list[LintIssue]:
        return []

    def lint_with_tokens(
        self,
        text: str,
        tokens: Sequence[Token],
        config: LintRuleConfig,
    ) -> list[LintIssue]:
        return []

    def lint_document(
        self,
        paragraphs: Sequence[Paragraph],
        config: LintRuleConfig,
    ) -> list[ParagraphIssues]:
        return []

    @property
    def is_morphological(self) -> bool:
        return self.level in (RuleLevel.L2, RuleLevel.L3)

    @property
    def is_document_rule(self) -> bool:
        return self.document_level

    @staticmethod
    def _int_option(config: LintRuleConfig, key: str, default: int) -> int:
        """Positive integer option, falling back to ``default`` when unusable."""

        try:
            value = int(config.option(key, default))
        except (TypeError, ValueError):
            return default
        return value if value > 0 else default

    def _create_issue(
        self,
        text: str,
        start: int,
        end: int,
        config: LintRuleConfig,
        *,
        message: str,
        message_ja: str,
        reference: LintReference | None = None,
        fix: LintFix | None = None,
        severity: Severity | None = None,
    ) -> LintIssue:
        return LintIssue(
            rule_id=self.id,
            severity=severity or config.severity,
            message=message,
            message_ja=message_ja,
            from_=start,
            to=end,
            reference=reference,
            fix=fix,
            original_text=text[start:end],
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, level={self.level.value})"


def replace_fix(replacement: str, *, label: str | None = None) -> LintFix:
    """Fix that swaps the flagged range for ``replacement``."""

    return LintFix(
        label=label or f"Replace with '{replacement}'",
        label_ja=f"「{replacement}」に置換",
        replacement=replacement,
    )
