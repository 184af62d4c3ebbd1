"""Public model exports for the project.

Tests and other modules should import ``from kousei.models import LintIssue``.
"""

from __future__ import annotations

from .enums import RuleLevel, Severity, ValidationStatus
from .lint_issue import LintFix, LintIssue, LintReference, Paragraph, ParagraphIssues
from .rule_config import LintRuleConfig
from .token import Token

__all__ = [
    "LintFix",
    "LintIssue",
    "LintReference",
    "LintRuleConfig",
    "Paragraph",
    "ParagraphIssues",
    "RuleLevel",
    "Severity",
    "Token",
    "ValidationStatus",
]
