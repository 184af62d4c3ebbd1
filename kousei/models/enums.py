"""Enumerations shared by the lint models.

Values are serialised as-is into JSON output, so they must stay stable.
"""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """How strongly an issue is reported to the writer."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class RuleLevel(str, Enum):
    """Detection tier of a rule.

    Values:
        L1: text-only pattern rules
        L2: rules that need morphological tokens
        L3: rules that are later confirmed by an LLM
    """

    L1 = "L1"
    L2 = "L2"
    L3 = "L3"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class ValidationStatus(str, Enum):
    """Outcome recorded on an issue after the candidate validator has seen it."""

    CONFIRMED = "confirmed"
    UNVALIDATED = "unvalidated"
    SKIPPED = "skipped"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]
