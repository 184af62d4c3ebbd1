"""Built-in lint rules."""

from __future__ import annotations

from ..base_rule import LintRule
from .conjugation_errors import ConjugationErrorRule
from .counter_word_mismatch import CounterWordMismatchRule
from .dialogue_punctuation import DialoguePunctuationRule
from .notation_consistency import NotationConsistencyRule
from .redundant_expression import RedundantExpressionRule
from .sentence_length import SentenceLengthRule
from .word_repetition import WordRepetitionRule

BUILTIN_RULE_TYPES: tuple[type[LintRule], ...] = (
    RedundantExpressionRule,
    ConjugationErrorRule,
    DialoguePunctuationRule,
    SentenceLengthRule,
    NotationConsistencyRule,
    CounterWordMismatchRule,
    WordRepetitionRule,
)


def builtin_rules() -> list[LintRule]:
    """Fresh instances of every built-in rule."""

    return [rule_type() for rule_type in BUILTIN_RULE_TYPES]


__all__ = [
    "BUILTIN_RULE_TYPES",
    "ConjugationErrorRule",
    "CounterWordMismatchRule",
    "DialoguePunctuationRule",
    "NotationConsistencyRule",
    "RedundantExpressionRule",
    "SentenceLengthRule",
    "WordRepetitionRule",
    "builtin_rules",
]
