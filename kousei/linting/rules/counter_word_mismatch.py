from __future__ import annotations

from typing import Sequence

from kousei.models import LintIssue, LintReference, LintRuleConfig, RuleLevel, Token

from ..base_rule import LintRule, replace_fix
from ..data.counter_words import find_mismatch
from ..dialogue_mask import scan_dialogue
from ..presets import LINT_DEFAULT_CONFIGS

STYLE_GUIDE_REF = LintReference(standard="文化庁「公用文作成の考え方」(2022)")

# Noun sub-categories that never denote a counted object.
EXCLUDED_NOUN_DETAIL = frozenset({"非自立", "接尾", "数", "代名詞"})

COUNTER_LOOKAHEAD = 2
NOUN_SEARCH_WINDOW = 10


def is_number_token(token: Token) -> bool:
    return token.pos == "名詞" and token.pos_detail_1 == "数"


def is_counter_token(token: Token) -> bool:
    return (
        token.pos == "名詞"
        and token.pos_detail_1 == "接尾"
        and token.pos_detail_2 == "助数詞"
    )


def is_content_noun(token: Token) -> bool:
    return token.pos == "名詞" and token.pos_detail_1 not in EXCLUDED_NOUN_DETAIL


def find_counted_noun(
    tokens: Sequence[Token], number_index: int, counter_index: int
) -> Token | None:
    """Nearest content noun before the number, else after the counter."""

    lower = max(0, number_index - NOUN_SEARCH_WINDOW)
    for index in range(number_index - 1, lower - 1, -1):
        if is_content_noun(tokens[index]):
            return tokens[index]
    upper = min(len(tokens) - 1, counter_index + NOUN_SEARCH_WINDOW)
    for index in range(counter_index + 1, upper + 1):
        if is_content_noun(tokens[index]):
            return tokens[index]
    return None


class CounterWordMismatchRule(LintRule):
    """Detect counters that do not fit the counted noun (犬が3人 → 匹)."""

    id = "counter-word-mismatch"
    name = "Counter word mismatch"
    name_ja = "助数詞の誤用検出"
    description = "Validates number + counter word combinations"
    description_ja = "助数詞と数えられる対象の組み合わせの誤りを検出します"
    level = RuleLevel.L2
    default_config = LINT_DEFAULT_CONFIGS["counter-word-mismatch"]

    def lint_with_tokens(
        self,
        text: str,
        tokens: Sequence[Token],
        config: LintRuleConfig,
    ) -> list[LintIssue]:
        if not text or not tokens:
            return []
        mask = scan_dialogue(text) if config.skip_dialogue else None

        issues: list[LintIssue] = []
        for index, token in enumerate(tokens):
            if not is_number_token(token):
                continue
            if mask is not None and mask.is_in_dialogue(token.start):
                continue
            counter_index = self._find_counter(tokens, index)
            if counter_index is None:
                continue
            noun = find_counted_noun(tokens, index, counter_index)
            if noun is None:
                continue
            counter = tokens[counter_index]
            mismatch = find_mismatch(counter.surface, noun.surface, noun.normalized_form)
            if mismatch is None:
                continue
            if counter.end > len(text):
                continue
            issues.append(
                self._create_issue(
                    text,
                    counter.start,
                    counter.end,
                    config,
                    message=(
                        f"Counter '{counter.surface}' may be incorrect for "
                        f"'{noun.surface}'; consider '{mismatch.suggestion}'"
                    ),
                    message_ja=(
                        f"文化庁「公用文作成の考え方」に基づき、「{noun.surface}」に対して"
                        f"助数詞「{counter.surface}」は不適切です。{mismatch.description_ja}"
                    ),
                    reference=STYLE_GUIDE_REF,
                    fix=replace_fix(mismatch.suggestion),
                )
            )
        return issues

    @staticmethod
    def _find_counter(tokens: Sequence[Token], number_index: int) -> int | None:
        last = min(len(tokens) - 1, number_index + COUNTER_LOOKAHEAD)
        for index in range(number_index + 1, last + 1):
            if is_counter_token(tokens[index]):
                return index
        return None
