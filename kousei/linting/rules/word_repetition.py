from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from kousei.models import LintIssue, LintReference, LintRuleConfig, RuleLevel, Token

from ..base_rule import LintRule
from ..dialogue_mask import scan_dialogue
from ..presets import LINT_DEFAULT_CONFIGS
from ..text_utils import split_sentences

STYLE_GUIDE_REF = LintReference(standard="日本語スタイルガイド")

CONTENT_POS = frozenset({"名詞", "動詞", "形容詞"})
EXCLUDED_POS_DETAIL = frozenset({"非自立", "接尾", "数", "代名詞", "固有名詞"})

DEFAULT_WINDOW_SIZE = 5
DEFAULT_THRESHOLD = 3


@dataclass(frozen=True)
class ContentWord:
    word: str
    token: Token


def is_content_word(token: Token) -> bool:
    if token.pos not in CONTENT_POS:
        return False
    if token.pos_detail_1 in EXCLUDED_POS_DETAIL:
        return False
    return len(token.surface) > 1


class WordRepetitionRule(LintRule):
    """Detect a content word used ``threshold`` times within ``window_size`` sentences.

    Words are compared by dictionary form. Each window reports the occurrence
    that reached the threshold; an occurrence is never reported twice. A text
    shorter than the window is treated as one window.
    """

    id = "word-repetition"
    name = "Word repetition"
    name_ja = "近接語句の反復検出"
    description = "Detects repeated content words in nearby sentences"
    description_ja = "近接する文で同じ語句が繰り返し使われている箇所を検出します"
    level = RuleLevel.L2
    default_config = LINT_DEFAULT_CONFIGS["word-repetition"]

    def lint_with_tokens(
        self,
        text: str,
        tokens: Sequence[Token],
        config: LintRuleConfig,
    ) -> list[LintIssue]:
        if not text or not tokens:
            return []
        window_size = self._int_option(config, "window_size", DEFAULT_WINDOW_SIZE)
        threshold = self._int_option(config, "threshold", DEFAULT_THRESHOLD)

        sentence_words = self._words_by_sentence(text, tokens, config)
        if not sentence_words:
            return []

        window_count = max(1, len(sentence_words) - window_size + 1)
        span = min(window_size, len(sentence_words))
        reported: set[int] = set()
        issues: list[LintIssue] = []

        for window_start in range(window_count):
            counts: dict[str, int] = {}
            for words in sentence_words[window_start : window_start + span]:
                for item in words:
                    counts[item.word] = counts.get(item.word, 0) + 1
                    if counts[item.word] != threshold:
                        continue
                    if item.token.start in reported:
                        continue
                    reported.add(item.token.start)
                    issues.append(self._issue(text, item, window_start, span, config))
        return issues

    def _words_by_sentence(
        self,
        text: str,
        tokens: Sequence[Token],
        config: LintRuleConfig,
    ) -> list[list[ContentWord]]:
        mask = scan_dialogue(text) if config.skip_dialogue else None
        sentences = split_sentences(text)
        grouped: list[list[ContentWord]] = [[] for _ in sentences]
        for token in tokens:
            if not is_content_word(token) or token.end > len(text):
                continue
            if mask is not None and mask.is_in_dialogue(token.start):
                continue
            for index, sentence in enumerate(sentences):
                if sentence.start <= token.start and token.end <= sentence.end:
                    grouped[index].append(ContentWord(token.normalized_form, token))
                    break
        return grouped

    def _issue(
        self,
        text: str,
        item: ContentWord,
        window_start: int,
        span: int,
        config: LintRuleConfig,
    ) -> LintIssue:
        threshold = self._int_option(config, "threshold", DEFAULT_THRESHOLD)
        return self._create_issue(
            text,
            item.token.start,
            item.token.end,
            config,
            message=(
                f"'{item.word}' appears {threshold} or more times in "
                f"{span} consecutive sentences (from sentence {window_start + 1})"
            ),
            message_ja=(
                f"日本語スタイルガイドに基づき、「{item.word}」が{span}文中に"
                f"{threshold}回以上使われています。言い換えを検討してください"
            ),
            reference=STYLE_GUIDE_REF,
        )
