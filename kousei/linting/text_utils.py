from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


SENTENCE_TERMINATORS = frozenset("。！？!?\n")


@dataclass(frozen=True)
class Sentence:
    """A sentence slice; ``end`` includes the terminator when present."""

    start: int
    end: int
    text: str


def split_sentences(text: str) -> list[Sentence]:
    """Split ``text`` on Japanese and ASCII sentence terminators and newlines.

    Whitespace-only fragments are dropped.
    """

    sentences: list[Sentence] = []
    start = 0
    for index, char in enumerate(text):
        if char in SENTENCE_TERMINATORS:
            _append_sentence(sentences, text, start, index + 1)
            start = index + 1
    _append_sentence(sentences, text, start, len(text))
    return sentences


def _append_sentence(sentences: list[Sentence], text: str, start: int, end: int) -> None:
    chunk = text[start:end]
    if chunk.strip():
        sentences.append(Sentence(start, end, chunk))


def find_all(text: str, needle: str) -> Iterator[int]:
    """Yield non-overlapping start offsets of ``needle`` in ``text``."""

    if not needle:
        return
    index = text.find(needle)
    while index != -1:
        yield index
        index = text.find(needle, index + len(needle))
