"""Dialogue detection for Japanese quotation brackets.

Dialogue is the text enclosed by 「」 or 『』, brackets included. A single
left-to-right pass keeps a stack of open brackets; a closing bracket pairs
with the nearest open bracket of the same kind and any opens above it are
left unmatched. An unmatched open bracket makes dialogue run to the end of
the text. An unmatched closing bracket opens nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

OPEN_TO_CLOSE = {"「": "」", "『": "』"}
CLOSE_TO_OPEN = {close: open_ for open_, close in OPEN_TO_CLOSE.items()}
MASK_CHAR = "〇"


@dataclass(frozen=True)
class BracketPair:
    """A matched bracket pair.

    ``open`` and ``close`` are the offsets of the bracket characters;
    ``enclosing`` is the kind of the bracket pair directly around this one.
    """

    open: int
    close: int
    kind: str
    enclosing: str | None = None

    @property
    def inner_start(self) -> int:
        return self.open + 1

    @property
    def inner_end(self) -> int:
        return self.close

    @property
    def is_empty(self) -> bool:
        return self.close == self.open + 1


@dataclass(frozen=True)
class UnmatchedBracket:
    offset: int
    char: str

    @property
    def is_open(self) -> bool:
        return self.char in OPEN_TO_CLOSE


@dataclass
class DialogueMask:
    """Result of scanning one text for dialogue spans."""

    text: str
    pairs: list[BracketPair] = field(default_factory=list)
    unmatched: list[UnmatchedBracket] = field(default_factory=list)
    _flags: list[bool] = field(default_factory=list, repr=False)

    @classmethod
    def scan(cls, text: str) -> "DialogueMask":
        pairs: list[BracketPair] = []
        unmatched: list[UnmatchedBracket] = []
        stack: list[tuple[int, str]] = []

        for offset, char in enumerate(text):
            if char in OPEN_TO_CLOSE:
                stack.append((offset, char))
                continue
            if char not in CLOSE_TO_OPEN:
                continue
            wanted = CLOSE_TO_OPEN[char]
            match_index = None
            for index in range(len(stack) - 1, -1, -1):
                if stack[index][1] == wanted:
                    match_index = index
                    break
            if match_index is None:
                unmatched.append(UnmatchedBracket(offset, char))
                continue
            for open_offset, open_char in stack[match_index + 1 :]:
                unmatched.append(UnmatchedBracket(open_offset, open_char))
            open_offset, open_char = stack[match_index]
            del stack[match_index:]
            enclosing = stack[-1][1] if stack else None
            pairs.append(BracketPair(open_offset, offset, open_char, enclosing))

        unmatched.extend(UnmatchedBracket(offset, char) for offset, char in stack)
        unmatched.sort(key=lambda item: item.offset)
        pairs.sort(key=lambda pair: pair.open)

        flags = [False] * len(text)
        for pair in pairs:
            for index in range(pair.open, pair.close + 1):
                flags[index] = True
        for bracket in unmatched:
            if bracket.is_open:
                for index in range(bracket.offset, len(text)):
                    flags[index] = True

        return cls(text=text, pairs=pairs, unmatched=unmatched, _flags=flags)

    def is_in_dialogue(self, offset: int) -> bool:
        if offset < 0 or offset >= len(self._flags):
            return False
        return self._flags[offset]

    def contains(self, start: int, end: int) -> bool:
        """True when the whole range ``[start, end)`` lies inside dialogue."""

        if end <= start:
            return self.is_in_dialogue(start)
        if start < 0 or end > len(self._flags):
            return False
        return all(self._flags[start:end])

    def dialogue_ranges(self) -> list[tuple[int, int]]:
        """Maximal half-open ranges of dialogue characters."""

        ranges: list[tuple[int, int]] = []
        start = None
        for index, flag in enumerate(self._flags):
            if flag and start is None:
                start = index
            elif not flag and start is not None:
                ranges.append((start, index))
                start = None
        if start is not None:
            ranges.append((start, len(self._flags)))
        return ranges

    def dialogue_length(self) -> int:
        return sum(self._flags)

    def mask(self, replacement: str = MASK_CHAR) -> str:
        """Text with dialogue characters replaced; length is preserved.

        Raises:
            ValueError: ``replacement`` is not a single character.
        """

        if len(replacement) != 1:
            raise ValueError(
                f"replacement must be a single character, got {replacement!r}"
            )
        return "".join(
            replacement if flag else char for char, flag in zip(self.text, self._flags)
        )

    @property
    def nested_single_pairs(self) -> list[BracketPair]:
        """「」 pairs sitting directly inside another 「」 pair."""

        return [
            pair for pair in self.pairs if pair.kind == "「" and pair.enclosing == "「"
        ]

    @property
    def empty_pairs(self) -> list[BracketPair]:
        return [pair for pair in self.pairs if pair.is_empty]


@lru_cache(maxsize=128)
def scan_dialogue(text: str) -> DialogueMask:
    """Cached :meth:`DialogueMask.scan`; callers must not mutate the result."""

    return DialogueMask.scan(text)


def is_in_dialogue(offset: int, text: str) -> bool:
    return scan_dialogue(text).is_in_dialogue(offset)


def mask_dialogue(text: str) -> str:
    return scan_dialogue(text).mask()
