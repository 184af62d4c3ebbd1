from __future__ import annotations

from typing import Protocol, Sequence

from kousei.models import Token


class TokenizerError(Exception):
    """Raised when a tokenizer cannot analyse the given text."""


class TokenizerClient(Protocol):
    """Morphological analyser consumed by token-aware rules.

    ``tokenize`` must return tokens whose offsets index into ``text`` and
    raise :class:`TokenizerError` on failure.
    """

    def tokenize(self, text: str) -> Sequence[Token]: ...
