"""Tokenizer client backed by MeCab through fugashi and the IPADIC dictionary.

Both packages are optional (``pip install kousei-lint[tokenizer]``); they are
imported when the first text is tokenized.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Sequence

from kousei.models import Token
from kousei.models.token import UNKNOWN_FEATURE

from .tokenizer import TokenizerError

LOGGER = logging.getLogger(__name__)

IPADIC_FIELDS = (
    "pos",
    "pos_detail_1",
    "pos_detail_2",
    "pos_detail_3",
    "conjugation_type",
    "conjugation_form",
    "basic_form",
    "reading",
    "pronunciation",
)


def token_from_features(surface: str, features: Sequence[str], start: int) -> Token:
    """Build a :class:`Token` from an IPADIC feature row.

    Unknown words carry fewer than nine fields; missing ones become ``"*"``.
    """

    values = {
        name: (features[index] if index < len(features) else UNKNOWN_FEATURE)
        for index, name in enumerate(IPADIC_FIELDS)
    }
    return Token(surface=surface, start=start, end=start + len(surface), **values)


class FugashiTokenizer:
    """Adapter from fugashi nodes to :class:`Token` lists."""

    def __init__(self, mecab_args: str | None = None) -> None:
        self._mecab_args = mecab_args
        self._tagger: Any = None
        self._lock = threading.Lock()

    def _build_tagger(self) -> Any:
        try:
            import fugashi
            import ipadic
        except ImportError as exc:
            raise TokenizerError(
                "fugashi and ipadic are required for morphological analysis; "
                "install them with `pip install kousei-lint[tokenizer]`."
            ) from exc
        args = self._mecab_args if self._mecab_args is not None else ipadic.MECAB_ARGS
        LOGGER.debug("Creating MeCab tagger with args %r", args)
        return fugashi.GenericTagger(args)

    def _get_tagger(self) -> Any:
        with self._lock:
            if self._tagger is None:
                self._tagger = self._build_tagger()
            return self._tagger

    def tokenize(self, text: str) -> list[Token]:
        if not text:
            return []
        tagger = self._get_tagger()
        try:
            nodes = tagger(text)
        except Exception as exc:  # noqa: BLE001 - MeCab raises bare RuntimeErrors
            raise TokenizerError(f"MeCab failed to analyse text: {exc}") from exc

        tokens: list[Token] = []
        cursor = 0
        for node in nodes:
            surface = node.surface
            if not surface:
                continue
            start = text.find(surface, cursor)
            if start == -1:
                raise TokenizerError(
                    f"Token {surface!r} could not be aligned with the input text"
                )
            tokens.append(token_from_features(surface, tuple(node.feature), start))
            cursor = start + len(surface)
        return tokens
