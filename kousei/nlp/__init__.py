from __future__ import annotations

from .fugashi_tokenizer import FugashiTokenizer, token_from_features
from .tokenizer import TokenizerClient, TokenizerError

__all__ = ["FugashiTokenizer", "TokenizerClient", "TokenizerError", "token_from_features"]
