"""Colloquial conjugations flagged in formal writing.

- ra-nuki: ichidan potential forms missing ら (見れる → 見られる)
- sa-ire: godan causatives with an extra さ (読まさせる → 読ませる)
- i-nuki: progressive forms missing い (食べてる → 食べている)
"""

from __future__ import annotations

RA_NUKI_STEMS: tuple[str, ...] = (
    "見",
    "食べ",
    "出",
    "着",
    "起き",
    "寝",
    "落ち",
    "逃げ",
    "受け",
    "開け",
    "つけ",
    "やめ",
    "考え",
    "答え",
    "決め",
    "始め",
)

RA_NUKI_SUFFIXES: tuple[str, ...] = (
    "れる",
    "れない",
    "れた",
    "れれば",
    "れます",
    "れました",
    "れません",
)

SA_IRE_PAIRS: dict[str, str] = {
    "休まさせる": "休ませる",
    "読まさせる": "読ませる",
    "行かさせる": "行かせる",
    "書かさせる": "書かせる",
    "飲まさせる": "飲ませる",
    "待たさせる": "待たせる",
    "泣かさせる": "泣かせる",
}

I_NUKI_PAIRS: dict[str, str] = {
    "持ってる": "持っている",
    "食べてる": "食べている",
    "見てる": "見ている",
    "走ってる": "走っている",
    "読んでる": "読んでいる",
    "遊んでる": "遊んでいる",
    "待ってる": "待っている",
    "歩いてる": "歩いている",
    "飲んでる": "飲んでいる",
    "寝てる": "寝ている",
}


def ra_nuki_pairs() -> list[tuple[str, str]]:
    """(colloquial, standard) pairs for every stem and suffix."""

    return [
        (stem + suffix, stem + "ら" + suffix)
        for stem in RA_NUKI_STEMS
        for suffix in RA_NUKI_SUFFIXES
    ]
