"""Unambiguous counter (助数詞) and noun mismatches."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CounterMismatch:
    counter: str
    invalid_nouns: frozenset[str]
    suggestion: str
    description_ja: str

    def applies_to(self, *noun_forms: str) -> bool:
        return any(form in self.invalid_nouns for form in noun_forms)


def _mismatch(counter: str, nouns: str, suggestion: str, description_ja: str) -> CounterMismatch:
    return CounterMismatch(counter, frozenset(nouns.split()), suggestion, description_ja)


COUNTER_MISMATCHES: tuple[CounterMismatch, ...] = (
    _mismatch(
        "人",
        "犬 猫 鳥 魚 馬 牛 豚 羊 鶏 虫 蛇 兎 鼠 熊 鹿 猿 象",
        "匹",
        "動物には「匹」または「頭」を使います",
    ),
    _mismatch(
        "匹",
        "人 子供 大人 男 女 学生 先生 社員 客 患者",
        "人",
        "人には「人」を使います",
    ),
    _mismatch(
        "本",
        "紙 皿 切手 写真 葉 布 板 シート カード チケット",
        "枚",
        "薄く平たいものには「枚」を使います",
    ),
    _mismatch(
        "枚",
        "鉛筆 ペン 傘 木 棒 瓶 ビール ワイン 映画 電話",
        "本",
        "細長いものには「本」を使います",
    ),
    _mismatch("台", "人 子供 大人 男 女 学生", "人", "人には「人」を使います"),
    _mismatch(
        "冊",
        "紙 レポート 手紙 書類",
        "枚",
        "紙類には「枚」を使います（綴じたものには「冊」）",
    ),
    _mismatch(
        "頭",
        "犬 猫 鳥 魚 虫 蛇 兎 鼠 蟻 蜂",
        "匹",
        "小動物には「匹」を使います",
    ),
)


def find_mismatch(counter: str, *noun_forms: str) -> CounterMismatch | None:
    """First table entry flagging ``counter`` for any of ``noun_forms``."""

    for mismatch in COUNTER_MISMATCHES:
        if mismatch.counter == counter and mismatch.applies_to(*noun_forms):
            return mismatch
    return None
