"""Groups of spellings that denote the same word.

The first variant of each group is the standard form:

- okurigana: 文化庁「送り仮名の付け方」(1973)
- kanji-kana: 文化庁「公用文作成の考え方」(2022)
- katakana-chouon: 文化庁「外来語の表記」(1991)

Single-kanji groups (事/こと, 時/とき ...) are left out; plain substring
matching cannot tell them apart from compounds such as 時間.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kousei.models import LintReference


class VariantCategory(str, Enum):
    OKURIGANA = "okurigana"
    KANJI_KANA = "kanji-kana"
    KATAKANA_CHOUON = "katakana-chouon"


VARIANT_CATEGORY_LABELS = {
    VariantCategory.OKURIGANA: "送り仮名",
    VariantCategory.KANJI_KANA: "漢字・かな",
    VariantCategory.KATAKANA_CHOUON: "カタカナ長音",
}

CATEGORY_REFERENCES = {
    VariantCategory.OKURIGANA: LintReference(
        standard="文化庁「送り仮名の付け方」(1973, 内閣告示第二号)"
    ),
    VariantCategory.KANJI_KANA: LintReference(standard="文化庁「公用文作成の考え方」(2022)"),
    VariantCategory.KATAKANA_CHOUON: LintReference(
        standard="文化庁「外来語の表記」(1991, 内閣告示第二号)"
    ),
}


@dataclass(frozen=True)
class VariantGroup:
    id: str
    category: VariantCategory
    variants: tuple[str, ...]

    @property
    def standard(self) -> str:
        return self.variants[0]


def _group(group_id: str, category: VariantCategory, *variants: str) -> VariantGroup:
    return VariantGroup(group_id, category, tuple(variants))


_OKURIGANA = VariantCategory.OKURIGANA
_KANJI_KANA = VariantCategory.KANJI_KANA
_CHOUON = VariantCategory.KATAKANA_CHOUON

VARIANT_GROUPS: tuple[VariantGroup, ...] = (
    _group("uchiawase", _OKURIGANA, "打ち合わせ", "打合せ", "打合わせ", "打ち合せ"),
    _group("uketsuke", _OKURIGANA, "受け付け", "受付", "受付け", "受け付"),
    _group("toriatsukai", _OKURIGANA, "取り扱い", "取扱い", "取扱"),
    _group("moushikomi", _OKURIGANA, "申し込み", "申込み", "申込"),
    _group("hikiwatashi", _OKURIGANA, "引き渡し", "引渡し", "引渡"),
    _group("kumiawase", _OKURIGANA, "組み合わせ", "組合せ", "組合わせ"),
    _group("tachiai", _OKURIGANA, "立ち会い", "立会い", "立会"),
    _group("kumitate", _OKURIGANA, "組み立て", "組立て", "組立"),
    _group("okonau", _OKURIGANA, "行う", "行なう"),
    _group("arawasu", _OKURIGANA, "表す", "表わす"),
    _group("kurikaeshi", _OKURIGANA, "繰り返し", "繰返し", "繰返"),
    _group("moushide", _OKURIGANA, "申し出", "申出"),
    _group("uketori", _OKURIGANA, "受け取り", "受取り", "受取"),
    _group("kirikae", _OKURIGANA, "切り替え", "切替え", "切替"),
    _group("kodomo", _KANJI_KANA, "子供", "子ども", "こども"),
    _group("dekiru", _KANJI_KANA, "出来る", "できる"),
    _group("kudasai", _KANJI_KANA, "下さい", "ください"),
    _group("itadaku", _KANJI_KANA, "頂く", "いただく"),
    _group("arigatou", _KANJI_KANA, "有り難う", "ありがとう"),
    _group("mottomo", _KANJI_KANA, "最も", "もっとも"),
    _group("subete", _KANJI_KANA, "全て", "すべて"),
    _group("osoraku", _KANJI_KANA, "恐らく", "おそらく"),
    _group("samazama", _KANJI_KANA, "様々", "さまざま"),
    _group("nazenara", _KANJI_KANA, "何故なら", "なぜなら"),
    _group("oyobi", _KANJI_KANA, "及び", "および"),
    _group("narabini", _KANJI_KANA, "並びに", "ならびに"),
    _group("aruiwa", _KANJI_KANA, "或いは", "あるいは"),
    _group("computer", _CHOUON, "コンピューター", "コンピュータ"),
    _group("server", _CHOUON, "サーバー", "サーバ"),
    _group("printer", _CHOUON, "プリンター", "プリンタ"),
    _group("browser", _CHOUON, "ブラウザー", "ブラウザ"),
    _group("user", _CHOUON, "ユーザー", "ユーザ"),
    _group("folder", _CHOUON, "フォルダー", "フォルダ"),
    _group("parameter", _CHOUON, "パラメーター", "パラメータ"),
    _group("manager", _CHOUON, "マネージャー", "マネージャ"),
    _group("elevator", _CHOUON, "エレベーター", "エレベータ"),
    _group("editor", _CHOUON, "エディター", "エディタ"),
    _group("monitor", _CHOUON, "モニター", "モニタ"),
    _group("driver", _CHOUON, "ドライバー", "ドライバ"),
    _group("filter", _CHOUON, "フィルター", "フィルタ"),
    _group("header", _CHOUON, "ヘッダー", "ヘッダ"),
    _group("container", _CHOUON, "コンテナー", "コンテナ"),
)
