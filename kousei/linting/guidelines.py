"""Catalog of the style guidelines rules can be attributed to."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from kousei.models import Severity


class GuidelineId(str, Enum):
    JOYO_KANJI_2010 = "joyo-kanji-2010"
    OKURIGANA_1973 = "okurigana-1973"
    GAIRAI_1991 = "gairai-1991"
    GENDAI_KANAZUKAI_1986 = "gendai-kanazukai-1986"
    KOYO_BUN_2022 = "koyo-bun-2022"
    JIS_X_4051 = "jis-x-4051"
    KISHA_HANDBOOK_14 = "kisha-handbook-14"
    JTF_STYLE_3 = "jtf-style-3"
    JTCA_STYLE_3 = "jtca-style-3"
    EDITORS_RULEBOOK = "editors-rulebook"
    NOVEL_MANUSCRIPT = "novel-manuscript"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class GuidelineLicense(str, Enum):
    PUBLIC = "Public"
    PAID = "Paid"
    CC_BY_4 = "CC BY 4.0"


class Guideline(BaseModel):
    """Metadata for one guideline.

    ``rule_severities`` lists the severity the guideline suggests for the
    rules it enforces; it only applies while the guideline is active.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: GuidelineId
    name_ja: str
    publisher_ja: str
    year: int | None
    license: GuidelineLicense
    description_ja: str
    rule_severities: dict[str, Severity] = Field(default_factory=dict)


GUIDELINES: dict[GuidelineId, Guideline] = {
    guideline.id: guideline
    for guideline in (
        Guideline(
            id=GuidelineId.JOYO_KANJI_2010,
            name_ja="常用漢字表",
            publisher_ja="内閣告示",
            year=2010,
            license=GuidelineLicense.PUBLIC,
            description_ja="日常的な文書に用いる漢字の標準表",
        ),
        Guideline(
            id=GuidelineId.OKURIGANA_1973,
            name_ja="送り仮名の付け方",
            publisher_ja="内閣告示",
            year=1973,
            license=GuidelineLicense.PUBLIC,
            description_ja="送り仮名の付け方に関する内閣告示",
            rule_severities={"notation-consistency": Severity.WARNING},
        ),
        Guideline(
            id=GuidelineId.GAIRAI_1991,
            name_ja="外来語の表記",
            publisher_ja="内閣告示",
            year=1991,
            license=GuidelineLicense.PUBLIC,
            description_ja="外来語・外国語の日本語表記基準",
        ),
        Guideline(
            id=GuidelineId.GENDAI_KANAZUKAI_1986,
            name_ja="現代仮名遣い",
            publisher_ja="内閣告示",
            year=1986,
            license=GuidelineLicense.PUBLIC,
            description_ja="現代語の仮名遣いに関する基準",
        ),
        Guideline(
            id=GuidelineId.KOYO_BUN_2022,
            name_ja="公用文作成の考え方",
            publisher_ja="文化審議会",
            year=2022,
            license=GuidelineLicense.PUBLIC,
            description_ja="官公庁の公文書作成に関する指針",
            rule_severities={
                "conjugation-errors": Severity.ERROR,
                "counter-word-mismatch": Severity.ERROR,
                "notation-consistency": Severity.ERROR,
            },
        ),
        Guideline(
            id=GuidelineId.JIS_X_4051,
            name_ja="JIS X 4051 日本語組版",
            publisher_ja="JSA",
            year=2004,
            license=GuidelineLicense.PAID,
            description_ja="日本語文書の組版に関するJIS規格",
        ),
        Guideline(
            id=GuidelineId.KISHA_HANDBOOK_14,
            name_ja="記者ハンドブック 第14版",
            publisher_ja="共同通信社",
            year=2022,
            license=GuidelineLicense.PAID,
            description_ja="新聞・報道向けの表記統一基準",
            rule_severities={"redundant-expression": Severity.ERROR},
        ),
        Guideline(
            id=GuidelineId.JTF_STYLE_3,
            name_ja="JTF日本語標準スタイルガイド",
            publisher_ja="日本翻訳連盟",
            year=2019,
            license=GuidelineLicense.CC_BY_4,
            description_ja="翻訳・ローカライズ向けの日本語スタイルガイド",
        ),
        Guideline(
            id=GuidelineId.JTCA_STYLE_3,
            name_ja="日本語スタイルガイド 第3版",
            publisher_ja="JTCA",
            year=2016,
            license=GuidelineLicense.PAID,
            description_ja="テクニカルコミュニケーション向けスタイルガイド",
            rule_severities={"sentence-length": Severity.WARNING},
        ),
        Guideline(
            id=GuidelineId.EDITORS_RULEBOOK,
            name_ja="日本語表記ルールブック 第2版",
            publisher_ja="日本エディタースクール",
            year=2012,
            license=GuidelineLicense.PAID,
            description_ja="編集・出版向けの日本語表記ルール集",
        ),
        Guideline(
            id=GuidelineId.NOVEL_MANUSCRIPT,
            name_ja="小説原稿作法",
            publisher_ja="慣習ベース",
            year=None,
            license=GuidelineLicense.PUBLIC,
            description_ja="小説・フィクション向けの慣用的な原稿作法",
            rule_severities={"conjugation-errors": Severity.INFO},
        ),
    )
}


def get_guideline(guideline_id: str | GuidelineId) -> Guideline:
    """Look up a guideline; raises ``ValueError`` for unknown ids."""

    return GUIDELINES[GuidelineId(guideline_id)]


def is_known_guideline(guideline_id: str) -> bool:
    return guideline_id in GuidelineId.all_values()


def normalise_guideline_ids(ids: Iterable[str | GuidelineId]) -> list[GuidelineId]:
    """Convert ids to :class:`GuidelineId`, dropping unknown values and duplicates."""

    result: list[GuidelineId] = []
    for value in ids:
        raw = value.value if isinstance(value, GuidelineId) else str(value)
        if not is_known_guideline(raw):
            continue
        guideline_id = GuidelineId(raw)
        if guideline_id not in result:
            result.append(guideline_id)
    return result
