"""Writing-context presets (novel, official document, blog ...)."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .guidelines import GuidelineId


class CorrectionModeId(str, Enum):
    NOVEL = "novel"
    OFFICIAL = "official"
    BLOG = "blog"
    ACADEMIC = "academic"
    SNS = "sns"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class CorrectionMode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: CorrectionModeId
    name_ja: str
    tone_ja: str
    description_ja: str
    default_guidelines: list[GuidelineId]
    rule_overrides: dict[str, dict[str, Any]] = Field(default_factory=dict)
    llm_prompt_style_ja: str


CORRECTION_MODES: dict[CorrectionModeId, CorrectionMode] = {
    CorrectionModeId.NOVEL: CorrectionMode(
        id=CorrectionModeId.NOVEL,
        name_ja="小説",
        tone_ja="感性・具象・張力",
        description_ja="小説・フィクション向けの校正モード。文体の個性を尊重します。",
        default_guidelines=[
            GuidelineId.NOVEL_MANUSCRIPT,
            GuidelineId.JOYO_KANJI_2010,
            GuidelineId.JIS_X_4051,
        ],
        rule_overrides={"word-repetition": {"severity": "info"}},
        llm_prompt_style_ja=(
            "小説の文体として自然な表現かどうかを判断してください。"
            "文学的な表現や倒置法は許容します。"
        ),
    ),
    CorrectionModeId.OFFICIAL: CorrectionMode(
        id=CorrectionModeId.OFFICIAL,
        name_ja="公用文",
        tone_ja="厳粛・対等・標準化",
        description_ja="官公庁・公的機関の文書向けモード。内閣告示の各種基準に準拠します。",
        default_guidelines=[
            GuidelineId.KOYO_BUN_2022,
            GuidelineId.JOYO_KANJI_2010,
            GuidelineId.OKURIGANA_1973,
            GuidelineId.GAIRAI_1991,
        ],
        rule_overrides={"dialogue-punctuation": {"enabled": False}},
        llm_prompt_style_ja=(
            "公用文として適切な表現かどうかを判断してください。"
            "擬声語・個人的感情・倒置文は不適切とします。"
        ),
    ),
    CorrectionModeId.BLOG: CorrectionMode(
        id=CorrectionModeId.BLOG,
        name_ja="ブログ",
        tone_ja="親切・共有感・半正式",
        description_ja="ウェブ記事・ブログ向けモード。読みやすさを重視します。",
        default_guidelines=[GuidelineId.JTF_STYLE_3, GuidelineId.JOYO_KANJI_2010],
        rule_overrides={"sentence-length": {"enabled": True}},
        llm_prompt_style_ja=(
            "ウェブ記事として読みやすく親しみやすい表現かどうかを判断してください。"
            "過度な堅苦しさや難解な語彙は避けてください。"
        ),
    ),
    CorrectionModeId.ACADEMIC: CorrectionMode(
        id=CorrectionModeId.ACADEMIC,
        name_ja="学術",
        tone_ja="冷静・客観・構造化",
        description_ja="論文・学術文書向けモード。客観性と構造的な記述を重視します。",
        default_guidelines=[
            GuidelineId.JOYO_KANJI_2010,
            GuidelineId.OKURIGANA_1973,
            GuidelineId.JIS_X_4051,
        ],
        rule_overrides={"word-repetition": {"enabled": True, "severity": "warning"}},
        llm_prompt_style_ja=(
            "学術論文として適切な客観的表現かどうかを判断してください。"
            "「私は」などの主観表現や修辞的隠喩は不適切とします。"
        ),
    ),
    CorrectionModeId.SNS: CorrectionMode(
        id=CorrectionModeId.SNS,
        name_ja="SNS",
        tone_ja="簡潔・インパクト",
        description_ja="SNS・短文投稿向けモード。最も寛容な設定です。",
        default_guidelines=[GuidelineId.JOYO_KANJI_2010],
        rule_overrides={
            "sentence-length": {"enabled": False},
            "word-repetition": {"enabled": False},
        },
        llm_prompt_style_ja="SNSの短文として自然かどうかを判断してください。",
    ),
}


def get_correction_mode(mode: str | CorrectionModeId) -> CorrectionMode:
    """Return the mode definition.

    Raises:
        ValueError: ``mode`` is not a known mode id.
    """

    try:
        mode_id = CorrectionModeId(mode)
    except ValueError as exc:
        raise ValueError(
            f"Unknown correction mode '{mode}'. "
            f"Expected one of: {', '.join(CorrectionModeId.all_values())}"
        ) from exc
    return CORRECTION_MODES[mode_id]
