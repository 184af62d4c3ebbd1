"""Morphological token as delivered by a tokenizer client."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN_FEATURE = "*"


class Token(BaseModel):
    """A morpheme with IPADIC-style features and character offsets.

    ``start``/``end`` are half-open offsets into the text that was tokenized.
    Missing features are represented by ``"*"`` as the dictionary does.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    surface: str
    pos: str = UNKNOWN_FEATURE
    pos_detail_1: str = UNKNOWN_FEATURE
    pos_detail_2: str = UNKNOWN_FEATURE
    pos_detail_3: str = UNKNOWN_FEATURE
    conjugation_type: str = UNKNOWN_FEATURE
    conjugation_form: str = UNKNOWN_FEATURE
    basic_form: str = UNKNOWN_FEATURE
    reading: str = UNKNOWN_FEATURE
    pronunciation: str = UNKNOWN_FEATURE
    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @field_validator(
        "pos",
        "pos_detail_1",
        "pos_detail_2",
        "pos_detail_3",
        "conjugation_type",
        "conjugation_form",
        "basic_form",
        "reading",
        "pronunciation",
        mode="before",
    )
    def _default_feature(cls, value: object) -> str:
        if value is None:
            return UNKNOWN_FEATURE
        return str(value).strip() or UNKNOWN_FEATURE

    @model_validator(mode="after")
    def _check_offsets(self) -> "Token":
        if self.start > self.end:
            raise ValueError(f"token offsets are inverted: {self.start} > {self.end}")
        return self

    @property
    def normalized_form(self) -> str:
        """Dictionary form when known, otherwise the surface."""

        if self.basic_form and self.basic_form != UNKNOWN_FEATURE:
            return self.basic_form
        return self.surface

    def is_pos(self, pos: str, detail: str | None = None) -> bool:
        if self.pos != pos:
            return False
        return detail is None or self.pos_detail_1 == detail
