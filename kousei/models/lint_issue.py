"""Issue model produced by every lint rule.

Offsets are half-open ``[from, to)`` character positions into the text that
was linted. Field names are snake_case in Python; ``model_dump(by_alias=True)``
produces the camelCase keys consumed by the editor (``ruleId``, ``from``,
``messageJa`` ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import Severity, ValidationStatus


class LintReference(BaseModel):
    """Authoritative standard an issue is based on."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    standard: str
    section: str | None = None
    url: str | None = None


class LintFix(BaseModel):
    """Suggested replacement for the flagged range."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    label: str
    label_ja: str = Field(alias="labelJa")
    replacement: str


class LintIssue(BaseModel):
    """A single problem found in a piece of text.

    - rule_id: id of the rule that produced the issue
    - severity: error / warning / info
    - message / message_ja: English and Japanese explanation
    - from_ / to: half-open character range (serialised as ``from`` / ``to``)
    - reference: optional guideline the issue cites
    - fix: optional replacement for the range
    - original_text: the flagged slice at detection time
    - validation_status: None until the candidate validator has seen the issue
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    rule_id: str = Field(alias="ruleId")
    severity: Severity
    message: str
    message_ja: str = Field(alias="messageJa")
    from_: int = Field(alias="from", ge=0)
    to: int = Field(ge=0)
    reference: LintReference | None = None
    fix: LintFix | None = None
    original_text: str | None = Field(default=None, alias="originalText")
    validation_status: ValidationStatus | None = Field(
        default=None, alias="validationStatus"
    )

    @field_validator("rule_id", mode="before")
    def _strip_rule(cls, value: object) -> str:
        result = str(value or "").strip()
        if not result:
            raise ValueError("rule_id must not be empty")
        return result

    @model_validator(mode="after")
    def _check_range(self) -> "LintIssue":
        if self.from_ > self.to:
            raise ValueError(
                f"issue range is inverted: from={self.from_} > to={self.to}"
            )
        return self

    @property
    def length(self) -> int:
        return self.to - self.from_

    def with_status(self, status: ValidationStatus) -> "LintIssue":
        """Return a copy carrying ``status``."""

        return self.model_copy(update={"validation_status": status})

    def with_severity(self, severity: Severity) -> "LintIssue":
        return self.model_copy(update={"severity": severity})

    def shifted(self, offset: int) -> "LintIssue":
        """Return a copy with the range moved by ``offset`` characters."""

        return self.model_copy(
            update={"from_": self.from_ + offset, "to": self.to + offset}
        )

    def sort_key(self) -> tuple[int, int, str]:
        return (self.from_, self.to, self.rule_id)


class Paragraph(BaseModel):
    """One paragraph of a document, addressed by its position."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(ge=0)
    text: str


class ParagraphIssues(BaseModel):
    """Issues belonging to one paragraph of a document-level pass."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    paragraph_index: int = Field(alias="paragraphIndex", ge=0)
    issues: list[LintIssue] = Field(default_factory=list)
