from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from kousei.linting.correction_modes import CorrectionMode, CorrectionModeId, get_correction_mode
from kousei.linting.guidelines import get_guideline, is_known_guideline
from kousei.models import LintIssue


@dataclass(frozen=True)
class ValidationContext:
    """What the validator needs to know besides the issues themselves.

    ``text`` is the paragraph every issue points into. When issues come from
    several paragraphs, ``text_lookup`` returns the text for each issue
    instead. Issues whose rule id is in ``skip_rule_ids`` are never sent to
    the LLM.
    """

    mode: CorrectionModeId | str | None = None
    active_guidelines: Sequence[str] = ()
    text: str | None = None
    text_lookup: Callable[[LintIssue], str] | None = None
    skip_rule_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.mode is not None:
            # Unknown modes fail here rather than inside a worker thread
            get_correction_mode(self.mode)

    def text_for(self, issue: LintIssue) -> str:
        if self.text_lookup is not None:
            return self.text_lookup(issue)
        if self.text is None:
            raise ValueError("ValidationContext needs either text or text_lookup")
        return self.text

    def skips(self, issue: LintIssue) -> bool:
        return issue.rule_id in self.skip_rule_ids

    @property
    def mode_definition(self) -> CorrectionMode | None:
        return None if self.mode is None else get_correction_mode(self.mode)

    def guideline_names(self) -> list[str]:
        return [
            get_guideline(guideline_id).name_ja
            for guideline_id in self.active_guidelines
            if is_known_guideline(str(getattr(guideline_id, "value", guideline_id)))
        ]
