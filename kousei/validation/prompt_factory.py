"""Build validation prompts for lint candidates.

Each candidate is shown with a window of surrounding text in which the
flagged range is marked ``<<like this>>``, together with the rule id, range,
Japanese message, suggested fix and the correction mode's style guidance.
"""

from __future__ import annotations

from typing import Any, Sequence

from kousei.models import LintIssue
from kousei.prompt.render_prompt import render_template

from .context import ValidationContext

ELLIPSIS = "…"


def mark_context(text: str, start: int, end: int, context_chars: int) -> str:
    """Return ``text`` around ``[start, end)`` with the range wrapped in ``<< >>``."""

    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    left = max(0, start - context_chars)
    right = min(len(text), end + context_chars)
    prefix = ELLIPSIS if left > 0 else ""
    suffix = ELLIPSIS if right < len(text) else ""
    return (
        f"{prefix}{text[left:start]}<<{text[start:end]}>>{text[end:right]}{suffix}"
    ).replace("\n", " ")


def candidate_fields(
    issue: LintIssue,
    text: str,
    *,
    context_chars: int,
    candidate_id: int | None = None,
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "rule_id": issue.rule_id,
        "start": issue.from_,
        "end": issue.to,
        "flagged": issue.original_text
        if issue.original_text is not None
        else text[issue.from_ : issue.to],
        "message_ja": issue.message_ja,
        "suggestion": issue.fix.replacement if issue.fix is not None else "",
        "context": mark_context(text, issue.from_, issue.to, context_chars),
    }
    if candidate_id is not None:
        fields["id"] = candidate_id
    return fields


def mode_fields(context: ValidationContext) -> dict[str, Any]:
    mode = context.mode_definition
    return {
        "mode_name": mode.name_ja if mode is not None else "標準",
        "mode_style": mode.llm_prompt_style_ja if mode is not None else "",
        "guidelines": [{"name": name} for name in context.guideline_names()],
    }


def build_candidate_prompt(
    issue: LintIssue,
    context: ValidationContext,
    *,
    context_chars: int,
) -> str:
    """Prompt asking for a single ``{"valid", "reason"}`` verdict."""

    fields = mode_fields(context)
    fields.update(
        candidate_fields(issue, context.text_for(issue), context_chars=context_chars)
    )
    return render_template("candidate_validator.md", fields)


def build_batch_prompt(
    issues: Sequence[LintIssue],
    context: ValidationContext,
    *,
    context_chars: int,
) -> str:
    """Prompt asking for one verdict per issue; ids are positions in ``issues``."""

    fields = mode_fields(context)
    fields["candidates"] = [
        candidate_fields(
            issue,
            context.text_for(issue),
            context_chars=context_chars,
            candidate_id=position,
        )
        for position, issue in enumerate(issues)
    ]
    return render_template("batch_validator.md", fields)
