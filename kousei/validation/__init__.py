"""LLM-assisted confirmation of lint candidates."""

from .cancellation import CancellationToken
from .candidate_validator import CandidateValidator, ValidatorSettings
from .context import ValidationContext
from .prompt_factory import build_batch_prompt, build_candidate_prompt, mark_context
from .verdicts import BatchVerdict, Verdict, parse_batch_verdicts, parse_verdict

__all__ = [
    "BatchVerdict",
    "CancellationToken",
    "CandidateValidator",
    "ValidationContext",
    "ValidatorSettings",
    "Verdict",
    "build_batch_prompt",
    "build_candidate_prompt",
    "mark_context",
    "parse_batch_verdicts",
    "parse_verdict",
]
