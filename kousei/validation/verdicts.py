"""Parse validator verdicts returned by the LLM."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from kousei.llm.json_utils import parse_json_response
from kousei.llm.provider import LLMParseError

LOGGER = logging.getLogger(__name__)


class Verdict(BaseModel):
    model_config = ConfigDict(extra="ignore")

    valid: bool
    reason: str = ""

    @field_validator("reason", mode="before")
    def _coerce_reason(cls, value: object) -> str:
        return "" if value is None else str(value).strip()


class BatchVerdict(Verdict):
    id: int


def _decode(response_text: str) -> Any:
    try:
        return parse_json_response(response_text)
    except (ValueError, json.JSONDecodeError) as exc:
        raise LLMParseError(
            f"Could not decode verdict JSON: {exc}", response_text=response_text
        ) from exc


def parse_verdict(response_text: str) -> Verdict:
    """Parse a single ``{"valid": bool, "reason": str}`` verdict.

    Raises:
        LLMParseError: the response holds no usable verdict.
    """

    data = _decode(response_text)
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        raise LLMParseError("Expected a JSON object verdict", response_text=response_text)
    try:
        return Verdict.model_validate(data)
    except ValidationError as exc:
        raise LLMParseError(
            f"Verdict failed validation: {exc}", response_text=response_text
        ) from exc


def parse_batch_verdicts(response_text: str, expected_ids: Iterable[int]) -> dict[int, Verdict]:
    """Parse ``[{"id", "valid", "reason"}, ...]`` keyed by id.

    Entries with an unexpected id or a malformed shape are logged and
    skipped; ids the model never answered are simply absent.

    Raises:
        LLMParseError: the response is not a JSON array of objects.
    """

    data = _decode(response_text)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise LLMParseError("Expected top-level JSON array of verdicts", response_text=response_text)

    wanted = set(expected_ids)
    verdicts: dict[int, Verdict] = {}
    for entry in data:
        if not isinstance(entry, dict):
            LOGGER.warning("Entry in verdict array is not a JSON object: %r", entry)
            continue
        try:
            verdict = BatchVerdict.model_validate(entry)
        except ValidationError as exc:
            LOGGER.warning("Skipping malformed verdict %r: %s", entry, exc)
            continue
        if verdict.id not in wanted:
            LOGGER.warning("Verdict for unknown candidate id %s ignored", verdict.id)
            continue
        verdicts.setdefault(verdict.id, verdict)
    return verdicts
