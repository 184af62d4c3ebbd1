"""JSON extraction and repair for LLM verdicts.

Models often wrap JSON in prose or code fences, or emit it with trailing
commas and unquoted keys. :func:`parse_json_response` finds the first JSON
object or array in the text and repairs it before decoding.
"""

from __future__ import annotations

import json
from typing import Any

from json_repair import repair_json

_PAIRS = {"{": "}", "[": "]"}


def find_json_fragment(text: str) -> str:
    """Return the first balanced ``{...}`` or ``[...]`` fragment in ``text``.

    When the fragment never closes (a truncated response) everything from the
    opening delimiter onwards is returned so the repair step can finish it.

    Raises:
        ValueError: ``text`` contains no JSON delimiter.
    """

    starts = [index for index in (text.find("{"), text.find("[")) if index != -1]
    if not starts:
        raise ValueError("Response text does not contain JSON object or array delimiters.")
    start = min(starts)

    stack: list[str] = []
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _PAIRS:
            stack.append(_PAIRS[char])
        elif stack and char == stack[-1]:
            stack.pop()
            if not stack:
                return text[start : index + 1]
    return text[start:]


def parse_json_response(text: str) -> Any:
    """Extract, repair and decode the first JSON value in an LLM response.

    Raises:
        ValueError: no JSON delimiters are present or the input is not text.
        json.JSONDecodeError: the repaired fragment still cannot be decoded.

    Example:
        >>> parse_json_response('Verdict: {"valid": true,} thanks')
        {'valid': True}
    """

    if not isinstance(text, str):
        raise ValueError(f"Expected string input, got {type(text)}")
    fragment = find_json_fragment(text)
    repaired = repair_json(fragment)
    return json.loads(repaired)
