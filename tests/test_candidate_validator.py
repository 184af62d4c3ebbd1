from __future__ import annotations

import json
import sys
import threading
import time
from pathlib import Path
from typing import Callable, Sequence

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kousei.linting import create_default_runner
from kousei.llm.provider import InferenceOptions, LLMParseError, LLMProviderError
from kousei.models import LintIssue, Severity, ValidationStatus
from kousei.validation import (
    CancellationToken,
    CandidateValidator,
    ValidationContext,
    ValidatorSettings,
    mark_context,
    parse_batch_verdicts,
    parse_verdict,
)

TEXT = "あの映画は見れる。頭痛が痛い。彼は本を読まさせる。"


class _DummyLLM:
    name = "dummy"

    def __init__(
        self,
        reply: str | Callable[[str], str] = '{"valid": true, "reason": "正しい指摘"}',
        *,
        available: bool = True,
    ) -> None:
        self._reply = reply
        self._available = available
        self._lock = threading.Lock()
        self.prompts: list[str] = []
        self.options: list[InferenceOptions | None] = []

    def is_available(self) -> bool:
        return self._available

    def infer(self, prompt: str, options: InferenceOptions | None = None) -> str:
        with self._lock:
            self.prompts.append(prompt)
            self.options.append(options)
        if callable(self._reply):
            return self._reply(prompt)
        return self._reply

    def infer_batch(
        self, prompts: Sequence[str], options: InferenceOptions | None = None
    ) -> list[str]:
        return [self.infer(prompt, options) for prompt in prompts]


def _issue(rule_id: str, pattern: str, text: str = TEXT) -> LintIssue:
    start = text.index(pattern)
    return LintIssue(
        rule_id=rule_id,
        severity=Severity.WARNING,
        message=f"{pattern} flagged",
        message_ja=f"「{pattern}」を確認してください",
        from_=start,
        to=start + len(pattern),
        original_text=pattern,
    )


def _candidates() -> list[LintIssue]:
    return [
        _issue("conjugation-errors", "見れる"),
        _issue("redundant-expression", "頭痛が痛い"),
        _issue("conjugation-errors", "読まさせる"),
    ]


def _context(**overrides: object) -> ValidationContext:
    data: dict[str, object] = {
        "mode": "novel",
        "active_guidelines": ["novel-manuscript"],
        "text": TEXT,
        "skip_rule_ids": frozenset({"redundant-expression"}),
    }
    data.update(overrides)
    return ValidationContext(**data)  # type: ignore[arg-type]


def _validator(client: _DummyLLM, **kwargs: float) -> CandidateValidator:
    return CandidateValidator(client, settings=ValidatorSettings(), **kwargs)


def test_confirmed_and_skipped_statuses_in_input_order() -> None:
    client = _DummyLLM()

    results = _validator(client).validate_candidates(_candidates(), _context())

    assert [(i.original_text, i.validation_status) for i in results] == [
        ("見れる", ValidationStatus.CONFIRMED),
        ("頭痛が痛い", ValidationStatus.SKIPPED),
        ("読まさせる", ValidationStatus.CONFIRMED),
    ]
    # The skipped rule never reaches the LLM
    assert len(client.prompts) == 2
    assert all("頭痛が痛い" not in p.split("## 指摘")[1] for p in client.prompts)


def test_rejected_candidates_are_dropped() -> None:
    def reply(prompt: str) -> str:
        valid = "見れる" not in prompt.split("## 指摘")[1]
        return json.dumps({"valid": valid, "reason": "判定"})

    results = _validator(_DummyLLM(reply)).validate_candidates(_candidates(), _context())

    assert [i.original_text for i in results] == ["頭痛が痛い", "読まさせる"]


def test_provider_failure_keeps_candidate_unvalidated() -> None:
    def reply(prompt: str) -> str:
        if "読まさせる" in prompt.split("## 指摘")[1]:
            raise LLMProviderError("timeout")
        return '{"valid": true}'

    results = _validator(_DummyLLM(reply)).validate_candidates(_candidates(), _context())

    statuses = {i.original_text: i.validation_status for i in results}
    assert statuses == {
        "見れる": ValidationStatus.CONFIRMED,
        "頭痛が痛い": ValidationStatus.SKIPPED,
        "読まさせる": ValidationStatus.UNVALIDATED,
    }


def test_unparsable_response_keeps_candidate_unvalidated() -> None:
    results = _validator(_DummyLLM("YES")).validate_candidates(_candidates(), _context())

    assert [i.validation_status for i in results] == [
        ValidationStatus.UNVALIDATED,
        ValidationStatus.SKIPPED,
        ValidationStatus.UNVALIDATED,
    ]


def test_unavailable_client_returns_everything_unvalidated() -> None:
    client = _DummyLLM(available=False)

    results = _validator(client).validate_candidates(_candidates(), _context())

    assert client.prompts == []
    assert [i.validation_status for i in results] == [
        ValidationStatus.UNVALIDATED,
        ValidationStatus.SKIPPED,
        ValidationStatus.UNVALIDATED,
    ]


def test_cancel_before_start_resolves_unvalidated_without_requests() -> None:
    client = _DummyLLM('{"valid": false}')
    token = CancellationToken()
    token.cancel("document closed")

    results = _validator(client).validate_candidates(
        _candidates(), _context(skip_rule_ids=frozenset()), cancel=token
    )

    assert client.prompts == []
    assert len(results) == 3
    assert all(i.validation_status is ValidationStatus.UNVALIDATED for i in results)


def test_cancel_mid_run_ignores_late_verdicts() -> None:
    token = CancellationToken()
    client: _DummyLLM

    def reply(prompt: str) -> str:
        if len(client.prompts) == 2:
            token.cancel("document closed")
        return '{"valid": true}'

    client = _DummyLLM(reply)
    results = _validator(client, concurrency=1).validate_candidates(
        _candidates(), _context(skip_rule_ids=frozenset()), cancel=token
    )

    # The second answer arrived after the cancel and is not applied
    assert len(client.prompts) == 2
    assert [i.validation_status for i in results] == [
        ValidationStatus.CONFIRMED,
        ValidationStatus.UNVALIDATED,
        ValidationStatus.UNVALIDATED,
    ]


def test_cancel_returns_without_waiting_for_request_in_flight() -> None:
    started = threading.Event()
    release = threading.Event()
    token = CancellationToken()

    def reply(prompt: str) -> str:
        started.set()
        release.wait(5)
        return '{"valid": true}'

    def cancel_when_started() -> None:
        started.wait(5)
        token.cancel("document closed")

    canceller = threading.Thread(target=cancel_when_started)
    canceller.start()
    began = time.monotonic()
    try:
        results = _validator(_DummyLLM(reply)).validate_candidates(
            _candidates()[:1], _context(), cancel=token
        )
        elapsed = time.monotonic() - began
    finally:
        release.set()
        canceller.join()

    assert elapsed < 2.0
    assert [i.validation_status for i in results] == [ValidationStatus.UNVALIDATED]


def test_timed_out_unit_stays_unvalidated() -> None:
    release = threading.Event()

    def reply(prompt: str) -> str:
        if "読まさせる" in prompt.split("## 指摘")[1]:
            release.wait(5)
        return '{"valid": true}'

    began = time.monotonic()
    try:
        results = _validator(_DummyLLM(reply), timeout=0.2).validate_candidates(
            _candidates(), _context()
        )
        elapsed = time.monotonic() - began
    finally:
        release.set()

    assert elapsed < 2.0
    statuses = {i.original_text: i.validation_status for i in results}
    assert statuses == {
        "見れる": ValidationStatus.CONFIRMED,
        "頭痛が痛い": ValidationStatus.SKIPPED,
        "読まさせる": ValidationStatus.UNVALIDATED,
    }


def test_queued_units_are_abandoned_when_every_worker_hangs() -> None:
    release = threading.Event()

    def reply(prompt: str) -> str:
        release.wait(5)
        return '{"valid": true}'

    client = _DummyLLM(reply)
    try:
        results = _validator(client, concurrency=1, timeout=0.2).validate_candidates(
            _candidates(), _context(skip_rule_ids=frozenset())
        )
        prompts_sent = len(client.prompts)
    finally:
        release.set()

    assert prompts_sent == 1
    assert all(i.validation_status is ValidationStatus.UNVALIDATED for i in results)


def test_non_positive_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        _validator(_DummyLLM(), timeout=0)


def test_cancellation_token_is_passed_to_client() -> None:
    client = _DummyLLM()
    token = CancellationToken()

    _validator(client, max_tokens=40).validate_candidates(
        _candidates()[:1], _context(), cancel=token
    )

    options = client.options[0]
    assert options is not None
    assert options.cancel is token
    assert options.max_tokens == 40
    assert options.timeout == 60.0


def test_batch_prompt_verdicts_by_id() -> None:
    client = _DummyLLM(
        '[{"id": 0, "valid": false, "reason": "口語として自然"}, '
        '{"id": 1, "valid": true, "reason": "誤用"}]'
    )

    results = _validator(client, batch_size=2).validate_candidates(
        _candidates(), _context(skip_rule_ids=frozenset())
    )

    # Units: [見れる, 頭痛が痛い] then [読まさせる] with a single prompt
    assert len(client.prompts) == 2
    assert "### 指摘 1" in client.prompts[0] or "### 指摘 1" in client.prompts[1]
    statuses = {i.original_text: i.validation_status for i in results}
    assert "見れる" not in statuses
    assert statuses["頭痛が痛い"] is ValidationStatus.CONFIRMED
    # The single-candidate unit got an array answer it cannot use as one verdict
    assert statuses["読まさせる"] is ValidationStatus.UNVALIDATED


def test_prompt_marks_flagged_text_and_mode_style() -> None:
    client = _DummyLLM()

    _validator(client, context_chars=3).validate_candidates(_candidates()[:1], _context())

    prompt = client.prompts[0]
    assert "…映画は<<見れる>>。頭痛…" in prompt
    assert "小説" in prompt
    assert "文学的な表現" in prompt
    assert "conjugation-errors" in prompt


def test_text_lookup_for_multi_paragraph_issues() -> None:
    paragraphs = {0: "見れる。", 1: TEXT}
    issues = [_issue("conjugation-errors", "見れる", paragraphs[0])]
    client = _DummyLLM()

    _validator(client).validate_candidates(
        issues, _context(text=None, text_lookup=lambda issue: paragraphs[0])
    )

    assert "<<見れる>>。" in client.prompts[0]


def test_runner_issues_round_trip_through_validator() -> None:
    runner = create_default_runner()
    issues = runner.lint(TEXT)
    client = _DummyLLM('{"valid": false}')

    results = _validator(client).validate_candidates(
        issues, _context(skip_rule_ids=runner.llm_skip_rule_ids())
    )

    assert [i.rule_id for i in results] == ["redundant-expression"]
    assert results[0].validation_status is ValidationStatus.SKIPPED


def test_empty_input() -> None:
    assert _validator(_DummyLLM()).validate_candidates([], _context()) == []


def test_unknown_mode_is_rejected_up_front() -> None:
    with pytest.raises(ValueError):
        ValidationContext(mode="poetry", text=TEXT)


def test_mark_context_clamps_and_adds_ellipsis() -> None:
    assert mark_context("あいうえお", 2, 3, 1) == "…い<<う>>え…"
    assert mark_context("あいうえお", 0, 5, 10) == "<<あいうえお>>"
    assert mark_context("あい\nう", 3, 4, 5) == "あい <<う>>"


def test_parse_verdict_variants() -> None:
    assert parse_verdict('```json\n{"valid": false, "reason": null}\n```').valid is False
    assert parse_verdict('[{"valid": true, "reason": "ok"}]').reason == "ok"
    with pytest.raises(LLMParseError):
        parse_verdict('{"reason": "no verdict"}')
    with pytest.raises(LLMParseError):
        parse_verdict("NO")


def test_parse_batch_verdicts_ignores_unknown_and_malformed() -> None:
    verdicts = parse_batch_verdicts(
        '[{"id": 0, "valid": true}, {"id": 7, "valid": false}, "junk", {"id": 1}]',
        range(2),
    )

    assert set(verdicts) == {0}
    with pytest.raises(LLMParseError):
        parse_batch_verdicts('"just text"', range(1))


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")
    monkeypatch.setenv("KOUSEI_VALIDATOR_CONCURRENCY", "5")
    monkeypatch.setenv("KOUSEI_VALIDATOR_BATCH_SIZE", "zero")
    monkeypatch.setenv("KOUSEI_VALIDATOR_CONTEXT_CHARS", "-4")
    monkeypatch.setenv("KOUSEI_VALIDATOR_MAX_TOKENS", "80")
    monkeypatch.setenv("KOUSEI_VALIDATOR_TIMEOUT", "2.5")
    monkeypatch.setenv("KOUSEI_LOG_PROMPTS", "true")

    settings = ValidatorSettings.from_env(env_file)
    validator = CandidateValidator(_DummyLLM(), dotenv_path=env_file, batch_size=2)

    assert settings == ValidatorSettings(
        concurrency=5,
        batch_size=1,
        context_chars=30,
        max_tokens=80,
        timeout=2.5,
        log_prompts=True,
    )
    assert validator.concurrency == 5
    assert validator.batch_size == 2
