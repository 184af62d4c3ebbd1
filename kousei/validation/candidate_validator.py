"""Concurrent, cancellable LLM confirmation of lint candidates.

Candidates are grouped into units of ``batch_size`` issues and every unit is
sent to the LLM client from a bounded thread pool. A unit's outcome only
affects its own issues:

- ``valid: false`` drops the issue;
- ``valid: true`` keeps it as ``confirmed``;
- any failure (provider error, unparsable response, timeout, cancellation)
  keeps it as ``unvalidated``.

Issues of rules that opt out of validation are returned as ``skipped``.

Cancelling the token ends :meth:`CandidateValidator.validate_candidates`
without waiting for requests in flight; their late answers are ignored. A
unit still running ``timeout`` seconds after it started is abandoned the
same way.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from dotenv import load_dotenv

from kousei.llm.cancellation import CancellationToken
from kousei.llm.provider import (
    InferenceOptions,
    LLMCancelledError,
    LLMClient,
    LLMParseError,
    LLMProviderError,
)
from kousei.models import LintIssue, ValidationStatus

from .context import ValidationContext
from .prompt_factory import build_batch_prompt, build_candidate_prompt
from .verdicts import parse_batch_verdicts, parse_verdict

LOGGER = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3
DEFAULT_BATCH_SIZE = 1
DEFAULT_CONTEXT_CHARS = 30
DEFAULT_MAX_TOKENS = 60
DEFAULT_TIMEOUT = 60.0

# How often the coordinator re-checks cancellation and unit deadlines
_POLL_INTERVAL = 0.05

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    if value <= 0:
        LOGGER.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def _env_positive_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r", name, raw)
        return default
    if value <= 0:
        LOGGER.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


@dataclass(frozen=True)
class ValidatorSettings:
    concurrency: int = DEFAULT_CONCURRENCY
    batch_size: int = DEFAULT_BATCH_SIZE
    context_chars: int = DEFAULT_CONTEXT_CHARS
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float | None = DEFAULT_TIMEOUT
    log_prompts: bool = False

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "ValidatorSettings":
        """Read ``KOUSEI_VALIDATOR_*`` and ``KOUSEI_LOG_PROMPTS``."""

        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()
        return cls(
            concurrency=_env_positive_int("KOUSEI_VALIDATOR_CONCURRENCY", DEFAULT_CONCURRENCY),
            batch_size=_env_positive_int("KOUSEI_VALIDATOR_BATCH_SIZE", DEFAULT_BATCH_SIZE),
            context_chars=_env_positive_int(
                "KOUSEI_VALIDATOR_CONTEXT_CHARS", DEFAULT_CONTEXT_CHARS
            ),
            max_tokens=_env_positive_int("KOUSEI_VALIDATOR_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            timeout=_env_positive_float("KOUSEI_VALIDATOR_TIMEOUT", DEFAULT_TIMEOUT),
            log_prompts=os.environ.get("KOUSEI_LOG_PROMPTS", "").strip().lower()
            in _TRUE_VALUES,
        )


class _VerdictBook:
    """Verdicts and unit start times shared by the workers.

    Verdicts for abandoned candidates, or arriving after the book is closed,
    are ignored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._verdicts: dict[int, bool] = {}
        self._started: dict[int, float] = {}
        self._abandoned: set[int] = set()
        self._closed = False

    def start(self, unit_id: int) -> None:
        with self._lock:
            self._started[unit_id] = time.monotonic()

    def started_at(self, unit_id: int) -> float | None:
        with self._lock:
            return self._started.get(unit_id)

    def record(self, index: int, valid: bool) -> None:
        with self._lock:
            if self._closed or index in self._abandoned:
                return
            self._verdicts.setdefault(index, valid)

    def abandon(self, indices: Iterable[int]) -> None:
        with self._lock:
            self._abandoned.update(indices)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def get(self, index: int) -> bool | None:
        with self._lock:
            return self._verdicts.get(index)


class CandidateValidator:
    """Confirm or reject lint issues with an LLM client.

    Explicit keyword arguments win over the environment-derived settings.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        *,
        concurrency: int | None = None,
        batch_size: int | None = None,
        context_chars: int | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
        settings: ValidatorSettings | None = None,
        dotenv_path: str | Path | None = None,
    ) -> None:
        base = settings or ValidatorSettings.from_env(dotenv_path)
        self._client = llm_client
        self.concurrency = max(1, concurrency or base.concurrency)
        self.batch_size = max(1, batch_size or base.batch_size)
        self.context_chars = max(0, base.context_chars if context_chars is None else context_chars)
        self.max_tokens = max(1, max_tokens or base.max_tokens)
        self.timeout = timeout if timeout is not None else base.timeout
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        self._log_level = logging.INFO if base.log_prompts else logging.DEBUG

    def validate_candidates(
        self,
        issues: Iterable[LintIssue],
        context: ValidationContext,
        cancel: CancellationToken | None = None,
    ) -> list[LintIssue]:
        """Return the surviving issues, in input order, with a validation status.

        Never raises for provider failures, timeouts or cancellation.
        """

        candidates = list(issues)
        if not candidates:
            return []

        pending = [index for index, issue in enumerate(candidates) if not context.skips(issue)]
        book = _VerdictBook()

        if pending and not self._client_available():
            LOGGER.info(
                "LLM client unavailable; %d candidate(s) left unvalidated", len(pending)
            )
            pending = []

        units = [
            pending[offset : offset + self.batch_size]
            for offset in range(0, len(pending), self.batch_size)
        ]
        if units:
            self._run_units(units, candidates, context, cancel, book)

        results: list[LintIssue] = []
        for index, issue in enumerate(candidates):
            if context.skips(issue):
                results.append(issue.with_status(ValidationStatus.SKIPPED))
                continue
            verdict = book.get(index)
            if verdict is False:
                LOGGER.debug("Dropping %s at %d-%d", issue.rule_id, issue.from_, issue.to)
                continue
            status = ValidationStatus.CONFIRMED if verdict else ValidationStatus.UNVALIDATED
            results.append(issue.with_status(status))
        return results

    def _client_available(self) -> bool:
        try:
            return bool(self._client.is_available())
        except Exception as exc:  # noqa: BLE001 - a broken probe counts as unavailable
            LOGGER.warning("LLM availability check failed: %s", exc)
            return False

    def _run_units(
        self,
        units: list[list[int]],
        candidates: Sequence[LintIssue],
        context: ValidationContext,
        cancel: CancellationToken | None,
        book: _VerdictBook,
    ) -> None:
        workers = min(self.concurrency, len(units))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kousei-validate")
        futures: dict[Future[None], int] = {
            executor.submit(
                self._validate_unit, unit_id, unit, candidates, context, cancel, book
            ): unit_id
            for unit_id, unit in enumerate(units)
        }
        waiting = set(futures)
        expired: set[int] = set()
        try:
            while waiting:
                if cancel is not None and cancel.cancelled:
                    LOGGER.info(
                        "Validation cancelled; %d unit(s) left unvalidated", len(waiting)
                    )
                    break
                done, waiting = wait(waiting, timeout=_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    try:
                        future.result()
                    except Exception:  # pragma: no cover
                        LOGGER.exception(
                            "Validation unit %s failed unexpectedly", units[futures[future]]
                        )
                if self.timeout is None or not waiting:
                    continue
                waiting = self._expire_units(waiting, futures, units, book, expired, self.timeout)
                stuck = sum(
                    1 for future, unit_id in futures.items()
                    if unit_id in expired and not future.done()
                )
                if waiting and stuck >= workers:
                    LOGGER.warning(
                        "Every validator worker is held by a timed-out request; "
                        "%d queued unit(s) left unvalidated",
                        len(waiting),
                    )
                    break
        finally:
            book.close()
            executor.shutdown(wait=False, cancel_futures=True)

    def _expire_units(
        self,
        waiting: set[Future[None]],
        futures: dict[Future[None], int],
        units: list[list[int]],
        book: _VerdictBook,
        expired: set[int],
        timeout: float,
    ) -> set[Future[None]]:
        now = time.monotonic()
        remaining: set[Future[None]] = set()
        for future in waiting:
            unit_id = futures[future]
            started = book.started_at(unit_id)
            if started is None or now - started < timeout:
                remaining.add(future)
                continue
            LOGGER.warning(
                "Validation of candidate(s) %s timed out after %.1fs",
                units[unit_id],
                timeout,
            )
            book.abandon(units[unit_id])
            expired.add(unit_id)
        return remaining

    def _validate_unit(
        self,
        unit_id: int,
        unit: list[int],
        candidates: Sequence[LintIssue],
        context: ValidationContext,
        cancel: CancellationToken | None,
        book: _VerdictBook,
    ) -> None:
        if cancel is not None and cancel.cancelled:
            return
        book.start(unit_id)
        issues = [candidates[index] for index in unit]
        options = InferenceOptions(
            max_tokens=self.max_tokens * len(unit), cancel=cancel, timeout=self.timeout
        )
        try:
            if len(unit) == 1:
                prompt = build_candidate_prompt(
                    issues[0], context, context_chars=self.context_chars
                )
                response = self._infer(prompt, options)
                verdict = parse_verdict(response)
                book.record(unit[0], verdict.valid)
                return

            prompt = build_batch_prompt(issues, context, context_chars=self.context_chars)
            response = self._infer(prompt, options)
            verdicts = parse_batch_verdicts(response, range(len(unit)))
            for position, index in enumerate(unit):
                batch_verdict = verdicts.get(position)
                if batch_verdict is not None:
                    book.record(index, batch_verdict.valid)
        except LLMCancelledError:
            LOGGER.debug("Validation cancelled for candidate(s) %s", unit)
        except LLMParseError as exc:
            LOGGER.warning("Unparsable verdict for candidate(s) %s: %s", unit, exc)
        except LLMProviderError as exc:
            LOGGER.warning("LLM validation failed for candidate(s) %s: %s", unit, exc)

    def _infer(self, prompt: str, options: InferenceOptions) -> str:
        LOGGER.log(self._log_level, "Validator prompt:\n%s", prompt)
        response = self._client.infer(prompt, options)
        LOGGER.log(self._log_level, "Validator response:\n%s", response)
        if options.cancelled:
            raise LLMCancelledError("Validation cancelled while the request was in flight")
        return response
