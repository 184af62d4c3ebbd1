from __future__ import annotations

import logging
import os
import threading
import time
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
from google import genai
from google.genai import types

from .provider import (
    InferenceOptions,
    LLMCancelledError,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
    read_system_prompt,
)

LOGGER = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


class GeminiLLM:
    """Wrapper around the Gemini SDK with system instructions.

    Rate limiting and retries are read from ``GEMINI_MIN_REQUEST_INTERVAL``
    and ``GEMINI_MAX_RETRIES`` unless given explicitly. HTTP 429 responses are
    retried with exponential backoff and surface as :class:`LLMQuotaError`
    once retries are exhausted.
    """

    name = "gemini"
    MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: genai.Client | None = None,
        dotenv_path: str | Path | None = None,
        model: str | None = None,
        min_request_interval: float | None = None,
        max_retries: int | None = None,
        thinking_budget: int | None = None,
    ) -> None:
        self._system_prompt = read_system_prompt(system_prompt)

        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()

        if client is None:
            try:
                client = genai.Client()
            except Exception as exc:  # noqa: BLE001 - SDK raises ValueError without a key
                raise LLMProviderConfigurationError(
                    f"Gemini client could not be created: {exc}"
                ) from exc
        self._client = client
        self._model = model or os.environ.get("GEMINI_MODEL", self.MODEL)

        if min_request_interval is None:
            min_request_interval = _env_float("GEMINI_MIN_REQUEST_INTERVAL", 0.0)
        self._min_request_interval = max(0.0, min_request_interval)
        if max_retries is None:
            max_retries = _env_int("GEMINI_MAX_RETRIES", 0)
        self._max_retries = max(0, max_retries)
        if thinking_budget is None:
            thinking_budget = _env_int("GEMINI_THINKING_BUDGET", 0)
        self._thinking_budget = max(0, thinking_budget)

        self._last_request_time: float | None = None
        self._rate_lock = threading.Lock()

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def model(self) -> str:
        return self._model

    def is_available(self) -> bool:
        return self._client is not None

    def health_check(self) -> bool:
        return self.is_available()

    def infer(self, prompt: str, options: InferenceOptions | None = None) -> str:
        if not prompt:
            raise ValueError("prompt must not be empty.")
        options = options or InferenceOptions()

        config_kwargs: dict[str, object] = dict(
            system_instruction=self._system_prompt,
            temperature=options.temperature,
            thinking_config=types.ThinkingConfig(thinking_budget=self._thinking_budget),
        )
        if options.max_tokens is not None:
            config_kwargs["max_output_tokens"] = options.max_tokens
        if options.timeout is not None:
            config_kwargs["http_options"] = types.HttpOptions(
                timeout=max(1, int(options.timeout * 1000))
            )
        config = types.GenerateContentConfig(**config_kwargs)

        for attempt in range(self._max_retries + 1):
            if options.cancelled:
                raise LLMCancelledError("Gemini request cancelled before dispatch")
            self._enforce_rate_limit()
            try:
                response = self._client.models.generate_content(
                    model=self._model,
                    contents=prompt,
                    config=config,
                )
            except Exception as exc:
                if getattr(exc, "code", None) != 429:
                    raise LLMProviderError(f"Gemini request failed: {exc}") from exc
                if attempt >= self._max_retries:
                    raise LLMQuotaError(
                        "Gemini provider: rate limited (exhausted retries)"
                    ) from exc
                delay = (self._min_request_interval or 0.1) * (2**attempt)
                LOGGER.warning(
                    "Gemini rate limited (attempt %d); retrying in %.1fs", attempt + 1, delay
                )
                if options.cancel is not None and options.cancel.wait(delay):
                    raise LLMCancelledError("Gemini request cancelled during backoff") from exc
                if options.cancel is None:
                    time.sleep(delay)
                continue

            text = getattr(response, "text", None)
            if not isinstance(text, str):
                raise LLMProviderError("Gemini returned a response without text")
            return text

        raise LLMQuotaError("Gemini provider: rate limited (exhausted retries)")

    def infer_batch(
        self,
        prompts: Sequence[str],
        options: InferenceOptions | None = None,
    ) -> list[str]:
        return [self.infer(prompt, options) for prompt in prompts]

    def _enforce_rate_limit(self) -> None:
        if self._min_request_interval <= 0:
            return
        with self._rate_lock:
            if self._last_request_time is not None:
                elapsed = time.monotonic() - self._last_request_time
                if elapsed < self._min_request_interval:
                    time.sleep(self._min_request_interval - elapsed)
            self._last_request_time = time.monotonic()
