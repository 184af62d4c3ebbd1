from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Sequence

from dotenv import load_dotenv
from mistralai import Mistral

from .provider import (
    InferenceOptions,
    LLMCancelledError,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
    read_system_prompt,
)


class MistralLLM:
    """Wrapper around the Mistral chat completion API with system instructions."""

    name = "mistral"
    MODEL = "mistral-small-latest"

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: Mistral | None = None,
        dotenv_path: str | Path | None = None,
        model: str | None = None,
    ) -> None:
        self._system_prompt = read_system_prompt(system_prompt)

        if dotenv_path is not None:
            # Existing environment values take precedence over the file.
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()

        # The SDK does not read MISTRAL_API_KEY on its own.
        if client is None:
            api_key = os.environ.get("MISTRAL_API_KEY")
            if not api_key:
                raise LLMProviderConfigurationError(
                    "MISTRAL_API_KEY environment variable is required but not set. "
                    "Please set it in your .env file or environment."
                )
            client = Mistral(api_key=api_key)
        self._client = client
        self._model = model or os.environ.get("MISTRAL_MODEL", self.MODEL)

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def is_available(self) -> bool:
        return self._client is not None

    def health_check(self) -> bool:
        return self.is_available()

    def infer(self, prompt: str, options: InferenceOptions | None = None) -> str:
        if not prompt:
            raise ValueError("prompt must not be empty.")
        options = options or InferenceOptions()
        if options.cancelled:
            raise LLMCancelledError("Mistral request cancelled before dispatch")

        request: dict[str, Any] = dict(
            model=self._model,
            messages=[
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=options.temperature,
        )
        if options.max_tokens is not None:
            request["max_tokens"] = options.max_tokens
        if options.timeout is not None:
            request["timeout_ms"] = max(1, int(options.timeout * 1000))

        try:
            response = self._client.chat.complete(**request)
        except Exception as exc:
            if getattr(exc, "status_code", None) == 429:
                raise LLMQuotaError(
                    "Mistral provider: quota exhausted or rate limited"
                ) from exc
            raise LLMProviderError(f"Mistral request failed: {exc}") from exc

        return self._response_text(response)

    def infer_batch(
        self,
        prompts: Sequence[str],
        options: InferenceOptions | None = None,
    ) -> list[str]:
        return [self.infer(prompt, options) for prompt in prompts]

    @staticmethod
    def _response_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise LLMProviderError("Mistral returned no choices")
        content = getattr(choices[0].message, "content", None)
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            # Chunked content: keep the text chunks only
            return "".join(
                str(getattr(chunk, "text", "")) for chunk in content if hasattr(chunk, "text")
            )
        raise LLMProviderError("Mistral returned a response without text content")
