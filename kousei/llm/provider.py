from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, Sequence

from .cancellation import CancellationToken

ProviderReporter = Callable[[str, "ProviderStatus", Exception | None], None]


class ProviderStatus(str, Enum):
    """Status used when reporting the outcome of a provider call."""

    SUCCESS = "success"
    QUOTA = "quota"
    FAILURE = "failure"
    UNSUPPORTED = "unsupported"
    UNAVAILABLE = "unavailable"
    CANCELLED = "cancelled"


class LLMProviderError(Exception):
    """Generic failure raised by an LLM provider."""


class LLMQuotaError(LLMProviderError):
    """Raised when a provider reports quota or rate-limit exhaustion."""


class LLMProviderConfigurationError(LLMProviderError):
    """Raised when a provider cannot be configured or authenticated."""


class LLMCancelledError(LLMProviderError):
    """Raised when a request is abandoned because its caller cancelled."""


class LLMParseError(LLMProviderError):
    """Raised when an LLM response cannot be parsed as expected.

    Carries the raw response text and the prompts so unexpected output can
    be inspected.
    """

    def __init__(
        self,
        message: str,
        *,
        response_text: str | None = None,
        prompts: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.response_text = response_text
        self.prompts = prompts

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.response_text is not None:
            parts.append(f"\n--- LLM Response ---\n{_truncate(self.response_text)}")
        if self.prompts:
            parts.append(f"\n--- Input Prompts ---\n{_truncate(chr(10).join(self.prompts))}")
        return "".join(parts)


def _truncate(text: str, limit: int = 2000) -> str:
    if len(text) > limit:
        return text[:limit] + "... [truncated]"
    return text


@dataclass(frozen=True)
class InferenceOptions:
    """Per-request settings passed to :meth:`LLMClient.infer`."""

    max_tokens: int | None = None
    temperature: float = 0.0
    cancel: CancellationToken | None = None
    # Seconds; None leaves the SDK default in place
    timeout: float | None = None

    @property
    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.cancelled


class LLMClient(Protocol):
    """Shared contract for LLM providers and the fallback service."""

    name: str

    def is_available(self) -> bool:
        """True when the client can accept requests right now."""
        ...

    def infer(self, prompt: str, options: InferenceOptions | None = None) -> str:
        """Return the raw completion text for ``prompt``."""
        ...

    def infer_batch(
        self,
        prompts: Sequence[str],
        options: InferenceOptions | None = None,
    ) -> list[str]:
        """Return one completion per prompt, in order."""
        ...


class ProviderFactory(Protocol):
    def __call__(
        self,
        *,
        system_prompt: str | Path,
        dotenv_path: str | Path | None,
    ) -> LLMClient: ...


def read_system_prompt(system_prompt: str | Path) -> str:
    """Accept a prompt string or a path to a prompt file."""

    if isinstance(system_prompt, Path):
        return system_prompt.read_text(encoding="utf-8")
    if not isinstance(system_prompt, str):
        raise TypeError(f"system_prompt must be str or Path, got {type(system_prompt)}")
    # Short single-line strings may be file paths
    if "\n" not in system_prompt and len(system_prompt) < 500:
        try:
            prompt_path = Path(system_prompt)
            if prompt_path.is_file():
                return prompt_path.read_text(encoding="utf-8")
        except (OSError, ValueError):
            pass
    return system_prompt
