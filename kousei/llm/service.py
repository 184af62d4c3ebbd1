from __future__ import annotations

import logging
from typing import Sequence

from .provider import (
    InferenceOptions,
    LLMCancelledError,
    LLMClient,
    LLMProviderError,
    LLMQuotaError,
    ProviderReporter,
    ProviderStatus,
)

LOGGER = logging.getLogger(__name__)


class LLMService:
    """Facade that routes LLM requests across a priority-ordered provider list.

    Unavailable providers are skipped, quota errors fall through to the next
    provider, and any other provider error is reported and re-raised.
    """

    name = "service"

    def __init__(
        self,
        providers: Sequence[LLMClient],
        *,
        reporter: ProviderReporter | None = None,
    ) -> None:
        self._providers = list(providers)
        self._reporter = reporter

    def provider_order(self) -> list[str]:
        """Return the provider names in configured order."""

        return [provider.name for provider in self._providers]

    def is_available(self) -> bool:
        return any(self._provider_available(provider) for provider in self._providers)

    def health_check(self) -> list[tuple[str, bool]]:
        """Availability of every provider, in order."""

        return [
            (provider.name, self._provider_available(provider))
            for provider in self._providers
        ]

    def infer(self, prompt: str, options: InferenceOptions | None = None) -> str:
        """Try each provider until one succeeds or all quotas are exhausted."""

        last_error: LLMQuotaError | None = None
        attempted = False
        for provider in self._providers:
            if not self._provider_available(provider):
                self._report(provider.name, ProviderStatus.UNAVAILABLE)
                continue
            attempted = True
            try:
                value = provider.infer(prompt, options)
            except LLMCancelledError as exc:
                self._report(provider.name, ProviderStatus.CANCELLED, exc)
                raise
            except LLMQuotaError as exc:
                last_error = exc
                self._report(provider.name, ProviderStatus.QUOTA, exc)
                continue
            except LLMProviderError as exc:
                self._report(provider.name, ProviderStatus.FAILURE, exc)
                raise
            self._report(provider.name, ProviderStatus.SUCCESS)
            return value
        if not attempted:
            raise LLMProviderError("No LLM provider is available")
        raise LLMQuotaError("All providers exceeded quota") from last_error

    def infer_batch(
        self,
        prompts: Sequence[str],
        options: InferenceOptions | None = None,
    ) -> list[str]:
        """Try each provider's batch call until one supports it and succeeds."""

        if not prompts:
            return []
        last_error: LLMQuotaError | None = None
        attempted = False
        available = False
        for provider in self._providers:
            if not self._provider_available(provider):
                self._report(provider.name, ProviderStatus.UNAVAILABLE)
                continue
            available = True
            try:
                result = provider.infer_batch(prompts, options)
            except NotImplementedError:
                self._report(provider.name, ProviderStatus.UNSUPPORTED)
                continue
            except LLMCancelledError as exc:
                self._report(provider.name, ProviderStatus.CANCELLED, exc)
                raise
            except LLMQuotaError as exc:
                attempted = True
                last_error = exc
                self._report(provider.name, ProviderStatus.QUOTA, exc)
                continue
            except LLMProviderError as exc:
                self._report(provider.name, ProviderStatus.FAILURE, exc)
                raise
            self._report(provider.name, ProviderStatus.SUCCESS)
            return list(result)
        if not available:
            raise LLMProviderError("No LLM provider is available")
        if not attempted:
            raise NotImplementedError("No available provider supports infer_batch")
        raise LLMQuotaError("All providers exceeded quota") from last_error

    @staticmethod
    def _provider_available(provider: LLMClient) -> bool:
        try:
            return bool(provider.is_available())
        except Exception as exc:  # noqa: BLE001 - a broken probe counts as unavailable
            LOGGER.warning("Availability check failed for %s: %s", provider.name, exc)
            return False

    def _report(
        self,
        provider_name: str,
        status: ProviderStatus,
        error: Exception | None = None,
    ) -> None:
        if self._reporter is None:
            return
        self._reporter(provider_name, status, error)


def logging_reporter(provider_name: str, status: ProviderStatus, error: Exception | None) -> None:
    """Reporter that writes provider outcomes to the module logger."""

    if status is ProviderStatus.SUCCESS:
        LOGGER.debug("Provider %s succeeded", provider_name)
    elif error is not None:
        LOGGER.warning("Provider %s: %s (%s)", provider_name, status.value, error)
    else:
        LOGGER.info("Provider %s: %s", provider_name, status.value)
