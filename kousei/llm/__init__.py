"""LLM providers, the fallback service and response helpers."""

from .cancellation import CancellationToken
from .provider import (
    InferenceOptions,
    LLMCancelledError,
    LLMClient,
    LLMParseError,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
    ProviderStatus,
)
from .service import LLMService, logging_reporter

__all__ = [
    "CancellationToken",
    "InferenceOptions",
    "LLMCancelledError",
    "LLMClient",
    "LLMParseError",
    "LLMProviderConfigurationError",
    "LLMProviderError",
    "LLMQuotaError",
    "LLMService",
    "ProviderStatus",
    "logging_reporter",
]
