from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

from .gemini_llm import GeminiLLM
from .mistral_llm import MistralLLM
from .provider import LLMClient, LLMProviderConfigurationError, ProviderFactory

LOGGER = logging.getLogger(__name__)


def _gemini_factory(
    *,
    system_prompt: str | Path,
    dotenv_path: str | Path | None,
) -> LLMClient:
    return GeminiLLM(system_prompt=system_prompt, dotenv_path=dotenv_path)


def _mistral_factory(
    *,
    system_prompt: str | Path,
    dotenv_path: str | Path | None,
) -> LLMClient:
    return MistralLLM(system_prompt=system_prompt, dotenv_path=dotenv_path)


_PROVIDER_FACTORIES: dict[str, ProviderFactory] = {
    "gemini": _gemini_factory,
    "mistral": _mistral_factory,
}


def _split_names(value: str | None) -> list[str]:
    if not value:
        return []
    return [chunk.strip().lower() for chunk in value.split(",") if chunk.strip()]


def create_provider_chain(
    *,
    system_prompt: str | Path,
    dotenv_path: str | Path | None = None,
    primary: str | None = None,
    fallbacks: Sequence[str] | None = None,
    skip_unconfigured: bool = False,
) -> list[LLMClient]:
    """Return configured providers honoring environment/priority hints.

    Order comes from ``primary``/``fallbacks`` or the ``LLM_PRIMARY`` and
    ``LLM_FALLBACK`` environment variables (comma separated), defaulting to
    every known provider. With ``skip_unconfigured`` providers that cannot
    be configured (missing API key) are logged and left out.
    """

    if dotenv_path is not None:
        # .env values win for provider discovery and ordering
        load_dotenv(dotenv_path=str(dotenv_path), override=True)

    candidates: list[str] = []
    if primary:
        candidates.extend(_split_names(primary))
    else:
        candidates.extend(_split_names(os.environ.get("LLM_PRIMARY")))
    if fallbacks:
        candidates.extend(name.strip().lower() for name in fallbacks)
    else:
        candidates.extend(_split_names(os.environ.get("LLM_FALLBACK")))
    if not candidates:
        candidates = list(_PROVIDER_FACTORIES)

    order: list[str] = []
    for name in candidates:
        if name in order:
            continue
        if name not in _PROVIDER_FACTORIES:
            raise ValueError(f"Unknown LLM provider '{name}'")
        order.append(name)

    providers: list[LLMClient] = []
    for name in order:
        try:
            providers.append(
                _PROVIDER_FACTORIES[name](system_prompt=system_prompt, dotenv_path=dotenv_path)
            )
        except LLMProviderConfigurationError as exc:
            if not skip_unconfigured:
                raise
            LOGGER.warning("Skipping LLM provider %s: %s", name, exc)
    return providers
