from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, cast

import pytest
from mistralai import Mistral

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kousei.llm.mistral_llm import MistralLLM
from kousei.llm.provider import (
    InferenceOptions,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
)


class _DummyMessage:
    def __init__(self, content: Any) -> None:
        self.content = content


class _DummyChoice:
    def __init__(self, message: _DummyMessage) -> None:
        self.message = message
        self.finish_reason = "stop"


class _DummyResponse:
    def __init__(self, content: Any) -> None:
        self.choices = [_DummyChoice(_DummyMessage(content))]


class _DummyChat:
    def __init__(self, response_content: Any = "mock-response", error: Exception | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self._response_content = response_content
        self._error = error

    def complete(self, **kwargs: object) -> _DummyResponse:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return _DummyResponse(content=self._response_content)


class _DummyClient:
    def __init__(self, response_content: Any = "mock-response", error: Exception | None = None) -> None:
        self.chat = _DummyChat(response_content=response_content, error=error)


class _QuotaExceededError(Exception):
    """Mock quota exceeded error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.status_code = 429


def _llm(client: _DummyClient) -> MistralLLM:
    return MistralLLM(system_prompt="system text", client=cast(Mistral, client))


def test_infer_sends_system_and_user_messages() -> None:
    client = _DummyClient(response_content='{"valid": false}')
    llm = _llm(client)

    result = llm.infer("user prompt", InferenceOptions(max_tokens=32))

    assert result == '{"valid": false}'
    call = client.chat.calls[0]
    assert call["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user prompt"},
    ]
    assert call["max_tokens"] == 32
    assert call["temperature"] == 0.0


def test_chunked_content_is_joined() -> None:
    chunks = [SimpleNamespace(text='{"valid": '), SimpleNamespace(text="true}")]
    llm = _llm(_DummyClient(response_content=chunks))

    assert llm.infer("prompt") == '{"valid": true}'


def test_quota_error_is_mapped() -> None:
    llm = _llm(_DummyClient(error=_QuotaExceededError("Too many requests")))

    with pytest.raises(LLMQuotaError):
        llm.infer("prompt")


def test_other_errors_are_provider_errors() -> None:
    llm = _llm(_DummyClient(error=RuntimeError("bad gateway")))

    with pytest.raises(LLMProviderError, match="bad gateway"):
        llm.infer("prompt")


def test_missing_api_key_raises_configuration_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)
    empty_env = tmp_path / ".env"
    empty_env.write_text("", encoding="utf-8")

    with pytest.raises(LLMProviderConfigurationError):
        MistralLLM(system_prompt="system", dotenv_path=empty_env)


def test_model_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MISTRAL_MODEL", "mistral-test")
    client = _DummyClient()

    _llm(client).infer("prompt")

    assert client.chat.calls[0]["model"] == "mistral-test"


def test_request_timeout_is_sent_in_milliseconds() -> None:
    client = _DummyClient(response_content='{"valid": true}')
    llm = _llm(client)

    llm.infer("prompt", InferenceOptions(timeout=1.5))
    llm.infer("prompt")

    assert client.chat.calls[0]["timeout_ms"] == 1500
    assert "timeout_ms" not in client.chat.calls[1]
