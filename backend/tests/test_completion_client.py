from __future__ import annotations

from types import SimpleNamespace

import openai
import pytest

from mentiva.core.config import settings
from mentiva.core.errors import CompletionServiceError, UpstreamConfigError
from mentiva.services.completion_client import OpenAICompletionClient


class _FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.result


def _client_with(completions: _FakeCompletions) -> OpenAICompletionClient:
    client = OpenAICompletionClient(api_key="sk-test", model="gpt-test", temperature=0.2)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client


def test_missing_api_key_fails_on_first_generation(monkeypatch) -> None:
    monkeypatch.setattr(settings, "openai_api_key", None)
    client = OpenAICompletionClient()

    with pytest.raises(UpstreamConfigError):
        client.complete("system", "user", max_tokens=10)


def test_complete_sends_system_and_user_messages() -> None:
    message = SimpleNamespace(content='{"ok": true}')
    completions = _FakeCompletions(result=SimpleNamespace(choices=[SimpleNamespace(message=message)]))

    text = _client_with(completions).complete("be helpful", "plan my day", max_tokens=256)

    assert text == '{"ok": true}'
    assert completions.kwargs["model"] == "gpt-test"
    assert completions.kwargs["max_tokens"] == 256
    assert completions.kwargs["temperature"] == 0.2
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "be helpful"},
        {"role": "user", "content": "plan my day"},
    ]


def test_sdk_errors_become_completion_service_errors() -> None:
    completions = _FakeCompletions(error=openai.OpenAIError("rate limited"))

    with pytest.raises(CompletionServiceError):
        _client_with(completions).complete("s", "u", max_tokens=10)
