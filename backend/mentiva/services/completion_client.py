"""Hosted text-completion client used by every generator."""
from __future__ import annotations

import logging
from typing import Optional

import openai

from mentiva.core.config import settings
from mentiva.core.errors import CompletionServiceError, UpstreamConfigError
from mentiva.observability.tracing import trace

logger = logging.getLogger(__name__)


class CompletionClient:
    """Interface: send a system/user prompt pair, get free-form text back."""

    def complete(self, system_prompt: str, user_prompt: str, *, max_tokens: int) -> str:
        raise NotImplementedError


class OpenAICompletionClient(CompletionClient):
    """Chat-completions backed client.

    The SDK client is built on first use so that routes which never generate
    (cached days, reads) work without an API key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        self._api_key = api_key
        self.model = model or settings.completion_model
        self.temperature = settings.completion_temperature if temperature is None else temperature
        self._client: Optional[openai.OpenAI] = None

    def _get_client(self) -> openai.OpenAI:
        if self._client is None:
            api_key = self._api_key or settings.openai_api_key
            if not api_key:
                raise UpstreamConfigError("OPENAI_API_KEY not configured")
            self._client = openai.OpenAI(api_key=api_key)
        return self._client

    def complete(self, system_prompt: str, user_prompt: str, *, max_tokens: int) -> str:
        client = self._get_client()
        with trace(
            "completion.request",
            metadata={
                "model": self.model,
                "max_tokens": max_tokens,
                "system_prompt_chars": len(system_prompt),
                "llm_input_text": user_prompt[:500],
            },
        ) as completion_trace:
            try:
                completion = client.chat.completions.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    temperature=self.temperature,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                )
            except openai.OpenAIError as exc:
                logger.error("Completion request failed: %s", exc)
                raise CompletionServiceError() from exc

            text = completion.choices[0].message.content or ""
            if completion_trace:
                completion_trace.update(metadata={"llm_output_text": text[:500]})
        return text


_default_client: Optional[OpenAICompletionClient] = None


def get_completion_client() -> CompletionClient:
    """FastAPI dependency returning the process-wide completion client."""
    global _default_client
    if _default_client is None:
        _default_client = OpenAICompletionClient()
    return _default_client
