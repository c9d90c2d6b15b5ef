"""Anthropic-backed chat client implementation."""

from __future__ import annotations

from typing import Any, Optional

from anthropic import Anthropic

from llmclient.core.logging_utils import log_event
from llmclient.llm.errors import LLMConfigurationError
from llmclient.llm.interfaces import ProviderCapabilities
from llmclient.llm.retry import RetryPolicy
from llmclient.llm.types import (
    ChatGenerationMetadata,
    ChatRequest,
    ChatResponse,
    Generation,
    GenerationMetadata,
    Usage,
)

DEFAULT_CHAT_MODEL = "claude-3-haiku-20240307"


def _usage(usage: Any) -> Usage:
    """Normalize Anthropic token usage; total is input plus output."""
    if usage is None:
        return Usage()
    return Usage(
        prompt_tokens=int(getattr(usage, "input_tokens", 0) or 0),
        generation_tokens=int(getattr(usage, "output_tokens", 0) or 0),
    )


def build_anthropic_client(*, api_key: Optional[str] = None) -> Anthropic:
    key = str(api_key or "").strip()
    if not key:
        raise LLMConfigurationError("anthropic provider requires ANTHROPIC_API_KEY")
    return Anthropic(api_key=key, max_retries=0)


class AnthropicChatClient:
    """Chat client for the Anthropic Messages API (chat only)."""

    name = "anthropic"
    capabilities = ProviderCapabilities(supports_chat=True, supports_embeddings=False)

    def __init__(
        self,
        client: Anthropic,
        model: str = DEFAULT_CHAT_MODEL,
        *,
        max_tokens: int = 1024,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        if client is None:
            raise LLMConfigurationError("Anthropic client must not be None")
        if model is None:
            raise LLMConfigurationError("Model must not be None")
        self._client = client
        self._model = model
        self._max_tokens = int(max_tokens)
        self._retry_policy = retry_policy or RetryPolicy()

    @property
    def model(self) -> str:
        return self._model

    def _payload(self, request: ChatRequest) -> dict[str, Any]:
        system = "\n".join(m.content for m in request.messages if m.role == "system")
        payload: dict[str, Any] = {
            "model": request.model or self._model,
            "max_tokens": int(request.max_tokens or self._max_tokens),
            "messages": [{"role": m.role, "content": m.content} for m in request.messages if m.role != "system"],
        }
        if system:
            payload["system"] = system
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        return payload

    def call(self, request: ChatRequest) -> ChatResponse:
        """Run one Messages API call, retrying on provider API errors."""
        if request is None:
            raise LLMConfigurationError("ChatRequest must not be None")
        return self._retry_policy.execute(self._call_once, request)

    def _call_once(self, request: ChatRequest) -> ChatResponse:
        response = self._client.messages.create(**self._payload(request))
        if response is None:
            log_event("chat_empty_response", {"provider": self.name, "model": self._model}, level="warning")
            return ChatResponse(generations=())
        text_parts: list[str] = []
        for block in getattr(response, "content", []) or []:
            if getattr(block, "type", None) == "text":
                val = getattr(block, "text", None)
                if val:
                    text_parts.append(str(val))
        generation = Generation(
            text="\n".join(text_parts).strip(),
            properties={"role": getattr(response, "role", "assistant"), "id": getattr(response, "id", None)},
            metadata=ChatGenerationMetadata(finish_reason=getattr(response, "stop_reason", None)),
        )
        metadata = GenerationMetadata(
            model=getattr(response, "model", None),
            usage=_usage(getattr(response, "usage", None)),
            provider=self.name,
        )
        return ChatResponse(generations=(generation,), metadata=metadata).with_raw_response(response)
