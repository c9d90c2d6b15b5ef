"""OpenAI-backed embedding and chat clients."""

from __future__ import annotations

from typing import Any, Optional

from openai import OpenAI

from llmclient.core.logging_utils import log_event
from llmclient.llm.document import MetadataMode
from llmclient.llm.errors import LLMConfigurationError
from llmclient.llm.interfaces import EmbeddingClient, ProviderCapabilities
from llmclient.llm.retry import RetryPolicy
from llmclient.llm.types import (
    ChatGenerationMetadata,
    ChatRequest,
    ChatResponse,
    Embedding,
    EmbeddingRequest,
    EmbeddingResponse,
    EmbeddingResponseMetadata,
    Generation,
    GenerationMetadata,
    RateLimit,
    Usage,
)

DEFAULT_EMBEDDING_MODEL = "text-embedding-ada-002"
DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"


def _usage_value(usage: Any, key: str) -> int:
    if usage is None:
        return 0
    if isinstance(usage, dict):
        return int(usage.get(key) or 0)
    return int(getattr(usage, key, 0) or 0)


def _embedding_metadata(model: Optional[str], usage: Any) -> EmbeddingResponseMetadata:
    """Copy provider usage counters into embedding metadata."""
    return EmbeddingResponseMetadata(
        model=model,
        prompt_tokens=_usage_value(usage, "prompt_tokens"),
        completion_tokens=_usage_value(usage, "completion_tokens"),
        total_tokens=_usage_value(usage, "total_tokens"),
    )


def build_openai_client(*, api_key: Optional[str] = None, base_url: Optional[str] = None) -> OpenAI:
    """Create an SDK client with the SDK's own retries disabled."""
    return OpenAI(api_key=api_key or None, base_url=base_url or None, max_retries=0)


class OpenAIEmbeddingClient(EmbeddingClient):
    """Embedding client for the OpenAI Embeddings API."""

    name = "openai"

    def __init__(
        self,
        client: OpenAI,
        model: str = DEFAULT_EMBEDDING_MODEL,
        metadata_mode: MetadataMode = MetadataMode.EMBED,
        *,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        if client is None:
            raise LLMConfigurationError("OpenAI client must not be None")
        super().__init__(model=model, metadata_mode=metadata_mode)
        self._client = client
        self._retry_policy = retry_policy or RetryPolicy()

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def call(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """Embed the request's instructions, retrying on provider API errors."""
        if request is None:
            raise LLMConfigurationError("EmbeddingRequest must not be None")
        return self._retry_policy.execute(self._call_once, request)

    def _call_once(self, request: EmbeddingRequest) -> EmbeddingResponse:
        response = self._client.embeddings.create(model=self._model, input=list(request.instructions))
        if response is None:
            log_event(
                "embedding_empty_response",
                {"provider": self.name, "model": self._model, "inputs": len(request.instructions)},
                level="warning",
            )
            return EmbeddingResponse(embeddings=())
        metadata = _embedding_metadata(getattr(response, "model", None), getattr(response, "usage", None))
        embeddings = tuple(
            Embedding(output=item.embedding, index=int(item.index))
            for item in (getattr(response, "data", None) or [])
        )
        return EmbeddingResponse(embeddings=embeddings, metadata=metadata)


class OpenAIChatClient:
    """Chat client for the OpenAI Chat Completions API."""

    name = "openai"
    capabilities = ProviderCapabilities(supports_chat=True, supports_embeddings=False)

    def __init__(
        self,
        client: OpenAI,
        model: str = DEFAULT_CHAT_MODEL,
        *,
        temperature: Optional[float] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        if client is None:
            raise LLMConfigurationError("OpenAI client must not be None")
        if model is None:
            raise LLMConfigurationError("Model must not be None")
        self._client = client
        self._model = model
        self._temperature = temperature
        self._retry_policy = retry_policy or RetryPolicy()

    @property
    def model(self) -> str:
        return self._model

    def _payload(self, request: ChatRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": request.model or self._model,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
        }
        temperature = request.temperature if request.temperature is not None else self._temperature
        if temperature is not None:
            payload["temperature"] = temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        return payload

    def call(self, request: ChatRequest) -> ChatResponse:
        """Run one chat completion, retrying on provider API errors."""
        if request is None:
            raise LLMConfigurationError("ChatRequest must not be None")
        return self._retry_policy.execute(self._call_once, request)

    def _call_once(self, request: ChatRequest) -> ChatResponse:
        raw = self._client.chat.completions.with_raw_response.create(**self._payload(request))
        completion = raw.parse()
        if completion is None:
            log_event("chat_empty_response", {"provider": self.name, "model": self._model}, level="warning")
            return ChatResponse(generations=())

        generations = []
        for choice in getattr(completion, "choices", None) or []:
            message = getattr(choice, "message", None)
            generations.append(
                Generation(
                    text=str(getattr(message, "content", None) or ""),
                    properties={
                        "role": getattr(message, "role", None),
                        "id": getattr(completion, "id", None),
                    },
                    metadata=ChatGenerationMetadata(finish_reason=getattr(choice, "finish_reason", None)),
                )
            )

        usage = getattr(completion, "usage", None)
        metadata = GenerationMetadata(
            model=getattr(completion, "model", None),
            usage=Usage(
                prompt_tokens=_usage_value(usage, "prompt_tokens"),
                generation_tokens=_usage_value(usage, "completion_tokens"),
                total_tokens=_usage_value(usage, "total_tokens") or None,
            ),
            rate_limit=RateLimit.from_headers(getattr(raw, "headers", None)),
            provider=self.name,
        )
        return ChatResponse(generations=generations, metadata=metadata).with_raw_response(completion)
