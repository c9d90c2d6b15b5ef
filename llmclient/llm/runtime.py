"""Build configured chat and embedding clients from Settings."""

from __future__ import annotations

from typing import Any, Optional

from llmclient.core.config import Settings
from llmclient.llm.errors import LLMCapabilityError, LLMConfigurationError
from llmclient.llm.interfaces import ChatClient, EmbeddingClient
from llmclient.llm.providers import anthropic_provider, openai_provider

SUPPORTED_PROVIDERS = ("openai", "anthropic")


def _provider_id(settings: Settings) -> str:
    if settings is None:
        raise LLMConfigurationError("Settings must not be None")
    provider_id = str(settings.provider or "").strip().lower()
    if provider_id not in SUPPORTED_PROVIDERS:
        raise LLMConfigurationError(
            f"Unsupported llm provider '{provider_id}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    return provider_id


def build_embedding_client(settings: Settings, *, client: Optional[Any] = None) -> EmbeddingClient:
    """Instantiate the embedding client for the configured provider."""
    provider_id = _provider_id(settings)
    if provider_id != "openai":
        raise LLMCapabilityError(f"Provider '{provider_id}' does not support embeddings")
    sdk_client = client or openai_provider.build_openai_client(
        api_key=settings.openai_api_key, base_url=settings.openai_base_url
    )
    return openai_provider.OpenAIEmbeddingClient(
        sdk_client,
        settings.embedding_model or openai_provider.DEFAULT_EMBEDDING_MODEL,
        settings.metadata_mode,
        retry_policy=settings.retry_policy(),
    )


def build_chat_client(settings: Settings, *, client: Optional[Any] = None) -> ChatClient:
    """Instantiate the chat client for the configured provider."""
    provider_id = _provider_id(settings)
    if provider_id == "anthropic":
        sdk_client = client or anthropic_provider.build_anthropic_client(api_key=settings.anthropic_api_key)
        return anthropic_provider.AnthropicChatClient(
            sdk_client,
            settings.chat_model or anthropic_provider.DEFAULT_CHAT_MODEL,
            retry_policy=settings.retry_policy(),
        )
    sdk_client = client or openai_provider.build_openai_client(
        api_key=settings.openai_api_key, base_url=settings.openai_base_url
    )
    return openai_provider.OpenAIChatClient(
        sdk_client,
        settings.chat_model or openai_provider.DEFAULT_CHAT_MODEL,
        retry_policy=settings.retry_policy(),
    )
