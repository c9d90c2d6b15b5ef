"""Provider clients, retry policy, and provider-agnostic response types."""

from llmclient.llm.document import DefaultContentFormatter, Document, MetadataMode
from llmclient.llm.errors import (
    LLMCapabilityError,
    LLMConfigurationError,
    LLMProviderError,
    is_retryable_provider_error,
)
from llmclient.llm.interfaces import ChatClient, EmbeddingClient, ProviderCapabilities
from llmclient.llm.providers import AnthropicChatClient, OpenAIChatClient, OpenAIEmbeddingClient
from llmclient.llm.retry import RetryPolicy
from llmclient.llm.runtime import build_chat_client, build_embedding_client
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
    Message,
    PromptFilterMetadata,
    PromptMetadata,
    RateLimit,
    Usage,
)

__all__ = [
    "LLMProviderError",
    "LLMConfigurationError",
    "LLMCapabilityError",
    "is_retryable_provider_error",
    "ProviderCapabilities",
    "ChatClient",
    "EmbeddingClient",
    "OpenAIEmbeddingClient",
    "OpenAIChatClient",
    "AnthropicChatClient",
    "RetryPolicy",
    "Document",
    "MetadataMode",
    "DefaultContentFormatter",
    "Usage",
    "RateLimit",
    "GenerationMetadata",
    "PromptFilterMetadata",
    "PromptMetadata",
    "ChatGenerationMetadata",
    "Generation",
    "ChatResponse",
    "Message",
    "ChatRequest",
    "Embedding",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "EmbeddingResponseMetadata",
    "build_chat_client",
    "build_embedding_client",
]
