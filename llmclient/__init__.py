"""llmclient package exports for provider clients and response types."""

from .llm import (
    ChatRequest,
    ChatResponse,
    Document,
    EmbeddingRequest,
    EmbeddingResponse,
    MetadataMode,
    OpenAIEmbeddingClient,
    RetryPolicy,
    build_chat_client,
    build_embedding_client,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Document",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "MetadataMode",
    "OpenAIEmbeddingClient",
    "RetryPolicy",
    "build_chat_client",
    "build_embedding_client",
]
