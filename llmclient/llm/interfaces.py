"""Client interfaces and capability descriptors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

from llmclient.llm.document import Document, MetadataMode
from llmclient.llm.errors import LLMConfigurationError
from llmclient.llm.types import ChatRequest, ChatResponse, EmbeddingRequest, EmbeddingResponse

KNOWN_EMBEDDING_DIMENSIONS: Dict[str, int] = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}


@dataclass(frozen=True)
class ProviderCapabilities:
    """Capability flags for a provider implementation."""

    supports_chat: bool = True
    supports_embeddings: bool = False


class ChatClient(Protocol):
    """Protocol for chat-completion clients."""

    name: str
    capabilities: ProviderCapabilities

    def call(self, request: ChatRequest) -> ChatResponse:
        """Run one chat-completion request."""


class EmbeddingClient(ABC):
    """Base class for embedding clients.

    Subclasses implement ``call``; the text and document helpers here are
    expressed in terms of it.
    """

    name: str = "embedding"
    capabilities = ProviderCapabilities(supports_chat=False, supports_embeddings=True)

    def __init__(self, *, model: str, metadata_mode: MetadataMode) -> None:
        if model is None:
            raise LLMConfigurationError("Model must not be None")
        if metadata_mode is None:
            raise LLMConfigurationError("metadata_mode must not be None")
        self._model = model
        self._metadata_mode = MetadataMode.parse(metadata_mode)
        self._dimensions: Optional[int] = None

    @property
    def model(self) -> str:
        return self._model

    @property
    def metadata_mode(self) -> MetadataMode:
        return self._metadata_mode

    @abstractmethod
    def call(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """Embed every instruction in ``request``."""

    def embed(self, text: str) -> List[float]:
        """Embed a single text and return its vector (empty if nothing came back)."""
        result = self.call(EmbeddingRequest(instructions=(text,))).result
        return list(result.output) if result is not None else []

    def embed_many(self, texts: Sequence[str]) -> List[List[float]]:
        response = self.call(EmbeddingRequest(instructions=texts))
        return [list(item.output) for item in response.embeddings]

    def embed_document(self, document: Optional[Document]) -> List[float]:
        """Embed a document's formatted content using the configured metadata mode."""
        if document is None:
            raise LLMConfigurationError("Document must not be None")
        return self.embed(document.get_formatted_content(self.metadata_mode))

    def embed_for_response(self, texts: Sequence[str]) -> EmbeddingResponse:
        return self.call(EmbeddingRequest(instructions=texts))

    def dimensions(self) -> int:
        """Vector size for the configured model, measuring one embedding if unknown."""
        known = KNOWN_EMBEDDING_DIMENSIONS.get(self._model)
        if known is not None:
            return known
        if self._dimensions is None:
            self._dimensions = len(self.embed("Test String"))
        return self._dimensions
