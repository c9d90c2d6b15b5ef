"""Concrete provider clients."""

from .anthropic_provider import AnthropicChatClient
from .openai_provider import OpenAIChatClient, OpenAIEmbeddingClient

__all__ = [
    "AnthropicChatClient",
    "OpenAIChatClient",
    "OpenAIEmbeddingClient",
]
