"""Provider-agnostic request and response datatypes for LLM calls."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import timedelta
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Usage:
    """Token accounting reported by a provider for one call."""

    prompt_tokens: int = 0
    generation_tokens: int = 0
    total_tokens: Optional[int] = None

    @property
    def total(self) -> int:
        if self.total_tokens is not None:
            return self.total_tokens
        return self.prompt_tokens + self.generation_tokens


_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_reset_duration(value: Any) -> Optional[timedelta]:
    """Parse OpenAI reset durations such as ``6m0s``, ``1s`` or ``20ms``."""
    text = str(value or "").strip()
    if not text:
        return None
    parts = _DURATION_PART.findall(text)
    if not parts or "".join(num + unit for num, unit in parts) != text:
        return None
    seconds = sum(float(num) * _DURATION_UNITS[unit] for num, unit in parts)
    return timedelta(seconds=seconds)


def _header_int(headers: Mapping[str, Any], key: str) -> Optional[int]:
    raw = headers.get(key)
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class RateLimit:
    """Request/token rate-limit window reported by a provider."""

    requests_limit: Optional[int] = None
    requests_remaining: Optional[int] = None
    requests_reset: Optional[timedelta] = None
    tokens_limit: Optional[int] = None
    tokens_remaining: Optional[int] = None
    tokens_reset: Optional[timedelta] = None

    @classmethod
    def from_headers(cls, headers: Optional[Mapping[str, Any]]) -> Optional["RateLimit"]:
        """Build a rate limit from ``x-ratelimit-*`` headers, or None if absent."""
        if not headers:
            return None
        limit = cls(
            requests_limit=_header_int(headers, "x-ratelimit-limit-requests"),
            requests_remaining=_header_int(headers, "x-ratelimit-remaining-requests"),
            requests_reset=parse_reset_duration(headers.get("x-ratelimit-reset-requests")),
            tokens_limit=_header_int(headers, "x-ratelimit-limit-tokens"),
            tokens_remaining=_header_int(headers, "x-ratelimit-remaining-tokens"),
            tokens_reset=parse_reset_duration(headers.get("x-ratelimit-reset-tokens")),
        )
        if limit == cls():
            return None
        return limit


@dataclass(frozen=True)
class GenerationMetadata:
    """Common provider metadata describing API use for one response."""

    model: Optional[str] = None
    usage: Optional[Usage] = None
    rate_limit: Optional[RateLimit] = None
    provider: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self == GenerationMetadata()


@dataclass(frozen=True)
class PromptFilterMetadata:
    """Content-filter result for one prompt in the request."""

    prompt_index: int
    content_filter_metadata: Any = None


@dataclass(frozen=True)
class PromptMetadata:
    """Prompt-processing metadata returned alongside a chat response."""

    filters: Tuple[PromptFilterMetadata, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(self.filters))

    def __iter__(self) -> Iterator[PromptFilterMetadata]:
        return iter(self.filters)

    def __len__(self) -> int:
        return len(self.filters)

    def find_by_prompt_index(self, prompt_index: int) -> Optional[PromptFilterMetadata]:
        for item in self.filters:
            if item.prompt_index == prompt_index:
                return item
        return None


@dataclass(frozen=True)
class ChatGenerationMetadata:
    """Per-generation metadata such as the finish reason."""

    finish_reason: Optional[str] = None
    content_filter_metadata: Any = None


@dataclass(frozen=True)
class Generation:
    """One candidate output produced by the model."""

    text: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    metadata: Optional[ChatGenerationMetadata] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties or {})))


@dataclass(frozen=True)
class ChatResponse:
    """Normalized chat-completion response.

    ``generations`` is copied into a tuple at construction. Optional parts stay
    ``None`` until supplied; ``with_prompt_metadata`` and ``with_raw_response``
    return a new response rather than mutating this one.
    """

    generations: Tuple[Generation, ...]
    metadata: Optional[GenerationMetadata] = None
    prompt_metadata: Optional[PromptMetadata] = None
    raw_response: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "generations", tuple(self.generations))

    @property
    def generation(self) -> Generation:
        """First generation. Raises IndexError when the response is empty."""
        return self.generations[0]

    @property
    def has_generation_metadata(self) -> bool:
        return self.metadata is not None

    @property
    def generation_metadata(self) -> GenerationMetadata:
        if self.metadata is None:
            return GenerationMetadata()
        return self.metadata

    def get_prompt_metadata(self) -> PromptMetadata:
        if self.prompt_metadata is None:
            return PromptMetadata()
        return self.prompt_metadata

    def with_prompt_metadata(self, prompt_metadata: Optional[PromptMetadata]) -> "ChatResponse":
        return replace(self, prompt_metadata=prompt_metadata)

    def with_raw_response(self, raw_response: Any) -> "ChatResponse":
        return replace(self, raw_response=raw_response)


@dataclass(frozen=True)
class Message:
    """One chat turn."""

    role: str
    content: str


@dataclass(frozen=True)
class ChatRequest:
    """Structured chat-completion request."""

    messages: Tuple[Message, ...]
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))

    @classmethod
    def from_text(cls, user_text: str, *, system: Optional[str] = None, **kwargs: Any) -> "ChatRequest":
        messages = []
        if system:
            messages.append(Message(role="system", content=system))
        messages.append(Message(role="user", content=user_text))
        return cls(messages=tuple(messages), **kwargs)


@dataclass(frozen=True)
class Embedding:
    """A vector plus its position in the originating batch."""

    output: Tuple[float, ...]
    index: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "output", tuple(float(x) for x in self.output))


@dataclass(frozen=True)
class EmbeddingResponseMetadata:
    """Usage metadata for one embeddings call."""

    model: Optional[str] = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "prompt-tokens": self.prompt_tokens,
            "completion-tokens": self.completion_tokens,
            "total-tokens": self.total_tokens,
        }


@dataclass(frozen=True)
class EmbeddingRequest:
    """Structured embeddings request."""

    instructions: Tuple[str, ...]

    def __post_init__(self) -> None:
        instructions = self.instructions
        if isinstance(instructions, str):
            instructions = (instructions,)
        object.__setattr__(self, "instructions", tuple(instructions))


@dataclass(frozen=True)
class EmbeddingResponse:
    """Normalized embeddings response."""

    embeddings: Tuple[Embedding, ...]
    metadata: EmbeddingResponseMetadata = field(default_factory=EmbeddingResponseMetadata)

    def __post_init__(self) -> None:
        object.__setattr__(self, "embeddings", tuple(self.embeddings))

    @property
    def result(self) -> Optional[Embedding]:
        return self.embeddings[0] if self.embeddings else None

    @property
    def results(self) -> Sequence[Embedding]:
        return self.embeddings
