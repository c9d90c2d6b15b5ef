"""Documents and metadata-aware content formatting for embedding and inference."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from llmclient.llm.errors import LLMConfigurationError


class MetadataMode(str, Enum):
    """Which document metadata is folded into the formatted text."""

    ALL = "ALL"
    EMBED = "EMBED"
    INFERENCE = "INFERENCE"
    NONE = "NONE"

    @classmethod
    def parse(cls, value: Any) -> "MetadataMode":
        """Resolve a mode from an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError as exc:
            allowed = ", ".join(m.value for m in cls)
            raise LLMConfigurationError(f"Unknown metadata mode '{value}'. Supported: {allowed}") from exc


@dataclass(frozen=True)
class DefaultContentFormatter:
    """Render document content with a filtered ``key: value`` metadata header."""

    metadata_template: str = "{key}: {value}"
    metadata_separator: str = "\n"
    text_template: str = "{metadata_string}\n\n{content}"
    excluded_inference_metadata_keys: FrozenSet[str] = frozenset()
    excluded_embed_metadata_keys: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "excluded_inference_metadata_keys", frozenset(self.excluded_inference_metadata_keys))
        object.__setattr__(self, "excluded_embed_metadata_keys", frozenset(self.excluded_embed_metadata_keys))

    def _filtered(self, metadata: Dict[str, Any], mode: MetadataMode) -> Dict[str, Any]:
        if mode == MetadataMode.ALL:
            return dict(metadata)
        if mode == MetadataMode.NONE:
            return {}
        excluded: Iterable[str]
        if mode == MetadataMode.EMBED:
            excluded = self.excluded_embed_metadata_keys
        else:
            excluded = self.excluded_inference_metadata_keys
        return {k: v for k, v in metadata.items() if k not in excluded}

    def format(self, document: "Document", mode: MetadataMode) -> str:
        metadata = self._filtered(document.metadata, mode)
        metadata_string = self.metadata_separator.join(
            self.metadata_template.format(key=key, value=value) for key, value in metadata.items()
        )
        return self.text_template.format(metadata_string=metadata_string, content=document.content)


DEFAULT_CONTENT_FORMATTER = DefaultContentFormatter()


@dataclass(frozen=True)
class Document:
    """Text content plus metadata, with an id."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    content_formatter: DefaultContentFormatter = DEFAULT_CONTENT_FORMATTER

    def __post_init__(self) -> None:
        if self.content is None:
            raise LLMConfigurationError("Document content must not be None")
        object.__setattr__(self, "metadata", dict(self.metadata or {}))

    def get_formatted_content(self, mode: Optional[MetadataMode] = MetadataMode.ALL) -> str:
        if mode is None:
            raise LLMConfigurationError("metadata_mode must not be None")
        return self.content_formatter.format(self, MetadataMode.parse(mode))
