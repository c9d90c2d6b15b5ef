"""Unit tests for provider-agnostic response and metadata types."""

from __future__ import annotations

import dataclasses
from datetime import timedelta

import pytest

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
    PromptFilterMetadata,
    PromptMetadata,
    RateLimit,
    Usage,
    parse_reset_duration,
)


def _generations() -> list[Generation]:
    return [
        Generation(text="first", metadata=ChatGenerationMetadata(finish_reason="stop")),
        Generation(text="second"),
        Generation(text="third"),
    ]


def test_chat_response_preserves_generation_order_and_length() -> None:
    gens = _generations()
    response = ChatResponse(gens)
    assert response.generation.text == "first"
    assert list(response.generations) == gens
    assert len(response.generations) == 3


def test_chat_response_copies_generations_defensively() -> None:
    gens = _generations()
    response = ChatResponse(gens)
    gens.append(Generation(text="late"))
    gens[0] = Generation(text="replaced")
    assert [g.text for g in response.generations] == ["first", "second", "third"]
    assert isinstance(response.generations, tuple)


def test_chat_response_first_generation_on_empty_raises_index_error() -> None:
    with pytest.raises(IndexError):
        _ = ChatResponse([]).generation


def test_chat_response_without_metadata_is_absent_but_behaves_empty() -> None:
    response = ChatResponse(_generations())
    assert response.metadata is None
    assert response.has_generation_metadata is False
    assert response.generation_metadata.is_empty
    assert response.generation_metadata == GenerationMetadata()

    explicit = ChatResponse(_generations(), metadata=GenerationMetadata())
    assert explicit.has_generation_metadata is True
    assert explicit.generation_metadata.is_empty


def test_prompt_metadata_defaults_empty_until_attached() -> None:
    response = ChatResponse(_generations())
    assert len(response.get_prompt_metadata()) == 0
    assert response.prompt_metadata is None

    pm = PromptMetadata((PromptFilterMetadata(prompt_index=0, content_filter_metadata={"hate": "safe"}),))
    attached = response.with_prompt_metadata(pm)
    assert attached.get_prompt_metadata() is pm
    assert response.prompt_metadata is None


def test_with_raw_response_returns_new_instance() -> None:
    response = ChatResponse(_generations())
    raw = {"id": "chatcmpl-1"}
    updated = response.with_raw_response(raw)
    assert updated is not response
    assert updated.raw_response is raw
    assert response.raw_response is None
    assert updated.generations == response.generations


def test_chat_response_is_frozen() -> None:
    response = ChatResponse(_generations())
    with pytest.raises(dataclasses.FrozenInstanceError):
        response.raw_response = "x"  # type: ignore[misc]


def test_generation_properties_are_read_only_copy() -> None:
    source = {"role": "assistant"}
    generation = Generation(text="hi", properties=source)
    source["role"] = "user"
    assert generation.properties == {"role": "assistant"}
    with pytest.raises(TypeError):
        generation.properties["role"] = "system"  # type: ignore[index]


def test_prompt_metadata_find_by_prompt_index() -> None:
    pm = PromptMetadata(
        [
            PromptFilterMetadata(prompt_index=0, content_filter_metadata="a"),
            PromptFilterMetadata(prompt_index=2, content_filter_metadata="b"),
        ]
    )
    assert pm.find_by_prompt_index(2).content_filter_metadata == "b"
    assert pm.find_by_prompt_index(1) is None
    assert [f.prompt_index for f in pm] == [0, 2]


def test_usage_total_prefers_reported_value() -> None:
    assert Usage(prompt_tokens=3, generation_tokens=4).total == 7
    assert Usage(prompt_tokens=3, generation_tokens=4, total_tokens=9).total == 9


def test_parse_reset_duration_formats() -> None:
    assert parse_reset_duration("6m0s") == timedelta(minutes=6)
    assert parse_reset_duration("1s") == timedelta(seconds=1)
    assert parse_reset_duration("20ms") == timedelta(milliseconds=20)
    assert parse_reset_duration("1h2m3.5s") == timedelta(hours=1, minutes=2, seconds=3.5)
    assert parse_reset_duration("") is None
    assert parse_reset_duration("soon") is None


def test_rate_limit_from_headers() -> None:
    headers = {
        "x-ratelimit-limit-requests": "5000",
        "x-ratelimit-remaining-requests": "4999",
        "x-ratelimit-reset-requests": "12ms",
        "x-ratelimit-limit-tokens": "160000",
        "x-ratelimit-remaining-tokens": "159970",
        "x-ratelimit-reset-tokens": "6m0s",
    }
    limit = RateLimit.from_headers(headers)
    assert limit is not None
    assert limit.requests_limit == 5000
    assert limit.requests_remaining == 4999
    assert limit.requests_reset == timedelta(milliseconds=12)
    assert limit.tokens_limit == 160000
    assert limit.tokens_remaining == 159970
    assert limit.tokens_reset == timedelta(minutes=6)


def test_rate_limit_from_headers_absent() -> None:
    assert RateLimit.from_headers({}) is None
    assert RateLimit.from_headers({"content-type": "application/json"}) is None


def test_embedding_response_result_and_metadata() -> None:
    embeddings = [Embedding(output=[0.1, 0.2], index=0), Embedding(output=[0.3, 0.4], index=1)]
    response = EmbeddingResponse(embeddings, EmbeddingResponseMetadata(model="m", prompt_tokens=4, total_tokens=4))
    assert response.result.output == (0.1, 0.2)
    assert [e.index for e in response.results] == [0, 1]
    assert response.metadata.as_dict() == {
        "model": "m",
        "prompt-tokens": 4,
        "completion-tokens": 0,
        "total-tokens": 4,
    }
    assert EmbeddingResponse(()).result is None


def test_chat_request_from_text_with_system() -> None:
    req = ChatRequest.from_text("hi", system="be brief", temperature=0.2)
    assert [(m.role, m.content) for m in req.messages] == [("system", "be brief"), ("user", "hi")]
    assert req.temperature == 0.2


def test_embedding_request_wraps_bare_string() -> None:
    assert EmbeddingRequest("hello").instructions == ("hello",)
    assert EmbeddingRequest(["a", "b"]).instructions == ("a", "b")
