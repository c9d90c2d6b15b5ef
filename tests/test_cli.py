"""CLI tests for the embed and chat commands."""

from __future__ import annotations

import json
from types import SimpleNamespace

import openai

from llmclient.cli import entrypoints
from llmclient.core.config import Settings
from llmclient.llm.providers.openai_provider import OpenAIChatClient, OpenAIEmbeddingClient
from llmclient.llm.retry import RetryPolicy
from tests.fakes import FakeRawResponse, api_request, fake_openai_client


def test_parser_accepts_repeated_text_flags() -> None:
    parser = entrypoints.build_parser()
    args = parser.parse_args(["embed", "--text", "a", "--text", "b", "--model", "text-embedding-3-small"])
    assert args.text == ["a", "b"]
    assert args.model == "text-embedding-3-small"
    assert args.func is entrypoints.cmd_embed


def test_cmd_embed_prints_vectors(monkeypatch, capsys) -> None:
    body = SimpleNamespace(
        model="text-embedding-3-small",
        data=[SimpleNamespace(embedding=[0.25, 0.5], index=0), SimpleNamespace(embedding=[1.0, 0.0], index=1)],
        usage=SimpleNamespace(prompt_tokens=4, completion_tokens=0, total_tokens=4),
    )
    fake = fake_openai_client(embeddings=[body])
    captured = {}

    def _fake_build(settings):
        captured["settings"] = settings
        return OpenAIEmbeddingClient(fake, settings.embedding_model, retry_policy=RetryPolicy(sleep=lambda _: None))

    monkeypatch.setattr(entrypoints, "load_settings", lambda path=None: Settings())
    monkeypatch.setattr(entrypoints, "build_embedding_client", _fake_build)

    rc = entrypoints.main(["embed", "--text", "a", "--text", "b", "--model", "text-embedding-3-small"])

    assert rc == 0
    assert captured["settings"].embedding_model == "text-embedding-3-small"
    out = json.loads(capsys.readouterr().out)
    assert out["model"] == "text-embedding-3-small"
    assert out["usage"]["total-tokens"] == 4
    assert out["embeddings"][1] == {"index": 1, "dimensions": 2, "vector": [1.0, 0.0]}


def test_cmd_chat_prints_first_generation(monkeypatch, capsys) -> None:
    completion = SimpleNamespace(
        id="chatcmpl-1",
        model="gpt-4o-mini",
        choices=[SimpleNamespace(finish_reason="stop", message=SimpleNamespace(role="assistant", content="Hi!"))],
        usage=SimpleNamespace(prompt_tokens=3, completion_tokens=2, total_tokens=5),
    )
    fake = fake_openai_client(chat=[FakeRawResponse(completion)])
    monkeypatch.setattr(entrypoints, "load_settings", lambda path=None: Settings())
    monkeypatch.setattr(
        entrypoints,
        "build_chat_client",
        lambda settings: OpenAIChatClient(fake, settings.chat_model or "gpt-4o-mini"),
    )

    rc = entrypoints.main(["chat", "--prompt", "hello", "--system", "be brief"])

    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {
        "text": "Hi!",
        "finish_reason": "stop",
        "model": "gpt-4o-mini",
        "usage": {"prompt_tokens": 3, "generation_tokens": 2, "total_tokens": 5},
    }
    sent = fake.chat.completions.with_raw_response.create.calls[0]
    assert sent["messages"][0] == {"role": "system", "content": "be brief"}


def test_cmd_embed_reports_configuration_error(monkeypatch, capsys) -> None:
    monkeypatch.setattr(entrypoints, "load_settings", lambda path=None: Settings(provider="anthropic"))
    rc = entrypoints.main(["embed", "--text", "a"])
    assert rc == 2
    assert "does not support embeddings" in capsys.readouterr().out


def test_cmd_embed_stdout_stays_json_when_a_retry_is_logged(monkeypatch, capsys) -> None:
    body = SimpleNamespace(
        model="text-embedding-ada-002",
        data=[SimpleNamespace(embedding=[0.5], index=0)],
        usage=SimpleNamespace(prompt_tokens=1, completion_tokens=0, total_tokens=1),
    )
    fake = fake_openai_client(embeddings=[openai.APIConnectionError(request=api_request()), body])
    monkeypatch.setattr(entrypoints, "load_settings", lambda path=None: Settings())
    monkeypatch.setattr(
        entrypoints,
        "build_embedding_client",
        lambda settings: OpenAIEmbeddingClient(fake, retry_policy=RetryPolicy(sleep=lambda _: None)),
    )

    rc = entrypoints.main(["embed", "--text", "a"])

    assert rc == 0
    captured = capsys.readouterr()
    out = json.loads(captured.out)
    assert out["embeddings"] == [{"index": 0, "dimensions": 1, "vector": [0.5]}]
    assert '"llm_retry"' in captured.err


def test_cmd_chat_reports_exhausted_provider_error(monkeypatch, capsys) -> None:
    fake = fake_openai_client(chat=[openai.APIConnectionError(request=api_request("/v1/chat/completions"))])
    monkeypatch.setattr(entrypoints, "load_settings", lambda path=None: Settings())
    monkeypatch.setattr(
        entrypoints,
        "build_chat_client",
        lambda settings: OpenAIChatClient(fake, retry_policy=RetryPolicy(max_attempts=1)),
    )

    rc = entrypoints.main(["chat", "--prompt", "hello"])

    assert rc == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Provider error: APIConnectionError")


def test_cmd_embed_reports_exhausted_provider_error(monkeypatch, capsys) -> None:
    fake = fake_openai_client(embeddings=[openai.APIConnectionError(request=api_request())])
    monkeypatch.setattr(entrypoints, "load_settings", lambda path=None: Settings())
    monkeypatch.setattr(
        entrypoints,
        "build_embedding_client",
        lambda settings: OpenAIEmbeddingClient(fake, retry_policy=RetryPolicy(max_attempts=1)),
    )

    rc = entrypoints.main(["embed", "--text", "a"])

    assert rc == 1
    assert capsys.readouterr().out == ""
