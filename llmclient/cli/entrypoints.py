"""Primary CLI entrypoints for one-shot embedding and chat calls."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from llmclient.core.config import load_settings
from llmclient.llm.errors import RETRYABLE_PROVIDER_ERRORS, LLMProviderError
from llmclient.llm.runtime import build_chat_client, build_embedding_client
from llmclient.llm.types import ChatRequest, EmbeddingRequest


def _settings(args: argparse.Namespace):
    settings = load_settings(Path(args.config) if args.config else None)
    if args.provider:
        settings = replace(settings, provider=args.provider)
    return settings


def cmd_embed(args: argparse.Namespace) -> int:
    """Embed one or more texts and print the vectors as JSON.

    Args:
        args (argparse.Namespace): Parsed CLI args.

    Returns:
        int: Process return code.
    """
    try:
        settings = _settings(args)
        if args.model:
            settings = replace(settings, embedding_model=args.model)
        client = build_embedding_client(settings)
    except LLMProviderError as exc:
        print(f"Configuration error: {exc}")
        return 2
    try:
        response = client.call(EmbeddingRequest(instructions=tuple(args.text)))
    except RETRYABLE_PROVIDER_ERRORS as exc:
        print(f"Provider error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    out = {
        "model": response.metadata.model or client.model,
        "usage": response.metadata.as_dict(),
        "embeddings": [
            {"index": item.index, "dimensions": len(item.output), "vector": list(item.output)}
            for item in response.embeddings
        ],
    }
    print(json.dumps(out, ensure_ascii=False))
    return 0


def cmd_chat(args: argparse.Namespace) -> int:
    """Send one prompt and print the first generation as JSON.

    Args:
        args (argparse.Namespace): Parsed CLI args.

    Returns:
        int: Process return code.
    """
    try:
        settings = _settings(args)
        if args.model:
            settings = replace(settings, chat_model=args.model)
        client = build_chat_client(settings)
    except LLMProviderError as exc:
        print(f"Configuration error: {exc}")
        return 2
    try:
        response = client.call(ChatRequest.from_text(args.prompt, system=args.system))
    except RETRYABLE_PROVIDER_ERRORS as exc:
        print(f"Provider error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    meta = response.generation_metadata
    usage = meta.usage
    first = response.generations[0] if response.generations else None
    out = {
        "text": first.text if first is not None else "",
        "finish_reason": first.metadata.finish_reason if first is not None and first.metadata else None,
        "model": meta.model or client.model,
        "usage": {
            "prompt_tokens": usage.prompt_tokens if usage else 0,
            "generation_tokens": usage.generation_tokens if usage else 0,
            "total_tokens": usage.total if usage else 0,
        },
    }
    print(json.dumps(out, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    p = argparse.ArgumentParser(prog="llmclient")
    sub = p.add_subparsers(dest="cmd", required=True)

    e = sub.add_parser("embed", help="Embed one or more texts")
    e.add_argument("--text", type=str, action="append", required=True)
    e.add_argument("--model", type=str, default=None)
    e.add_argument("--provider", type=str, default=None)
    e.add_argument("--config", type=str, default=None)
    e.set_defaults(func=cmd_embed)

    c = sub.add_parser("chat", help="Send one chat prompt")
    c.add_argument("--prompt", type=str, required=True)
    c.add_argument("--system", type=str, default=None)
    c.add_argument("--model", type=str, default=None)
    c.add_argument("--provider", type=str, default=None)
    c.add_argument("--config", type=str, default=None)
    c.set_defaults(func=cmd_chat)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for llmclient.

    Returns:
        int: Process return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
