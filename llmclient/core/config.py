"""Configuration loader for llmclient. Builds Settings from a TOML file, a .env file, and environment variables."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from llmclient.llm.document import MetadataMode
from llmclient.llm.retry import (
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MULTIPLIER,
    RetryPolicy,
)

DEFAULT_CONFIG_PATH = Path("llmclient.toml")
DOTENV_PATH = Path(".env")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for provider clients.

    Attributes:
        provider: Provider id, ``openai`` or ``anthropic``.
        openai_api_key: API key for OpenAI (falls back to the SDK's env lookup when empty).
        openai_base_url: Optional OpenAI-compatible base URL.
        anthropic_api_key: API key for Anthropic.
        chat_model: Chat completion model name.
        embedding_model: Embedding model name.
        metadata_mode: Metadata folded into document text before embedding.
        retry_max_attempts: Attempt cap for provider calls.
        retry_initial_delay_ms: Delay after the first failed attempt.
        retry_multiplier: Growth factor between consecutive delays.
        retry_max_delay_ms: Upper bound on any single delay.
    """

    provider: str = "openai"
    openai_api_key: str = ""
    openai_base_url: str = ""
    anthropic_api_key: str = ""
    chat_model: str = ""
    embedding_model: str = ""
    metadata_mode: MetadataMode = MetadataMode.EMBED
    retry_max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS
    retry_multiplier: float = DEFAULT_MULTIPLIER
    retry_max_delay_ms: float = DEFAULT_MAX_DELAY_MS

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            initial_delay_ms=self.retry_initial_delay_ms,
            multiplier=self.retry_multiplier,
            max_delay_ms=self.retry_max_delay_ms,
        )


def load_config(path: Path | None) -> Dict[str, Any]:
    """Load a TOML config file and return the llmclient section or top-level dict."""
    if not path or not path.exists():
        return {}
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and "llmclient" in data and isinstance(data["llmclient"], dict):
        return data["llmclient"]
    return data or {}


def load_env(path: Path) -> None:
    """Load environment variables from a .env-style file without overriding existing ones."""
    if not path.exists():
        return
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _env_or_config(env: Mapping[str, str], config: Mapping[str, Any], env_key: str, config_key: str, default: Any) -> Any:
    if env_key in env and env[env_key] != "":
        return env[env_key]
    if config_key in config and config[config_key] is not None:
        return config[config_key]
    return default


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def build_settings(config: Mapping[str, Any], env: Mapping[str, str]) -> Settings:
    """Build settings with env overrides applied over file config."""

    def value(env_key: str, config_key: str, default: Any) -> Any:
        return _env_or_config(env, config, env_key, config_key, default)

    return Settings(
        provider=str(value("LLM_PROVIDER", "provider", "openai")).strip().lower() or "openai",
        openai_api_key=str(value("OPENAI_API_KEY", "openai_api_key", "")).strip(),
        openai_base_url=str(value("OPENAI_BASE_URL", "openai_base_url", "")).strip(),
        anthropic_api_key=str(value("ANTHROPIC_API_KEY", "anthropic_api_key", "")).strip(),
        chat_model=str(value("CHAT_MODEL", "chat_model", "")).strip(),
        embedding_model=str(value("EMBEDDING_MODEL", "embedding_model", "")).strip(),
        metadata_mode=MetadataMode.parse(value("EMBEDDING_METADATA_MODE", "metadata_mode", "EMBED")),
        retry_max_attempts=_coerce_int(
            value("LLM_RETRY_MAX_ATTEMPTS", "retry_max_attempts", DEFAULT_MAX_ATTEMPTS), DEFAULT_MAX_ATTEMPTS
        ),
        retry_initial_delay_ms=_coerce_float(
            value("LLM_RETRY_INITIAL_DELAY_MS", "retry_initial_delay_ms", DEFAULT_INITIAL_DELAY_MS),
            DEFAULT_INITIAL_DELAY_MS,
        ),
        retry_multiplier=_coerce_float(
            value("LLM_RETRY_MULTIPLIER", "retry_multiplier", DEFAULT_MULTIPLIER), DEFAULT_MULTIPLIER
        ),
        retry_max_delay_ms=_coerce_float(
            value("LLM_RETRY_MAX_DELAY_MS", "retry_max_delay_ms", DEFAULT_MAX_DELAY_MS), DEFAULT_MAX_DELAY_MS
        ),
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load runtime settings from config file, environment variables, and defaults.

    Args:
        config_path (Path | None): Path to the TOML configuration file.

    Returns:
        Settings: Resolved settings.
    """
    load_env(DOTENV_PATH)
    cfg_path = config_path or Path(os.getenv("LLMCLIENT_CONFIG", str(DEFAULT_CONFIG_PATH)))
    return build_settings(load_config(cfg_path), os.environ)
