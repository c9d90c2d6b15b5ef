"""Errors raised by the LLM client layer and retryable-error classification."""

from __future__ import annotations

import anthropic
import openai


class LLMProviderError(RuntimeError):
    """Base error for client-layer failures."""


class LLMConfigurationError(LLMProviderError, ValueError):
    """Raised when a client is given an invalid or missing argument."""


class LLMCapabilityError(LLMProviderError):
    """Raised when a selected provider cannot serve a requested capability."""


RETRYABLE_PROVIDER_ERRORS: tuple[type[BaseException], ...] = (
    openai.APIError,
    anthropic.APIError,
)


def is_retryable_provider_error(exc: BaseException) -> bool:
    """Return True when ``exc`` is a provider API failure eligible for retry."""
    return isinstance(exc, RETRYABLE_PROVIDER_ERRORS)
