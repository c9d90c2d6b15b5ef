"""Bounded exponential-backoff retry policy for provider calls."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, List, TypeVar

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from llmclient.core.logging_utils import log_event
from llmclient.llm.errors import LLMConfigurationError, is_retryable_provider_error

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_INITIAL_DELAY_MS = 2000
DEFAULT_MULTIPLIER = 5.0
DEFAULT_MAX_DELAY_MS = 3 * 60_000


@dataclass(frozen=True)
class RetryPolicy:
    """Deterministic retry policy: attempt cap, exponential delay, error filter.

    The delay after failed attempt ``n`` is
    ``min(initial_delay_ms * multiplier ** (n - 1), max_delay_ms)``. Exceptions
    for which ``retry_on`` returns False propagate immediately; once attempts are
    exhausted the last exception is re-raised unchanged. Sleeping blocks the
    calling thread.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS
    multiplier: float = DEFAULT_MULTIPLIER
    max_delay_ms: float = DEFAULT_MAX_DELAY_MS
    retry_on: Callable[[BaseException], bool] = is_retryable_provider_error
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if int(self.max_attempts) < 1:
            raise LLMConfigurationError("max_attempts must be >= 1")
        if self.initial_delay_ms < 0:
            raise LLMConfigurationError("initial_delay_ms must be >= 0")
        if self.multiplier < 1:
            raise LLMConfigurationError("multiplier must be >= 1")
        if self.max_delay_ms < self.initial_delay_ms:
            raise LLMConfigurationError("max_delay_ms must be >= initial_delay_ms")

    def delays(self) -> List[float]:
        """Backoff schedule in seconds, one entry per retry."""
        initial = self.initial_delay_ms / 1000.0
        cap = self.max_delay_ms / 1000.0
        return [min(initial * self.multiplier**n, cap) for n in range(int(self.max_attempts) - 1)]

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else None
        log_event(
            "llm_retry",
            {
                "attempt": retry_state.attempt_number,
                "max_attempts": int(self.max_attempts),
                "delay_s": delay,
                "error": type(exc).__name__ if exc is not None else None,
            },
            level="warning",
        )

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(int(self.max_attempts)),
            wait=wait_exponential(
                multiplier=self.initial_delay_ms / 1000.0,
                exp_base=self.multiplier,
                max=self.max_delay_ms / 1000.0,
            ),
            retry=retry_if_exception(self.retry_on),
            sleep=self.sleep,
            before_sleep=self._before_sleep,
            reraise=True,
        )

    def execute(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``fn(*args, **kwargs)`` under this policy and return its result."""
        return self._retrying()(fn, *args, **kwargs)
