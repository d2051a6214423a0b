"""Retry wrapper for transient backend failures."""

import time
from collections.abc import Callable
from typing import Any

import duckdb
from loguru import logger
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from statkit.errors import TransientBackendError
from statkit.settings import RETRY_BASE_INTERVAL, RETRY_MAX_ATTEMPTS, RETRY_MAX_INTERVAL

# DuckDB raises TransactionException on write-write conflicts.
DEFAULT_RETRYABLE: tuple[type[BaseException], ...] = (TransientBackendError, duckdb.TransactionException)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    wait = state.next_action.sleep if state.next_action else 0
    logger.warning("Attempt {} failed ({}), retrying in {:.2f}s", state.attempt_number, exc, wait)


class RetryPolicy:
    """Bounded retry with exponential backoff on classified error kinds."""

    def __init__(
        self,
        retryable: tuple[type[BaseException], ...] = DEFAULT_RETRYABLE,
        max_attempts: int = RETRY_MAX_ATTEMPTS,
        base_interval: float = RETRY_BASE_INTERVAL,
        max_interval: float = RETRY_MAX_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.retryable = tuple(retryable)
        self.max_attempts = max_attempts
        self.base_interval = base_interval
        self.max_interval = max_interval
        self._sleep = sleep

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_interval, max=self.max_interval),
            retry=retry_if_exception_type(self.retryable),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )

    def run(self, op: Callable[..., Any], *args, **kwargs) -> Any:
        """Call `op`, retrying retryable errors; the last error propagates."""
        return self._retrying()(op, *args, **kwargs)

    __call__ = run
