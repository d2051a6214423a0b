"""Tests for the retry policy."""

import duckdb
import pytest

from statkit.errors import TransientBackendError, UnknownFilterKeyError
from statkit.services.retry import RetryPolicy


class Flaky:
    """Fails with `error` for the first `failures` calls."""

    def __init__(self, failures: int, error: Exception):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def policy(sleeps):
    return RetryPolicy(max_attempts=3, base_interval=0.1, max_interval=0.3, sleep=sleeps.append)


class TestRetryPolicy:
    def test_success_first_try(self, policy, sleeps):
        op = Flaky(0, TransientBackendError())
        assert policy.run(op) == "ok"
        assert op.calls == 1
        assert sleeps == []

    def test_retries_transient(self, policy):
        op = Flaky(2, TransientBackendError())
        assert policy.run(op) == "ok"
        assert op.calls == 3

    def test_retries_duckdb_conflict(self, policy):
        op = Flaky(1, duckdb.TransactionException("Transaction conflict"))
        assert policy(op) == "ok"
        assert op.calls == 2

    def test_exhausted_raises_last_error(self, policy):
        op = Flaky(5, TransientBackendError("conflict"))
        with pytest.raises(TransientBackendError, match="conflict"):
            policy.run(op)
        assert op.calls == 3

    def test_non_retryable_propagates_immediately(self, policy):
        op = Flaky(5, UnknownFilterKeyError("status"))
        with pytest.raises(UnknownFilterKeyError):
            policy.run(op)
        assert op.calls == 1

    def test_backoff_non_decreasing_and_bounded(self, sleeps):
        policy = RetryPolicy(max_attempts=6, base_interval=0.1, max_interval=0.3, sleep=sleeps.append)
        with pytest.raises(TransientBackendError):
            policy.run(Flaky(10, TransientBackendError()))
        assert len(sleeps) == 5
        assert sleeps == sorted(sleeps)
        assert max(sleeps) <= 0.3

    def test_custom_kinds(self, sleeps):
        policy = RetryPolicy(retryable=(KeyError,), max_attempts=2, sleep=sleeps.append)
        op = Flaky(1, KeyError("x"))
        assert policy.run(op) == "ok"
        with pytest.raises(TransientBackendError):
            policy.run(Flaky(1, TransientBackendError()))

    def test_passes_arguments(self, policy):
        assert policy.run(lambda a, b=0: a + b, 1, b=2) == 3

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
