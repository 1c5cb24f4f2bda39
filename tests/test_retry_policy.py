from __future__ import annotations

from repeatkit.backoff import FixedBackoffAlgorithm
from repeatkit.cancellation import CancellationToken, CancelledError
from repeatkit.config import BackoffSettings, RetryPolicy
from repeatkit.delay import DelayOperation
from repeatkit.errors import hint_temporary
from repeatkit.operations import CountingOperation, fn_with_counter
from repeatkit.retry import build_operations, run_with_retry

_NO_WAIT = BackoffSettings(kind="fixed", delay=0.0)


def test_retry_policy_recovers_after_transient_failures() -> None:
    def op(index: int) -> BaseException | None:
        if index < 2:
            return hint_temporary(ConnectionError("temporary"))
        return None

    counted = fn_with_counter(op)

    result = run_with_retry(counted, policy=RetryPolicy(max_tries=4, backoff=_NO_WAIT))

    assert result is None
    assert counted.calls == 3


def test_retry_policy_stops_on_plain_error() -> None:
    fatal = RuntimeError("fatal")
    counted = fn_with_counter(lambda index: fatal)

    result = run_with_retry(counted, policy=RetryPolicy(max_tries=5, backoff=_NO_WAIT))

    assert result is fatal
    assert counted.calls == 1


def test_retry_policy_returns_last_temporary_cause() -> None:
    errors: list[BaseException] = []

    def op(index: int) -> BaseException | None:
        errors.append(ConnectionError(f"attempt {index}"))
        return hint_temporary(errors[-1])

    counted = fn_with_counter(op)

    result = run_with_retry(counted, policy=RetryPolicy(max_tries=2, backoff=_NO_WAIT))

    assert counted.calls == 2
    assert result is errors[-1]


def test_retry_policy_without_stop_on_success_runs_until_limit() -> None:
    counted = fn_with_counter(lambda index: None)

    result = run_with_retry(
        counted,
        policy=RetryPolicy(max_tries=3, stop_on_success=False, backoff=_NO_WAIT),
    )

    assert result is None
    assert counted.calls == 3


def test_retry_policy_honours_cancellation() -> None:
    token = CancellationToken()
    token.cancel()
    counted = fn_with_counter(lambda index: hint_temporary(ConnectionError("down")))

    result = run_with_retry(counted, policy=RetryPolicy(backoff=_NO_WAIT), token=token)

    assert isinstance(result, CancelledError)
    assert counted.calls == 1


def test_retry_policy_errors_timeout_stops_retrying() -> None:
    counted = fn_with_counter(lambda index: hint_temporary(ConnectionError("down")))
    policy = RetryPolicy(
        errors_timeout=0.05,
        backoff=BackoffSettings(kind="fixed", delay=0.01),
    )

    result = run_with_retry(counted, policy=policy)

    assert isinstance(result, ConnectionError)
    assert counted.calls >= 2


def test_build_operations_layout() -> None:
    business = fn_with_counter(lambda index: None)

    operations = build_operations(RetryPolicy(max_tries=3), business)

    assert len(operations) == 4
    assert isinstance(operations[0], CountingOperation)
    assert operations[1] is business
    assert isinstance(operations[-1], DelayOperation)
    assert isinstance(operations[-1].options.backoff, FixedBackoffAlgorithm)


def test_build_operations_minimal_policy() -> None:
    business = fn_with_counter(lambda index: None)

    operations = build_operations(RetryPolicy(stop_on_success=False), business)

    assert len(operations) == 2
    assert operations[0] is business
