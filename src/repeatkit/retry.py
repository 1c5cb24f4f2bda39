"""Ready-made retry runs driven by a RetryPolicy."""

from __future__ import annotations

import logging as py_logging

from repeatkit.cancellation import CancellationToken
from repeatkit.config import RetryPolicy
from repeatkit.delay import set_cancellation, set_errors_timeout, with_delay
from repeatkit.operations import Operation, limit_max_tries, stop_on_success
from repeatkit.repeat import repeat

logger = py_logging.getLogger(__name__)


def build_operations(
    policy: RetryPolicy,
    operation: Operation,
    token: CancellationToken | None = None,
) -> list[Operation]:
    """Chain ``operation`` with the guards described by ``policy``.

    The try limit runs before ``operation`` so that ``max_tries`` counts
    calls of ``operation`` itself.
    """
    operations: list[Operation] = []
    if policy.max_tries is not None:
        operations.append(limit_max_tries(policy.max_tries))
    operations.append(operation)
    if policy.stop_on_success:
        operations.append(stop_on_success())

    options = [policy.backoff.to_option()]
    if policy.errors_timeout is not None:
        options.append(set_errors_timeout(policy.errors_timeout))
    if token is not None:
        options.append(set_cancellation(token))
    operations.append(with_delay(*options))
    return operations


def run_with_retry(
    operation: Operation,
    *,
    policy: RetryPolicy,
    token: CancellationToken | None = None,
) -> BaseException | None:
    logger.debug(
        "Starting retry run max_tries=%s backoff=%s errors_timeout=%s",
        policy.max_tries,
        policy.backoff.kind,
        policy.errors_timeout,
    )
    result = repeat(*build_operations(policy, operation, token))
    if result is not None:
        logger.debug("Retry run failed error=%s", result)
    return result
