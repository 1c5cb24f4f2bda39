"""Delay operation: waits between attempts under an errors timeout."""

from __future__ import annotations

import logging as py_logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from repeatkit.backoff import MAX_DELAY, Backoff, DelayOption, FixedBackoffAlgorithm
from repeatkit.cancellation import CancellationToken
from repeatkit.errors import cause

logger = py_logging.getLogger(__name__)


@dataclass
class DelayOptions:
    errors_timeout: float = MAX_DELAY
    backoff: Backoff = field(default_factory=lambda: FixedBackoffAlgorithm(1.0))
    token: CancellationToken = field(default_factory=CancellationToken)


def set_errors_timeout(timeout: float) -> DelayOption:
    """Limit how long consecutive errors may keep the repetition going.

    The budget is restored every time the delay sees a success.
    """
    if timeout < 0:
        raise ValueError(f"errors timeout must be non-negative, got {timeout}")

    def option(options: DelayOptions) -> None:
        options.errors_timeout = timeout

    return option


def set_cancellation(token: CancellationToken) -> DelayOption:
    def option(options: DelayOptions) -> None:
        options.token = token

    return option


class DelayOperation:
    """Operation that blocks for the next backoff delay.

    The wait ends early when the token is cancelled (its error is returned)
    or when the errors deadline passes (the cause of the incoming error is
    returned). Otherwise the incoming error is returned unchanged.
    """

    def __init__(self, options: DelayOptions, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.options = options
        self._clock = clock
        self._deadline = self._shift()

    def _shift(self) -> float:
        return self._clock() + self.options.errors_timeout

    def __call__(self, err: BaseException | None) -> BaseException | None:
        if err is None:
            self._deadline = self._shift()

        delay = self.options.backoff()
        remaining = self._deadline - self._clock()
        token = self.options.token

        if token.cancelled:
            return token.error
        if remaining <= 0:
            logger.debug("Errors timeout already elapsed error=%s", err)
            return cause(err)

        if token.wait(min(delay, remaining)):
            logger.debug("Delay cancelled error=%s", token.error)
            return token.error
        if remaining <= delay:
            logger.debug("Errors timeout elapsed after %.3fs error=%s", remaining, err)
            return cause(err)
        logger.debug("Delay elapsed after %.3fs", delay)
        return err


def with_delay(*options: DelayOption, clock: Callable[[], float] = time.monotonic) -> DelayOperation:
    delay_options = DelayOptions()
    for option in options:
        option(delay_options)
    return DelayOperation(delay_options, clock=clock)
