"""Operation contract and the combinators that build operations."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable

from repeatkit.errors import (
    Outcome,
    UnrecoverableError,
    classify,
    hint_stop,
    hint_temporary,
    is_classified,
)

logger = py_logging.getLogger(__name__)

Operation = Callable[[BaseException | None], BaseException | None]


def nope(err: BaseException | None) -> BaseException | None:
    return err


def done(err: BaseException | None) -> BaseException | None:
    del err
    return None


def fn(op: Callable[[], BaseException | None]) -> Operation:
    """Adapt an operation that takes no arguments."""

    def operation(err: BaseException | None) -> BaseException | None:
        del err
        return op()

    return operation


def fn_s(op: Callable[[], object]) -> Operation:
    """Adapt a side-effect-only callable; the incoming error is forwarded."""

    def operation(err: BaseException | None) -> BaseException | None:
        op()
        return err

    return operation


def fn_es(op: Callable[[BaseException | None], object]) -> Operation:
    """Adapt a callable that only inspects the incoming error."""

    def operation(err: BaseException | None) -> BaseException | None:
        op(err)
        return err

    return operation


class CountingOperation:
    """Operation called with the error and a zero-based call index.

    The index advances after every call, whatever the call returns or raises.
    """

    def __init__(self, op: Callable[[BaseException | None, int], BaseException | None]) -> None:
        self._op = op
        self.calls = 0

    def __call__(self, err: BaseException | None) -> BaseException | None:
        try:
            return self._op(err, self.calls)
        finally:
            self.calls += 1


def fn_with_error_and_counter(
    op: Callable[[BaseException | None, int], BaseException | None],
) -> CountingOperation:
    return CountingOperation(op)


def fn_with_counter(op: Callable[[int], BaseException | None]) -> CountingOperation:
    return CountingOperation(lambda _err, index: op(index))


def fn_catch(
    op: Callable[[BaseException | None], object],
    *exceptions: type[BaseException],
) -> Operation:
    """Turn exceptions raised by ``op`` into returned error values.

    ``op`` succeeds by returning normally. Only the listed exception types
    (``Exception`` when none are given) are captured.
    """
    captured = exceptions or (Exception,)

    def operation(err: BaseException | None) -> BaseException | None:
        try:
            op(err)
        except captured as exc:
            return exc
        return None

    return operation


def fn_on_success(op: Operation) -> Operation:
    def operation(err: BaseException | None) -> BaseException | None:
        if err is not None:
            return err
        return op(err)

    return operation


def fn_on_error(op: Operation) -> Operation:
    def operation(err: BaseException | None) -> BaseException | None:
        if err is None:
            return err
        return op(err)

    return operation


def fn_hint_temporary(op: Operation) -> Operation:
    """Classify plain errors returned by ``op`` as temporary."""

    def operation(err: BaseException | None) -> BaseException | None:
        result = op(err)
        if result is None or is_classified(result):
            return result
        return hint_temporary(result)

    return operation


def fn_hint_stop(op: Operation) -> Operation:
    """Classify anything ``op`` returns as a stop, keeping existing hints."""

    def operation(err: BaseException | None) -> BaseException | None:
        result = op(err)
        if is_classified(result):
            return result
        return hint_stop(result)

    return operation


def fn_panic(op: Operation) -> Operation:
    """Raise UnrecoverableError when ``op`` returns a plain error."""

    def operation(err: BaseException | None) -> BaseException | None:
        result = op(err)
        if classify(result) is Outcome.FAILURE:
            logger.error("Escalating unclassified error: %s", result)
            raise UnrecoverableError(result) from result
        return result

    return operation


class OneShotOperation:
    def __init__(self, op: Operation) -> None:
        self._op = op
        self.fired = False

    def __call__(self, err: BaseException | None) -> BaseException | None:
        if self.fired:
            return err
        self.fired = True
        return self._op(err)


def fn_only_once(op: Operation) -> OneShotOperation:
    return OneShotOperation(op)


def fn_done(op: Operation) -> Operation:
    """Run ``op`` and report success whatever it returned."""

    def operation(err: BaseException | None) -> BaseException | None:
        op(err)
        return None

    return operation


def limit_max_tries(max_tries: int) -> CountingOperation:
    """Stop the repetition once this operation has been reached ``max_tries`` times."""
    if max_tries < 0:
        raise ValueError(f"max_tries must be non-negative, got {max_tries}")

    def limiter(err: BaseException | None, index: int) -> BaseException | None:
        if index < max_tries:
            return err
        logger.debug("Try limit reached max_tries=%s error=%s", max_tries, err)
        return hint_stop(err)

    return CountingOperation(limiter)


def stop_on_success() -> Operation:
    def operation(err: BaseException | None) -> BaseException | None:
        if err is not None:
            return err
        return hint_stop(None)

    return operation
