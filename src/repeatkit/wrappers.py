"""Cross-cutting operation wrappers."""

from __future__ import annotations

from collections.abc import Callable

from repeatkit.cancellation import CancellationToken
from repeatkit.errors import Outcome, classify, hint_stop
from repeatkit.operations import Operation

OpWrapper = Callable[[Operation], Operation]


def forward(op: Operation) -> Operation:
    return op


def wr_stop_on_cancel(token: CancellationToken) -> OpWrapper:
    """Skip the wrapped operation and stop once ``token`` is cancelled."""

    def wrapper(op: Operation) -> Operation:
        def operation(err: BaseException | None) -> BaseException | None:
            if not token.cancelled:
                return op(err)

            outcome = classify(err)
            if outcome is Outcome.SUCCESS:
                return hint_stop(token.error)
            if outcome is Outcome.TEMPORARY:
                return hint_stop(err)
            return err

        return operation

    return wrapper


def wr_bracket(construct: Operation, destruct: Operation) -> OpWrapper:
    """Wrap a single operation in its own construct/destruct pass."""
    from repeatkit.repeat import Repeater

    repeater = Repeater(construct=construct, destruct=destruct)

    def wrapper(op: Operation) -> Operation:
        return repeater.compose(op)

    return wrapper
