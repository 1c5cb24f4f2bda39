"""Composer and repeat loop."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass

from repeatkit.cancellation import CancellationToken
from repeatkit.errors import Outcome, cause, classify
from repeatkit.operations import Operation, fn_panic, nope
from repeatkit.wrappers import OpWrapper, forward, wr_stop_on_cancel

logger = py_logging.getLogger(__name__)

_TERMINAL = (Outcome.STOP, Outcome.FAILURE)


@dataclass(frozen=True)
class Repeater:
    """Binds operations together and drives them.

    ``wrapper`` decorates every composed operation. ``construct`` runs before
    each composed pass and ``destruct`` after it, on every exit path.
    """

    wrapper: OpWrapper = forward
    construct: Operation = nope
    destruct: Operation = nope

    def compose(self, *ops: Operation) -> Operation:
        wrapped = [self.wrapper(op) for op in ops]
        construct = self.construct
        destruct = self.destruct

        def composed(err: BaseException | None) -> BaseException | None:
            constructed = construct(err)
            if classify(constructed) in _TERMINAL:
                logger.debug("Construct failed, skipping batch error=%s", constructed)
                return constructed

            current = err
            try:
                for op in wrapped:
                    current = op(current)
                    if classify(current) in _TERMINAL:
                        break
            except BaseException:
                destruct(current)
                raise

            finalized = destruct(current)
            if finalized is not None:
                return finalized
            return current

        return composed

    def fn_repeat(self, *ops: Operation) -> Operation:
        """Operation running its own repeat loop, returning the terminating error as is."""
        op = self.compose(*ops)

        def loop(err: BaseException | None) -> BaseException | None:
            current = err
            iteration = 0
            while True:
                current = op(current)
                iteration += 1
                outcome = classify(current)
                if outcome in _TERMINAL:
                    logger.debug(
                        "Repetition finished iterations=%s outcome=%s error=%s",
                        iteration,
                        outcome.value,
                        current,
                    )
                    return current

        return loop

    def once(self, *ops: Operation) -> BaseException | None:
        return cause(self.compose(*ops)(None))

    def repeat(self, *ops: Operation) -> BaseException | None:
        """Repeat ``ops`` until one of them stops the repetition.

        The composed operations run at least once. A stop returns its cause,
        any other unclassified error is returned as is.
        """
        return cause(self.fn_repeat(*ops)(None))


def new_repeater() -> Repeater:
    return Repeater()


def wrap(wrapper: OpWrapper) -> Repeater:
    return Repeater(wrapper=wrapper)


def bracket(construct: Operation, destruct: Operation) -> Repeater:
    """Repeater running ``construct``/``destruct`` around every composed pass.

    A destructor returning an unclassified error raises UnrecoverableError.
    """
    return Repeater(construct=construct, destruct=fn_panic(destruct))


def with_cancellation(token: CancellationToken) -> Repeater:
    return Repeater(wrapper=wr_stop_on_cancel(token))


def compose(*ops: Operation) -> Operation:
    return Repeater().compose(*ops)


def fn_repeat(*ops: Operation) -> Operation:
    return Repeater().fn_repeat(*ops)


def once(*ops: Operation) -> BaseException | None:
    return Repeater().once(*ops)


def repeat(*ops: Operation) -> BaseException | None:
    return Repeater().repeat(*ops)
