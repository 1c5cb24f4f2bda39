"""Three-way error classification used by the repetition engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

TEMPORARY_TAG = "repeatkit.temporary"
STOP_TAG = "repeatkit.stop"


class Outcome(str, Enum):
    SUCCESS = "success"
    TEMPORARY = "temporary"
    STOP = "stop"
    FAILURE = "failure"


class _HintError(Exception):
    tag = ""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.tag
        return f"{self.tag}: {self.cause}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.cause!r})"


class TemporaryError(_HintError):
    """Failure that still allows the repetition to go on.

    Never returned to the caller of ``repeat`` as is, only its cause.
    """

    tag = TEMPORARY_TAG


class StopError(_HintError):
    """Request to stop the repetition, optionally with a cause.

    A stop without a cause means a clean finish.
    """

    tag = STOP_TAG


class UnrecoverableError(RuntimeError):
    """Escalated error that must never be classified.

    Raised by ``fn_panic`` and by bracket destructors; hosts are expected to
    let it propagate.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"unrecoverable: {cause}")
        self.cause = cause


@dataclass
class RepeatKitError(Exception):
    message: str
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


class ConfigError(RepeatKitError):
    """Retry policy configuration could not be loaded."""


def cause(err: BaseException | None) -> BaseException | None:
    """Unwrap one level of TemporaryError/StopError, return anything else as is."""
    if isinstance(err, _HintError):
        return err.cause
    return err


def hint_temporary(err: BaseException | None) -> TemporaryError:
    return TemporaryError(cause(err))


def hint_stop(err: BaseException | None) -> StopError:
    return StopError(cause(err))


def is_temporary(err: BaseException | None) -> bool:
    return isinstance(err, TemporaryError)


def is_stop(err: BaseException | None) -> bool:
    return isinstance(err, StopError)


def classify(err: BaseException | None) -> Outcome:
    if err is None:
        return Outcome.SUCCESS
    if isinstance(err, TemporaryError):
        return Outcome.TEMPORARY
    if isinstance(err, StopError):
        return Outcome.STOP
    return Outcome.FAILURE


def is_classified(err: BaseException | None) -> bool:
    return classify(err) in (Outcome.TEMPORARY, Outcome.STOP)
