"""Explicit cancellation tokens for repetition sequences."""

from __future__ import annotations

import logging as py_logging
import threading
import weakref

logger = py_logging.getLogger(__name__)


class CancelledError(Exception):
    """The token was cancelled."""

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class DeadlineExceededError(CancelledError):
    """The token deadline elapsed."""

    def __init__(self, message: str = "deadline exceeded") -> None:
        super().__init__(message)


class CancellationToken:
    """Cooperative cancellation signal shared by one retry sequence.

    A token created with a parent is cancelled together with the parent and
    reports the parent's error. Tokens created with ``with_timeout`` cancel
    themselves with ``DeadlineExceededError`` once the timeout elapses.
    Parents hold their children weakly and forget a child once it is
    cancelled, so a long-lived root can hand out any number of tokens.
    """

    def __init__(self, parent: CancellationToken | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._error: BaseException | None = None
        self._children: weakref.WeakSet[CancellationToken] = weakref.WeakSet()
        self._timer: threading.Timer | None = None
        self._parent = parent
        if parent is not None:
            parent._attach(self)

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        parent: CancellationToken | None = None,
    ) -> CancellationToken:
        token = cls(parent)
        if seconds <= 0:
            token.cancel(DeadlineExceededError())
            return token
        timer = threading.Timer(seconds, token.cancel, args=(DeadlineExceededError(),))
        timer.daemon = True
        token._timer = timer
        timer.start()
        return token

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def error(self) -> BaseException | None:
        with self._lock:
            return self._error

    def cancel(self, reason: BaseException | None = None) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._error = reason if reason is not None else CancelledError()
            children = list(self._children)
            self._children.clear()
            timer = self._timer
            parent = self._parent
            self._parent = None
            self._event.set()
        logger.debug("Cancellation token fired error=%s", self._error)
        if timer is not None:
            timer.cancel()
        if parent is not None:
            parent._detach(self)
        for child in children:
            child.cancel(self._error)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; True when cancelled."""
        if timeout is not None:
            timeout = min(max(timeout, 0.0), threading.TIMEOUT_MAX)
        return self._event.wait(timeout)

    def _attach(self, child: CancellationToken) -> None:
        with self._lock:
            if not self._event.is_set():
                self._children.add(child)
                return
            error = self._error
        child.cancel(error)

    def _detach(self, child: CancellationToken) -> None:
        with self._lock:
            self._children.discard(child)
