from __future__ import annotations

from repeatkit.errors import (
    ConfigError,
    Outcome,
    RepeatKitError,
    StopError,
    TemporaryError,
    cause,
    classify,
    hint_stop,
    hint_temporary,
    is_stop,
    is_temporary,
)


def test_stop_error_classification_and_message() -> None:
    err = hint_stop(None)

    assert not is_stop(None)
    assert not is_stop(ValueError("test"))
    assert not is_stop(hint_temporary(None))
    assert is_stop(err)
    assert cause(err) is None
    assert str(err) == "repeatkit.stop"
    assert str(hint_stop(ValueError("internal"))) == "repeatkit.stop: internal"


def test_temporary_error_classification_and_message() -> None:
    err = hint_temporary(None)

    assert not is_temporary(None)
    assert not is_temporary(ValueError("test"))
    assert not is_temporary(hint_stop(None))
    assert is_temporary(err)
    assert cause(err) is None
    assert str(err) == "repeatkit.temporary"
    assert str(hint_temporary(ValueError("internal"))) == "repeatkit.temporary: internal"


def test_cause_returns_plain_and_absent_values_unchanged() -> None:
    plain = ValueError("plain")

    assert cause(plain) is plain
    assert cause(None) is None


def test_hints_never_nest_wrappers() -> None:
    inner = ValueError("inner")

    restopped = hint_stop(hint_temporary(inner))
    retried = hint_temporary(hint_stop(inner))

    assert isinstance(restopped, StopError)
    assert restopped.cause is inner
    assert isinstance(retried, TemporaryError)
    assert retried.cause is inner


def test_classify_covers_every_outcome() -> None:
    assert classify(None) is Outcome.SUCCESS
    assert classify(hint_temporary(None)) is Outcome.TEMPORARY
    assert classify(hint_stop(None)) is Outcome.STOP
    assert classify(RuntimeError("x")) is Outcome.FAILURE


def test_repeatkit_error_string_contains_hint() -> None:
    err = ConfigError("bad policy", hint="Fix the file")

    assert isinstance(err, RepeatKitError)
    assert str(err) == "bad policy Hint: Fix the file"
    assert str(RepeatKitError("msg")) == "msg"
