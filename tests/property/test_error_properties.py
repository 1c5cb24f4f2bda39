from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from repeatkit.errors import cause, hint_stop, hint_temporary, is_stop, is_temporary
from repeatkit.operations import limit_max_tries

_ERRORS = st.one_of(
    st.none(),
    st.text(max_size=20).map(ValueError),
    st.text(max_size=20).map(ConnectionError),
)


@given(_ERRORS)
def test_stop_round_trip(err: BaseException | None) -> None:
    stopped = hint_stop(err)

    assert is_stop(stopped)
    assert not is_temporary(stopped)
    assert cause(stopped) is err


@given(_ERRORS)
def test_temporary_round_trip(err: BaseException | None) -> None:
    temporary = hint_temporary(err)

    assert is_temporary(temporary)
    assert cause(temporary) is err
    assert cause(hint_stop(temporary)) is err


@given(st.integers(min_value=0, max_value=30), _ERRORS)
def test_limit_max_tries_passes_exactly_max_calls(max_tries: int, err: BaseException | None) -> None:
    limiter = limit_max_tries(max_tries)

    for _ in range(max_tries):
        assert limiter(err) is err
    for _ in range(3):
        stopped = limiter(err)
        assert is_stop(stopped)
        assert cause(stopped) is err
