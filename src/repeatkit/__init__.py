"""Composable repetition of fallible operations."""

from .backoff import (
    MAX_DELAY,
    ExponentialBackoff,
    ExponentialBackoffAlgorithm,
    FixedBackoff,
    FixedBackoffAlgorithm,
    FullJitterBackoff,
    FullJitterBackoffAlgorithm,
    exponential_backoff,
    fixed_backoff,
    full_jitter_backoff,
)
from .cancellation import CancellationToken, CancelledError, DeadlineExceededError
from .config import BackoffSettings, RetryPolicy, load_policy
from .delay import DelayOperation, DelayOptions, set_cancellation, set_errors_timeout, with_delay
from .errors import (
    ConfigError,
    Outcome,
    RepeatKitError,
    StopError,
    TemporaryError,
    UnrecoverableError,
    cause,
    classify,
    hint_stop,
    hint_temporary,
    is_stop,
    is_temporary,
)
from .logging import configure_from_env, disable_logging, enable_logging, install_null_handler
from .operations import (
    CountingOperation,
    OneShotOperation,
    Operation,
    done,
    fn,
    fn_catch,
    fn_done,
    fn_es,
    fn_hint_stop,
    fn_hint_temporary,
    fn_on_error,
    fn_on_success,
    fn_only_once,
    fn_panic,
    fn_s,
    fn_with_counter,
    fn_with_error_and_counter,
    limit_max_tries,
    nope,
    stop_on_success,
)
from .repeat import (
    Repeater,
    bracket,
    compose,
    fn_repeat,
    new_repeater,
    once,
    repeat,
    with_cancellation,
    wrap,
)
from .retry import build_operations, run_with_retry
from .wrappers import OpWrapper, forward, wr_bracket, wr_stop_on_cancel

install_null_handler()

__all__ = [
    "MAX_DELAY",
    "BackoffSettings",
    "CancellationToken",
    "CancelledError",
    "ConfigError",
    "CountingOperation",
    "DeadlineExceededError",
    "DelayOperation",
    "DelayOptions",
    "ExponentialBackoff",
    "ExponentialBackoffAlgorithm",
    "FixedBackoff",
    "FixedBackoffAlgorithm",
    "FullJitterBackoff",
    "FullJitterBackoffAlgorithm",
    "OneShotOperation",
    "OpWrapper",
    "Operation",
    "Outcome",
    "RepeatKitError",
    "Repeater",
    "RetryPolicy",
    "StopError",
    "TemporaryError",
    "UnrecoverableError",
    "bracket",
    "build_operations",
    "cause",
    "classify",
    "compose",
    "configure_from_env",
    "disable_logging",
    "done",
    "enable_logging",
    "exponential_backoff",
    "fixed_backoff",
    "fn",
    "fn_catch",
    "fn_done",
    "fn_es",
    "fn_hint_stop",
    "fn_hint_temporary",
    "fn_on_error",
    "fn_on_success",
    "fn_only_once",
    "fn_panic",
    "fn_repeat",
    "fn_s",
    "fn_with_counter",
    "fn_with_error_and_counter",
    "forward",
    "full_jitter_backoff",
    "hint_stop",
    "hint_temporary",
    "is_stop",
    "is_temporary",
    "limit_max_tries",
    "load_policy",
    "new_repeater",
    "nope",
    "once",
    "repeat",
    "run_with_retry",
    "set_cancellation",
    "set_errors_timeout",
    "stop_on_success",
    "with_cancellation",
    "with_delay",
    "wr_bracket",
    "wr_stop_on_cancel",
    "wrap",
]
