"""Backoff algorithms and the option builders that install them."""

from __future__ import annotations

import math
import random
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from repeatkit.delay import DelayOptions

# Largest signed 64-bit nanosecond duration, in seconds.
MAX_DELAY = (2**63 - 1) / 1e9

Backoff = Callable[[], float]
DelayOption = Callable[["DelayOptions"], None]


def _time_seed() -> int:
    return time.time_ns()


class FixedBackoffAlgorithm:
    def __init__(self, delay: float) -> None:
        self.delay = delay

    def __call__(self) -> float:
        return self.delay


class FullJitterBackoffAlgorithm:
    """Capped exponential backoff with full jitter.

    Call ``k`` returns a uniform value in ``[0, min(base * 2**k, max_delay))``:

        call    delay (base=1, max=30)
        1       random [0, 1)
        2       random [0, 2)
        3       random [0, 4)
        4       random [0, 8)
        5       random [0, 16)
        6       random [0, 30)
        7       random [0, 30)
    """

    def __init__(self, base_delay: float, max_delay: float = MAX_DELAY, *, seed: int | None = None) -> None:
        self._rnd = random.Random(_time_seed() if seed is None else seed)
        self._ceiling = min(base_delay, max_delay)
        self.max_delay = max_delay

    def __call__(self) -> float:
        ceiling = self._ceiling
        self._ceiling = min(ceiling * 2, self.max_delay)
        if ceiling <= 0:
            return 0.0
        return self._rnd.random() * ceiling


class ExponentialBackoffAlgorithm:
    """Classic capped exponential backoff with multiplicative jitter.

        attempt  delay (initial=1, max=30, multiplier=2, jitter=0.5)
        0         1 +- 0.5
        1         2 +- 1
        2         4 +- 2
        3         8 +- 4
        4        16 +- 8
        5        30 (32 +- 16, capped)

    Only the returned value is capped; the nominal delay keeps growing.
    """

    def __init__(
        self,
        initial_delay: float,
        max_delay: float = MAX_DELAY,
        multiplier: float = 2.0,
        jitter: float = 0.0,
        *,
        seed: int | None = None,
    ) -> None:
        self._rnd = random.Random(_time_seed() if seed is None else seed)
        self._next_delay = float(initial_delay)
        self.max_delay = max_delay
        self.multiplier = multiplier
        self.jitter = jitter

    def __call__(self) -> float:
        nominal = self._next_delay
        self._next_delay = nominal * self.multiplier

        delay = nominal
        if self.jitter:
            delta = nominal * self.jitter
            delay = nominal - delta + 2 * delta * self._rnd.random()

        # NaN and infinity fall through to the cap as well.
        if not delay < self.max_delay:
            delay = self.max_delay
        return delay


class _BackoffBuilder(BaseModel, ABC):
    model_config = ConfigDict(validate_assignment=True)

    @abstractmethod
    def algorithm(self) -> Backoff:
        """Build a fresh backoff generator from the current settings."""

    def set(self) -> DelayOption:
        """Return a delay option installing a fresh algorithm on every use."""

        def option(options: DelayOptions) -> None:
            options.backoff = self.algorithm()

        return option


class FixedBackoff(_BackoffBuilder):
    delay: float = Field(ge=0)

    def algorithm(self) -> Backoff:
        return FixedBackoffAlgorithm(self.delay)


class FullJitterBackoff(_BackoffBuilder):
    base_delay: float = Field(ge=0)
    max_delay: float = Field(default=MAX_DELAY, ge=0)
    seed: int | None = None

    def with_base_delay(self, delay: float) -> FullJitterBackoff:
        self.base_delay = delay
        return self

    def with_max_delay(self, delay: float) -> FullJitterBackoff:
        self.max_delay = delay
        return self

    def algorithm(self) -> Backoff:
        return FullJitterBackoffAlgorithm(self.base_delay, self.max_delay, seed=self.seed)


class ExponentialBackoff(_BackoffBuilder):
    initial_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=MAX_DELAY, ge=0)
    multiplier: float = Field(default=2.0, ge=0)
    jitter: float = Field(default=0.0, ge=0, le=1)
    seed: int | None = None

    @field_validator("multiplier", "jitter")
    @classmethod
    def _validate_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError(f"Expected a finite number, got {value}")
        return value

    def with_initial_delay(self, delay: float) -> ExponentialBackoff:
        self.initial_delay = delay
        return self

    def with_max_delay(self, delay: float) -> ExponentialBackoff:
        self.max_delay = delay
        return self

    def with_multiplier(self, multiplier: float) -> ExponentialBackoff:
        self.multiplier = multiplier
        return self

    def with_jitter(self, jitter: float) -> ExponentialBackoff:
        self.jitter = jitter
        return self

    def algorithm(self) -> Backoff:
        return ExponentialBackoffAlgorithm(
            self.initial_delay,
            self.max_delay,
            self.multiplier,
            self.jitter,
            seed=self.seed,
        )


def fixed_backoff(delay: float) -> FixedBackoff:
    return FixedBackoff(delay=delay)


def full_jitter_backoff(base_delay: float) -> FullJitterBackoff:
    return FullJitterBackoff(base_delay=base_delay)


def exponential_backoff(initial_delay: float) -> ExponentialBackoff:
    return ExponentialBackoff(initial_delay=initial_delay)
