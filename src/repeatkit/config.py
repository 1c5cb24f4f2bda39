"""TOML retry policy loading."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from repeatkit.backoff import (
    MAX_DELAY,
    DelayOption,
    exponential_backoff,
    fixed_backoff,
    full_jitter_backoff,
)
from repeatkit.errors import ConfigError

DEFAULT_POLICY_PATH = Path("~/.config/repeatkit/policy.toml")
POLICY_PATH_ENV = "REPEATKIT_POLICY"
DEFAULT_BACKOFF_KIND: Literal["fixed", "full_jitter", "exponential"] = "fixed"
DEFAULT_DELAY_SECONDS = 1.0

_VALID_BACKOFF_KINDS = {"fixed", "full_jitter", "exponential"}


class BackoffSettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    kind: Literal["fixed", "full_jitter", "exponential"] = DEFAULT_BACKOFF_KIND
    delay: float = Field(default=DEFAULT_DELAY_SECONDS, ge=0)
    max_delay: float = Field(default=MAX_DELAY, ge=0)
    multiplier: float = Field(default=2.0, ge=0)
    jitter: float = Field(default=0.0, ge=0, le=1)

    @field_validator("kind", mode="before")
    @classmethod
    def _validate_kind(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower().replace("-", "_")
        if value not in _VALID_BACKOFF_KINDS:
            raise ValueError(f"Invalid backoff kind: {value}")
        return value

    def to_option(self) -> DelayOption:
        if self.kind == "full_jitter":
            return full_jitter_backoff(self.delay).with_max_delay(self.max_delay).set()
        if self.kind == "exponential":
            return (
                exponential_backoff(self.delay)
                .with_max_delay(self.max_delay)
                .with_multiplier(self.multiplier)
                .with_jitter(self.jitter)
                .set()
            )
        return fixed_backoff(self.delay).set()


class RetryPolicy(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_tries: int | None = Field(default=None, ge=0)
    stop_on_success: bool = True
    errors_timeout: float | None = Field(default=None, ge=0)
    backoff: BackoffSettings = Field(default_factory=BackoffSettings)


def get_policy_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    env_path = os.getenv(POLICY_PATH_ENV, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_POLICY_PATH.expanduser()


def parse_policy(raw: dict[str, object]) -> RetryPolicy:
    section = raw.get("policy", raw)
    if not isinstance(section, dict):
        raise ConfigError("Retry policy must be a table.", hint="Use a [policy] table.")
    try:
        return RetryPolicy.model_validate(section)
    except ValidationError as exc:
        raise ConfigError(f"Invalid retry policy: {exc}", hint="Check the policy keys and value ranges.") from exc


def load_policy(path: str | Path | None = None) -> RetryPolicy:
    resolved = get_policy_path(path)
    if not resolved.exists():
        return RetryPolicy()
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(f"Cannot read retry policy {resolved}: {exc}") from exc
    return parse_policy(raw)
