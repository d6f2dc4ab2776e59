"""Configuration for the resilient call gateway.

Every knob has a documented fallback default; nothing else is hard-coded.

Usage
-----
Build a configuration with defaults:

>>> config = GatewayConfig()
>>> config.breaker.failure_threshold
5

Or load from environment variables:

>>> import os
>>> os.environ["SCMGATE_RETRY_MAX"] = "4"
>>> GatewayConfig.from_env().retry.max_retries
4

"""

from __future__ import annotations

import dataclasses as dc
import os

from .errors import GatewayConfigError

_DEFAULT_BASE_URL = "https://api.github.com"
_DEFAULT_USER_AGENT = "scmgate/0.1"
_DEFAULT_API_VERSION = "2022-11-28"

# Retry defaults
_DEFAULT_MAX_RETRIES = 2
_DEFAULT_INITIAL_DELAY_S = 0.5
_DEFAULT_MAX_DELAY_S = 8.0
_DEFAULT_JITTER_S = 0.25

# Breaker defaults
_DEFAULT_FAILURE_THRESHOLD = 5
_DEFAULT_FAILURE_RATE = 0.5
_DEFAULT_WINDOW_SIZE = 20
_DEFAULT_MINIMUM_CALLS = 10
_DEFAULT_COOLDOWN_S = 30.0
_DEFAULT_CALL_TIMEOUT_S = 10.0


def _read_env(name: str) -> str | None:
    raw = os.environ.get(name, "")
    return raw.strip() or None


def _env_int(name: str, default: int, *, minimum: int) -> int:
    raw = _read_env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise GatewayConfigError.invalid_env(name, raw, "an integer") from exc
    if value < minimum:
        raise GatewayConfigError.invalid_env(name, raw, f"an integer >= {minimum}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = _read_env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise GatewayConfigError.invalid_env(name, raw, "a number") from exc
    if value < 0:
        raise GatewayConfigError.invalid_env(name, raw, "a non-negative number")
    return value


def _env_ratio(name: str, default: float | None) -> float | None:
    raw = _read_env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise GatewayConfigError.invalid_env(name, raw, "a ratio") from exc
    if not 0.0 < value <= 1.0:
        raise GatewayConfigError.invalid_env(name, raw, "a ratio in (0, 1]")
    return value


@dc.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry budget for transient failures.

    Attributes
    ----------
    max_retries
        Retries after the first attempt; ``0`` disables retrying.
    initial_delay_s
        Delay before the first retry; doubles on each subsequent retry.
    max_delay_s
        Upper bound for a single backoff delay.
    jitter_s
        Maximum random jitter added to each delay.

    """

    max_retries: int = _DEFAULT_MAX_RETRIES
    initial_delay_s: float = _DEFAULT_INITIAL_DELAY_S
    max_delay_s: float = _DEFAULT_MAX_DELAY_S
    jitter_s: float = _DEFAULT_JITTER_S

    @classmethod
    def from_env(cls) -> RetryPolicy:
        """Build a retry policy from ``SCMGATE_RETRY_*`` variables."""
        return cls(
            max_retries=_env_int(
                "SCMGATE_RETRY_MAX", _DEFAULT_MAX_RETRIES, minimum=0
            ),
            initial_delay_s=_env_float(
                "SCMGATE_RETRY_INITIAL_DELAY_S", _DEFAULT_INITIAL_DELAY_S
            ),
            max_delay_s=_env_float(
                "SCMGATE_RETRY_MAX_DELAY_S", _DEFAULT_MAX_DELAY_S
            ),
            jitter_s=_env_float("SCMGATE_RETRY_JITTER_S", _DEFAULT_JITTER_S),
        )


@dc.dataclass(frozen=True, slots=True)
class BreakerPolicy:
    """Circuit breaker thresholds and timing.

    Attributes
    ----------
    failure_threshold
        Consecutive transient failures that open the breaker.
    failure_rate_threshold
        Failure ratio over the rolling window that opens the breaker;
        ``None`` disables the rate check.
    window_size
        Number of recent calls kept for the failure-rate calculation.
    minimum_calls
        Calls required in the window before the rate check applies.
    cooldown_s
        Time the breaker stays open before allowing a half-open probe.
    call_timeout_s
        Per-attempt timeout; ``None`` disables it.

    """

    failure_threshold: int = _DEFAULT_FAILURE_THRESHOLD
    failure_rate_threshold: float | None = _DEFAULT_FAILURE_RATE
    window_size: int = _DEFAULT_WINDOW_SIZE
    minimum_calls: int = _DEFAULT_MINIMUM_CALLS
    cooldown_s: float = _DEFAULT_COOLDOWN_S
    call_timeout_s: float | None = _DEFAULT_CALL_TIMEOUT_S

    @classmethod
    def from_env(cls) -> BreakerPolicy:
        """Build a breaker policy from ``SCMGATE_BREAKER_*`` variables."""
        timeout = _env_float("SCMGATE_CALL_TIMEOUT_S", _DEFAULT_CALL_TIMEOUT_S)
        return cls(
            failure_threshold=_env_int(
                "SCMGATE_BREAKER_FAILURE_THRESHOLD",
                _DEFAULT_FAILURE_THRESHOLD,
                minimum=1,
            ),
            failure_rate_threshold=_env_ratio(
                "SCMGATE_BREAKER_FAILURE_RATE", _DEFAULT_FAILURE_RATE
            ),
            window_size=_env_int(
                "SCMGATE_BREAKER_WINDOW_SIZE", _DEFAULT_WINDOW_SIZE, minimum=1
            ),
            minimum_calls=_env_int(
                "SCMGATE_BREAKER_MINIMUM_CALLS", _DEFAULT_MINIMUM_CALLS, minimum=1
            ),
            cooldown_s=_env_float(
                "SCMGATE_BREAKER_COOLDOWN_S", _DEFAULT_COOLDOWN_S
            ),
            call_timeout_s=timeout or None,
        )


@dc.dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Top-level gateway configuration.

    Attributes
    ----------
    retry
        Retry policy for transient failures.
    breaker
        Circuit breaker policy, including the per-call timeout.
    base_url
        GitHub REST API root.
    user_agent
        ``User-Agent`` header sent with every call.
    api_version
        ``X-GitHub-Api-Version`` header sent with every call.

    """

    retry: RetryPolicy = dc.field(default_factory=RetryPolicy)
    breaker: BreakerPolicy = dc.field(default_factory=BreakerPolicy)
    base_url: str = _DEFAULT_BASE_URL
    user_agent: str = _DEFAULT_USER_AGENT
    api_version: str = _DEFAULT_API_VERSION

    @classmethod
    def from_env(cls) -> GatewayConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``SCMGATE_GITHUB_API_URL``: GitHub REST API root
        - ``SCMGATE_RETRY_MAX``, ``SCMGATE_RETRY_INITIAL_DELAY_S``,
          ``SCMGATE_RETRY_MAX_DELAY_S``, ``SCMGATE_RETRY_JITTER_S``
        - ``SCMGATE_BREAKER_FAILURE_THRESHOLD``,
          ``SCMGATE_BREAKER_FAILURE_RATE``, ``SCMGATE_BREAKER_WINDOW_SIZE``,
          ``SCMGATE_BREAKER_MINIMUM_CALLS``, ``SCMGATE_BREAKER_COOLDOWN_S``
        - ``SCMGATE_CALL_TIMEOUT_S``: per-call timeout, ``0`` disables it

        Raises
        ------
        GatewayConfigError
            If any variable holds an invalid value.

        """
        return cls(
            retry=RetryPolicy.from_env(),
            breaker=BreakerPolicy.from_env(),
            base_url=_read_env("SCMGATE_GITHUB_API_URL") or _DEFAULT_BASE_URL,
        )
