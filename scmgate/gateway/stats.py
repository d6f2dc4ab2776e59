"""Gateway health counters and their read-only snapshot."""

from __future__ import annotations

import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    from .breaker import CircuitBreaker


class GatewayHealthSnapshot(msgspec.Struct, kw_only=True, frozen=True):
    """Point-in-time view of gateway usage and breaker health.

    Attributes
    ----------
    total
        Invocations started since process start.
    timeouts
        Attempts that exceeded the per-call timeout.
    successes
        Invocations that returned a result.
    failures
        Invocations that surfaced an error, including short-circuits.
    concurrent
        Invocations currently in flight.
    average_latency_ms
        Mean wall time of finished invocations, retries included.
    short_circuited
        Attempts refused by an open breaker without a network call.
    breaker_closed
        Whether the breaker currently lets calls through unrestricted.
    breaker_state
        Current breaker state name.

    """

    total: int
    timeouts: int
    successes: int
    failures: int
    concurrent: int
    average_latency_ms: float
    short_circuited: int
    breaker_closed: bool
    breaker_state: str


class GatewayStats:
    """Monotonic process-lifetime counters owned by one gateway.

    Updates never await, so they are atomic with respect to other tasks on the
    event loop.
    """

    def __init__(self) -> None:
        """Initialise zeroed counters."""
        self._total = 0
        self._timeouts = 0
        self._successes = 0
        self._failures = 0
        self._short_circuited = 0
        self._in_flight = 0
        self._latency_total_s = 0.0

    def record_started(self) -> None:
        """Count a new invocation."""
        self._total += 1
        self._in_flight += 1

    def record_finished(self, elapsed_s: float, *, succeeded: bool) -> None:
        """Count a finished invocation and its latency."""
        self._in_flight -= 1
        self._latency_total_s += max(elapsed_s, 0.0)
        if succeeded:
            self._successes += 1
        else:
            self._failures += 1

    def record_timeout(self) -> None:
        """Count an attempt that hit the per-call timeout."""
        self._timeouts += 1

    def record_short_circuit(self) -> None:
        """Count an attempt refused by an open breaker."""
        self._short_circuited += 1

    def snapshot(self, breaker: CircuitBreaker) -> GatewayHealthSnapshot:
        """Return an immutable snapshot including the breaker state."""
        finished = self._successes + self._failures
        average_ms = (self._latency_total_s / finished) * 1000 if finished else 0.0
        state = breaker.state
        return GatewayHealthSnapshot(
            total=self._total,
            timeouts=self._timeouts,
            successes=self._successes,
            failures=self._failures,
            concurrent=self._in_flight,
            average_latency_ms=average_ms,
            short_circuited=self._short_circuited,
            breaker_closed=breaker.is_closed,
            breaker_state=str(state),
        )
