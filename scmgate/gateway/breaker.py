"""Circuit breaker guarding the GitHub call path.

States follow the usual three-state machine:

- ``closed``: calls pass; transient failures are counted.
- ``open``: calls fail fast until the cooldown elapses.
- ``half_open``: one probe call passes; success closes the breaker and
  failure re-opens it.

The breaker is shared by every call issued through one gateway. It is driven
from a single event loop and never awaits, so each method call is atomic with
respect to other tasks.

Every transition starts a new generation. Callers read
:attr:`CircuitBreaker.generation` when a call is admitted and hand it back
with the outcome. Outcomes from an earlier generation are ignored, so a slow
call admitted while closed cannot settle a half-open trial call.
"""

from __future__ import annotations

import collections
import enum
import time
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import BreakerPolicy

    type TransitionListener = cabc.Callable[[BreakerState, BreakerState], None]


class BreakerState(enum.StrEnum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Consecutive-failure and failure-rate circuit breaker.

    Parameters
    ----------
    policy
        Thresholds and cooldown.
    clock
        Monotonic clock returning seconds; injectable for tests.
    on_transition
        Optional callback receiving ``(old_state, new_state)``.

    """

    def __init__(
        self,
        policy: BreakerPolicy,
        *,
        clock: cabc.Callable[[], float] = time.monotonic,
        on_transition: TransitionListener | None = None,
    ) -> None:
        """Initialise a closed breaker."""
        self._policy = policy
        self._clock = clock
        self._on_transition = on_transition
        self._state = BreakerState.CLOSED
        self._opened_at = 0.0
        self._consecutive_failures = 0
        self._window: collections.deque[bool] = collections.deque(
            maxlen=policy.window_size
        )
        self._probe_in_flight = False
        self._generation = 0

    @property
    def state(self) -> BreakerState:
        """Return the current state, promoting ``open`` after the cooldown."""
        if (
            self._state is BreakerState.OPEN
            and self._clock() - self._opened_at >= self._policy.cooldown_s
        ):
            self._transition(BreakerState.HALF_OPEN)
        return self._state

    @property
    def generation(self) -> int:
        """Return the number of transitions so far."""
        return self._generation

    @property
    def is_closed(self) -> bool:
        """Return True when calls pass through without restriction."""
        return self.state is BreakerState.CLOSED

    @property
    def consecutive_failures(self) -> int:
        """Return the current run of transient failures."""
        return self._consecutive_failures

    def retry_in(self) -> float:
        """Return seconds until a probe is allowed; ``0`` when not open."""
        if self.state is not BreakerState.OPEN:
            return 0.0
        remaining = self._policy.cooldown_s - (self._clock() - self._opened_at)
        return max(remaining, 0.0)

    def allow_request(self) -> bool:
        """Return True when a call may be dispatched now.

        In ``half_open`` only one probe is admitted at a time.
        """
        state = self.state
        if state is BreakerState.CLOSED:
            return True
        if state is BreakerState.HALF_OPEN and not self._probe_in_flight:
            self._probe_in_flight = True
            return True
        return False

    def _is_stale(self, generation: int | None) -> bool:
        return generation is not None and generation != self._generation

    def record_success(self, *, generation: int | None = None) -> None:
        """Record a call that reached GitHub and got an answer."""
        if self._is_stale(generation):
            return
        self._probe_in_flight = False
        self._consecutive_failures = 0
        if self._state is BreakerState.HALF_OPEN:
            self._window.clear()
            self._transition(BreakerState.CLOSED)
            return
        self._window.append(False)

    def record_failure(self, *, generation: int | None = None) -> None:
        """Record a transient failure and open the breaker when over threshold."""
        if self._is_stale(generation):
            return
        self._probe_in_flight = False
        if self._state is BreakerState.HALF_OPEN:
            self._open()
            return
        self._consecutive_failures += 1
        self._window.append(True)
        if self._state is BreakerState.CLOSED and self._should_open():
            self._open()

    def release_probe(self, *, generation: int | None = None) -> None:
        """Forget an admitted probe whose outcome was never recorded."""
        if self._is_stale(generation):
            return
        self._probe_in_flight = False

    def _should_open(self) -> bool:
        if self._consecutive_failures >= self._policy.failure_threshold:
            return True
        rate_threshold = self._policy.failure_rate_threshold
        if rate_threshold is None or len(self._window) < self._policy.minimum_calls:
            return False
        return sum(self._window) / len(self._window) >= rate_threshold

    def _open(self) -> None:
        self._opened_at = self._clock()
        self._consecutive_failures = 0
        self._window.clear()
        self._transition(BreakerState.OPEN)

    def _transition(self, new_state: BreakerState) -> None:
        old_state = self._state
        self._state = new_state
        if old_state is new_state:
            return
        self._generation += 1
        if self._on_transition is not None:
            self._on_transition(old_state, new_state)
