"""Unit tests for the circuit breaker state machine."""

from __future__ import annotations

from scmgate.gateway.breaker import BreakerState, CircuitBreaker
from scmgate.gateway.config import BreakerPolicy
from tests.helpers.github_api import FakeClock


def _breaker(
    clock: FakeClock,
    transitions: list[tuple[BreakerState, BreakerState]] | None = None,
    **policy: object,
) -> CircuitBreaker:
    settings: dict[str, object] = {
        "failure_threshold": 3,
        "failure_rate_threshold": None,
        "cooldown_s": 10.0,
    }
    settings.update(policy)
    return CircuitBreaker(
        BreakerPolicy(**settings),  # type: ignore[arg-type]
        clock=clock,
        on_transition=(
            (lambda old, new: transitions.append((old, new)))
            if transitions is not None
            else None
        ),
    )


def test_opens_after_consecutive_failures() -> None:
    """Reaching the failure threshold opens the breaker."""
    clock = FakeClock()
    breaker = _breaker(clock)

    for _ in range(2):
        breaker.record_failure()
    assert breaker.is_closed

    breaker.record_failure()
    assert breaker.state is BreakerState.OPEN
    assert not breaker.allow_request()
    assert breaker.retry_in() == 10.0


def test_success_resets_consecutive_failures() -> None:
    """A success between failures restarts the count."""
    breaker = _breaker(FakeClock())
    breaker.record_failure()
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()

    assert breaker.is_closed
    assert breaker.consecutive_failures == 1


def test_half_open_admits_single_probe() -> None:
    """After the cooldown only one probe passes."""
    clock = FakeClock()
    breaker = _breaker(clock)
    for _ in range(3):
        breaker.record_failure()

    clock.advance(10.0)
    assert breaker.state is BreakerState.HALF_OPEN
    assert breaker.allow_request(), "first probe admitted"
    assert not breaker.allow_request(), "second concurrent probe refused"


def test_probe_success_closes() -> None:
    """A successful probe closes the breaker."""
    clock = FakeClock()
    transitions: list[tuple[BreakerState, BreakerState]] = []
    breaker = _breaker(clock, transitions)
    for _ in range(3):
        breaker.record_failure()
    clock.advance(10.0)
    assert breaker.allow_request()

    breaker.record_success()

    assert breaker.is_closed
    assert transitions == [
        (BreakerState.CLOSED, BreakerState.OPEN),
        (BreakerState.OPEN, BreakerState.HALF_OPEN),
        (BreakerState.HALF_OPEN, BreakerState.CLOSED),
    ]


def test_probe_failure_reopens() -> None:
    """A failed probe re-opens the breaker for a fresh cooldown."""
    clock = FakeClock()
    breaker = _breaker(clock)
    for _ in range(3):
        breaker.record_failure()
    clock.advance(10.0)
    assert breaker.allow_request()

    breaker.record_failure()

    assert breaker.state is BreakerState.OPEN
    assert breaker.retry_in() == 10.0


def test_released_probe_can_be_retried() -> None:
    """A probe cancelled before recording an outcome frees the slot."""
    clock = FakeClock()
    breaker = _breaker(clock)
    for _ in range(3):
        breaker.record_failure()
    clock.advance(10.0)
    assert breaker.allow_request()

    breaker.release_probe()

    assert breaker.allow_request()


def test_failure_rate_opens_breaker() -> None:
    """The rolling failure rate opens the breaker once enough calls are seen."""
    breaker = _breaker(
        FakeClock(),
        failure_threshold=100,
        failure_rate_threshold=0.5,
        window_size=4,
        minimum_calls=4,
    )
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()
    assert breaker.is_closed, "below minimum_calls the rate is ignored"

    breaker.record_success()

    assert breaker.is_closed, "a success never opens the breaker"
    breaker.record_failure()
    assert breaker.state is BreakerState.OPEN


def _open_then_half_open(clock: FakeClock, breaker: CircuitBreaker) -> None:
    for _ in range(3):
        breaker.record_failure()
    clock.advance(10.0)


def test_late_success_from_closed_generation_does_not_close_half_open() -> None:
    """A slow call admitted before the breaker opened cannot settle the trial call."""
    clock = FakeClock()
    breaker = _breaker(clock)
    assert breaker.allow_request()
    slow_call = breaker.generation

    _open_then_half_open(clock, breaker)
    assert breaker.allow_request(), "trial call admitted"
    trial_call = breaker.generation

    breaker.record_success(generation=slow_call)
    assert breaker.state is BreakerState.HALF_OPEN
    assert not breaker.allow_request(), "trial call is still in flight"

    breaker.record_success(generation=trial_call)
    assert breaker.state is BreakerState.CLOSED


def test_late_failure_from_closed_generation_does_not_reopen() -> None:
    """A stale failure leaves the half-open trial call in charge."""
    clock = FakeClock()
    transitions: list[tuple[BreakerState, BreakerState]] = []
    breaker = _breaker(clock, transitions)
    slow_call = breaker.generation

    _open_then_half_open(clock, breaker)
    assert breaker.allow_request()

    breaker.record_failure(generation=slow_call)
    breaker.release_probe(generation=slow_call)

    assert breaker.state is BreakerState.HALF_OPEN
    assert not breaker.allow_request(), "stale release must not free the slot"
    assert transitions == [
        (BreakerState.CLOSED, BreakerState.OPEN),
        (BreakerState.OPEN, BreakerState.HALF_OPEN),
    ]
