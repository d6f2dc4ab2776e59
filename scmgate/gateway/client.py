"""Resilient call gateway: the single choke point for GitHub REST calls.

Each invocation applies its own bearer credential, passes through the circuit
breaker, is bounded by a per-call timeout, and retries transient failures with
exponential backoff. Usage counters are kept for :meth:`ResilientGateway.stats`.
"""

from __future__ import annotations

import asyncio
import time
import typing as typ

import httpx
import msgspec
import tenacity
from tenacity.wait import wait_base

from .breaker import CircuitBreaker
from .config import GatewayConfig
from .errors import (
    CircuitOpenError,
    GatewayConfigError,
    GatewayError,
    RemoteRejectionError,
    ResponseShapeError,
    TransientGatewayError,
)
from .observability import GatewayEventLogger
from .routes import route_for
from .stats import GatewayHealthSnapshot, GatewayStats

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import CallDescriptor
    from .routes import PreparedRequest

_HTTP_REDIRECT_THRESHOLD = 300
_HTTP_SERVER_ERROR_THRESHOLD = 500
_HTTP_RATE_LIMITED = 429
_HTTP_NO_CONTENT = 204


def _get_retry_after(response: httpx.Response) -> int | None:
    """Extract Retry-After header value if present and numeric."""
    retry_after = response.headers.get("Retry-After")
    if retry_after and retry_after.isdigit():
        return int(retry_after)
    return None


class RetryAfterWait(wait_base):
    """Tenacity wait strategy that honours GitHub's ``Retry-After`` hint.

    A :class:`TransientGatewayError` carrying ``retry_after`` waits that many
    seconds, capped at ``max_delay_s``. Every other outcome uses
    ``fallback_wait``.
    """

    def __init__(self, *, max_delay_s: float, fallback_wait: wait_base) -> None:
        """Configure the cap and the fallback schedule."""
        self._max_delay_s = max_delay_s
        self._fallback_wait = fallback_wait

    def __call__(self, retry_state: tenacity.RetryCallState) -> float:
        """Return the delay before the next attempt."""
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        if isinstance(error, TransientGatewayError) and error.retry_after is not None:
            return float(min(error.retry_after, self._max_delay_s))
        return float(self._fallback_wait(retry_state))


def _error_detail(response: httpx.Response) -> str | None:
    """Return GitHub's ``message`` field from an error body, if any."""
    try:
        data = msgspec.json.decode(response.content)
    except msgspec.DecodeError:
        return response.text or None
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str):
            return message
    return None


class ResilientGateway:
    """Circuit-breaker-protected, retrying GitHub REST caller.

    Parameters
    ----------
    config
        Gateway configuration; defaults are used when omitted.
    http_client
        Optional ``httpx.AsyncClient`` (for example one built on
        ``httpx.MockTransport`` in tests). When omitted the gateway creates
        and owns its client.
    clock
        Monotonic clock for breaker cooldowns and latency.
    sleep
        Coroutine used for backoff delays.
    event_logger
        Structured event logger for retries, failures, and transitions.

    Examples
    --------
    >>> gateway = ResilientGateway(GatewayConfig())
    >>> # repo = await gateway.invoke(
    >>> #     CallDescriptor("get", token, {"owner": "octo", "repo": "reef"})
    >>> # )

    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: cabc.Callable[[], float] = time.monotonic,
        sleep: cabc.Callable[[float], cabc.Awaitable[None]] = asyncio.sleep,
        event_logger: GatewayEventLogger | None = None,
    ) -> None:
        """Initialise the gateway with a closed breaker and zeroed counters."""
        self._config = config or GatewayConfig()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(follow_redirects=True)
        self._clock = clock
        self._sleep = sleep
        self._events = event_logger or GatewayEventLogger()
        self._breaker = CircuitBreaker(
            self._config.breaker,
            clock=clock,
            on_transition=self._events.log_breaker_transition,
        )
        self._stats = GatewayStats()

    @property
    def config(self) -> GatewayConfig:
        """Read-only access to the gateway configuration."""
        return self._config

    @property
    def breaker(self) -> CircuitBreaker:
        """Return the breaker shared by every call through this gateway."""
        return self._breaker

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    def stats(self) -> GatewayHealthSnapshot:
        """Return the current health snapshot."""
        return self._stats.snapshot(self._breaker)

    async def invoke(self, descriptor: CallDescriptor) -> typ.Any:  # noqa: ANN401
        """Issue ``descriptor`` against GitHub and return the decoded JSON body.

        Raises
        ------
        InvalidCallError
            If the operation is not in the catalogue or misses a parameter.
        GatewayConfigError
            If the descriptor carries an empty token.
        CircuitOpenError
            If the breaker refuses the call; no network attempt is made.
        TransientGatewayError
            If every attempt failed transiently.
        RemoteRejectionError
            If GitHub rejected the call with a 4xx response, or answered with
            a redirect that could not be followed.
        ResponseShapeError
            If the response body is not valid JSON.

        """
        request = route_for(descriptor.scope, descriptor.operation).prepare(
            descriptor.qualified_name, descriptor.params
        )
        if not descriptor.token.strip():
            raise GatewayConfigError.empty_token()

        self._stats.record_started()
        started = self._clock()
        succeeded = False
        try:
            result = await self._invoke_with_retry(descriptor, request)
            succeeded = True
        except GatewayError as exc:
            self._events.log_call_failed(descriptor, exc)
            raise
        finally:
            self._stats.record_finished(self._clock() - started, succeeded=succeeded)
        return result

    async def _invoke_with_retry(
        self, descriptor: CallDescriptor, request: PreparedRequest
    ) -> typ.Any:  # noqa: ANN401
        policy = self._config.retry
        retrying = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(policy.max_retries + 1),
            wait=RetryAfterWait(
                max_delay_s=policy.max_delay_s,
                fallback_wait=tenacity.wait_exponential(
                    multiplier=policy.initial_delay_s, max=policy.max_delay_s
                )
                + tenacity.wait_random(0, policy.jitter_s),
            ),
            retry=tenacity.retry_if_exception_type(TransientGatewayError),
            sleep=self._sleep,
            before_sleep=lambda state: self._log_retry(descriptor, state),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                result = await self._attempt(descriptor, request)
        return result

    def _log_retry(
        self, descriptor: CallDescriptor, state: tenacity.RetryCallState
    ) -> None:
        error = state.outcome.exception() if state.outcome is not None else None
        delay = state.next_action.sleep if state.next_action is not None else 0.0
        if error is not None:
            self._events.log_retry(
                descriptor,
                attempt=state.attempt_number,
                delay_s=delay,
                error=error,
            )

    async def _attempt(
        self, descriptor: CallDescriptor, request: PreparedRequest
    ) -> typ.Any:  # noqa: ANN401
        """Run one breaker-guarded attempt."""
        if not self._breaker.allow_request():
            retry_in = self._breaker.retry_in()
            self._stats.record_short_circuit()
            self._events.log_short_circuit(descriptor, retry_in_s=retry_in)
            raise CircuitOpenError.open(descriptor.qualified_name, retry_in)

        generation = self._breaker.generation
        try:
            result = await self._exchange(descriptor, request)
        except TransientGatewayError:
            self._breaker.record_failure(generation=generation)
            raise
        except GatewayError:
            # GitHub answered, so the provider itself is healthy.
            self._breaker.record_success(generation=generation)
            raise
        except BaseException:
            self._breaker.release_probe(generation=generation)
            raise
        self._breaker.record_success(generation=generation)
        return result

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": self._config.user_agent,
            "X-GitHub-Api-Version": self._config.api_version,
        }

    async def _exchange(
        self, descriptor: CallDescriptor, request: PreparedRequest
    ) -> typ.Any:  # noqa: ANN401
        """Send one HTTP request and decode its response."""
        operation = descriptor.qualified_name
        url = f"{self._config.base_url.rstrip('/')}{request.path}"
        try:
            async with asyncio.timeout(self._config.breaker.call_timeout_s):
                response = await self._client.request(
                    request.method,
                    url,
                    params=request.query or None,
                    json=request.body,
                    headers=self._headers(descriptor.token),
                    follow_redirects=True,
                )
        except (TimeoutError, httpx.TimeoutException) as exc:
            self._stats.record_timeout()
            raise TransientGatewayError.timeout(operation) from exc
        except httpx.RequestError as exc:
            raise TransientGatewayError.network_error(operation, str(exc)) from exc
        return self._decode(operation, response)

    def _decode(
        self, operation: str, response: httpx.Response
    ) -> typ.Any:  # noqa: ANN401
        status = response.status_code
        if status == _HTTP_RATE_LIMITED:
            raise TransientGatewayError.rate_limited(
                operation, _get_retry_after(response)
            )
        if status >= _HTTP_SERVER_ERROR_THRESHOLD:
            raise TransientGatewayError.server_error(operation, status)
        if status >= _HTTP_REDIRECT_THRESHOLD:
            # 3xx here had no followable Location
            raise RemoteRejectionError.http_error(
                operation, status, _error_detail(response)
            )
        if status == _HTTP_NO_CONTENT or not response.content:
            return {}
        try:
            return msgspec.json.decode(response.content)
        except msgspec.DecodeError as exc:
            raise ResponseShapeError.invalid_json(operation, response.text) from exc
