"""Errors raised by the resilient call gateway."""

from __future__ import annotations

# Content preview length for error messages
_DETAIL_PREVIEW_LIMIT = 200


def _preview(detail: str) -> str:
    if len(detail) > _DETAIL_PREVIEW_LIMIT:
        return detail[:_DETAIL_PREVIEW_LIMIT] + "..."
    return detail


class GatewayError(RuntimeError):
    """Base class for every failure surfaced by the gateway.

    Attributes
    ----------
    operation
        Qualified ``scope.operation`` name of the failed call, when known.
    status_code
        HTTP status code returned by GitHub, when one was received.

    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialise with a message and optional call context."""
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)


class TransientGatewayError(GatewayError):
    """Raised for failures worth retrying: timeouts, network errors, 5xx, 429."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        status_code: int | None = None,
        retry_after: int | None = None,
        timed_out: bool = False,
    ) -> None:
        """Initialise with call context and an optional Retry-After hint."""
        self.retry_after = retry_after
        self.timed_out = timed_out
        super().__init__(message, operation=operation, status_code=status_code)

    @classmethod
    def timeout(cls, operation: str) -> TransientGatewayError:
        """Return an error for a call that exceeded its timeout."""
        return cls(
            f"GitHub call {operation} timed out", operation=operation, timed_out=True
        )

    @classmethod
    def network_error(cls, operation: str, detail: str) -> TransientGatewayError:
        """Return an error for DNS, connection, TLS, and similar failures."""
        return cls(
            f"GitHub call {operation} network error: {_preview(detail)}",
            operation=operation,
        )

    @classmethod
    def server_error(cls, operation: str, status_code: int) -> TransientGatewayError:
        """Return an error for a 5xx response."""
        return cls(
            f"GitHub call {operation} failed with HTTP {status_code}",
            operation=operation,
            status_code=status_code,
        )

    @classmethod
    def rate_limited(
        cls, operation: str, retry_after: int | None = None
    ) -> TransientGatewayError:
        """Return an error for a 429 response."""
        msg = f"GitHub call {operation} rate limited"
        if retry_after is not None:
            msg = f"{msg}, retry after {retry_after}s"
        return cls(msg, operation=operation, status_code=429, retry_after=retry_after)


class RemoteRejectionError(GatewayError):
    """Raised when GitHub rejects a call with a 4xx response. Never retried."""

    @classmethod
    def http_error(
        cls, operation: str, status_code: int, detail: str | None = None
    ) -> RemoteRejectionError:
        """Return an error for a non-retryable HTTP error response."""
        msg = f"GitHub call {operation} rejected with HTTP {status_code}"
        if detail:
            msg = f"{msg}: {_preview(detail)}"
        return cls(msg, operation=operation, status_code=status_code)


class CircuitOpenError(GatewayError):
    """Raised without a network attempt while the circuit breaker is open.

    Distinct from :class:`TransientGatewayError` so callers can tell "GitHub is
    unavailable" apart from "this call failed".
    """

    def __init__(
        self, message: str, *, operation: str | None = None, retry_in_s: float = 0.0
    ) -> None:
        """Initialise with the time remaining until a probe is allowed."""
        self.retry_in_s = retry_in_s
        super().__init__(message, operation=operation)

    @classmethod
    def open(cls, operation: str, retry_in_s: float) -> CircuitOpenError:
        """Return an error for a call short-circuited by an open breaker."""
        return cls(
            f"GitHub circuit breaker is open; {operation} not attempted "
            f"(next probe in {retry_in_s:.1f}s)",
            operation=operation,
            retry_in_s=retry_in_s,
        )


class InvalidCallError(GatewayError):
    """Raised when a call descriptor cannot be mapped onto a GitHub route."""

    @classmethod
    def unknown_operation(cls, scope: str, operation: str) -> InvalidCallError:
        """Return an error for an operation outside the route catalogue."""
        return cls(
            f"Unknown GitHub operation {scope}.{operation}",
            operation=f"{scope}.{operation}",
        )

    @classmethod
    def missing_parameter(cls, operation: str, name: str) -> InvalidCallError:
        """Return an error for a route parameter absent from the call."""
        return cls(
            f"GitHub call {operation} is missing required parameter {name!r}",
            operation=operation,
        )


class ResponseShapeError(GatewayError):
    """Raised when a GitHub response is missing expected fields."""

    @classmethod
    def missing(cls, operation: str, field: str) -> ResponseShapeError:
        """Return an error for a missing response field."""
        return cls(
            f"GitHub response for {operation} missing expected field: {field}",
            operation=operation,
        )

    @classmethod
    def unexpected(cls, operation: str, detail: str) -> ResponseShapeError:
        """Return an error for a response whose fields have the wrong shape."""
        return cls(
            f"GitHub response for {operation} has unexpected shape: {_preview(detail)}",
            operation=operation,
        )

    @classmethod
    def invalid_json(cls, operation: str, content: str) -> ResponseShapeError:
        """Return an error for a body that is not valid JSON."""
        return cls(
            f"GitHub response for {operation} is not valid JSON: {_preview(content)}",
            operation=operation,
        )


class GatewayConfigError(RuntimeError):
    """Raised when gateway configuration or credentials are invalid."""

    @classmethod
    def empty_token(cls) -> GatewayConfigError:
        """Return an error when a call carries an empty credential."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def invalid_env(cls, name: str, raw: str, expected: str) -> GatewayConfigError:
        """Return an error for an unparseable environment variable."""
        return cls(f"{name} must be {expected}, got: {raw!r}")
