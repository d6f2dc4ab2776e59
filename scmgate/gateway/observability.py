"""Observability primitives for the resilient call gateway.

Retries, failures, short-circuits, and breaker transitions are emitted as
structured ``[event] key=value`` log lines suitable for log aggregators.
Credentials never appear in these lines.
"""

from __future__ import annotations

import enum
import logging
import typing as typ

from .errors import (
    CircuitOpenError,
    GatewayConfigError,
    InvalidCallError,
    RemoteRejectionError,
    ResponseShapeError,
    TransientGatewayError,
)

if typ.TYPE_CHECKING:
    from .breaker import BreakerState
    from .models import CallDescriptor

logger = logging.getLogger(__name__)


class GatewayEventType(enum.StrEnum):
    """Structured log event types for gateway observability."""

    CALL_RETRYING = "gateway.call.retrying"
    CALL_FAILED = "gateway.call.failed"
    CALL_SHORT_CIRCUITED = "gateway.call.short_circuited"
    BREAKER_TRANSITION = "gateway.breaker.transition"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    CIRCUIT_OPEN = "circuit_open"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (TransientGatewayError, ErrorCategory.TRANSIENT),
    (CircuitOpenError, ErrorCategory.CIRCUIT_OPEN),
    (RemoteRejectionError, ErrorCategory.CLIENT_ERROR),
    (InvalidCallError, ErrorCategory.CLIENT_ERROR),
    (ResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GatewayConfigError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alerting purposes."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class GatewayEventLogger:
    """Emit structured gateway events via Python logging.

    Retries and short-circuits log at WARNING, final failures at ERROR, and
    breaker transitions at WARNING when opening and INFO otherwise.
    """

    def log_retry(
        self,
        descriptor: CallDescriptor,
        *,
        attempt: int,
        delay_s: float,
        error: BaseException,
    ) -> None:
        """Log a transient failure that will be retried."""
        logger.warning(
            "[%s] operation=%s attempt=%d delay_seconds=%.3f error=%s",
            GatewayEventType.CALL_RETRYING,
            descriptor.qualified_name,
            attempt,
            delay_s,
            error,
        )

    def log_call_failed(
        self, descriptor: CallDescriptor, error: BaseException
    ) -> None:
        """Log an invocation that surfaced an error to its caller."""
        logger.error(
            "[%s] operation=%s error_category=%s status_code=%s error=%s",
            GatewayEventType.CALL_FAILED,
            descriptor.qualified_name,
            categorize_error(error),
            getattr(error, "status_code", None),
            error,
        )

    def log_short_circuit(
        self, descriptor: CallDescriptor, *, retry_in_s: float
    ) -> None:
        """Log a call refused by the open breaker."""
        logger.warning(
            "[%s] operation=%s retry_in_seconds=%.3f",
            GatewayEventType.CALL_SHORT_CIRCUITED,
            descriptor.qualified_name,
            retry_in_s,
        )

    def log_breaker_transition(
        self, old_state: BreakerState, new_state: BreakerState
    ) -> None:
        """Log a breaker state change."""
        level = logging.WARNING if new_state == "open" else logging.INFO
        logger.log(
            level,
            "[%s] from_state=%s to_state=%s",
            GatewayEventType.BREAKER_TRANSITION,
            old_state,
            new_state,
        )
