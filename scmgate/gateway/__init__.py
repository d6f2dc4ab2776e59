"""Resilient call gateway for the GitHub REST API."""

from __future__ import annotations

from .breaker import BreakerState, CircuitBreaker
from .client import ResilientGateway
from .config import BreakerPolicy, GatewayConfig, RetryPolicy
from .errors import (
    CircuitOpenError,
    GatewayConfigError,
    GatewayError,
    InvalidCallError,
    RemoteRejectionError,
    ResponseShapeError,
    TransientGatewayError,
)
from .models import CallDescriptor
from .observability import ErrorCategory, GatewayEventLogger, GatewayEventType
from .stats import GatewayHealthSnapshot

__all__ = [
    "BreakerPolicy",
    "BreakerState",
    "CallDescriptor",
    "CircuitBreaker",
    "CircuitOpenError",
    "ErrorCategory",
    "GatewayConfig",
    "GatewayConfigError",
    "GatewayError",
    "GatewayEventLogger",
    "GatewayEventType",
    "GatewayHealthSnapshot",
    "InvalidCallError",
    "RemoteRejectionError",
    "ResilientGateway",
    "ResponseShapeError",
    "RetryPolicy",
    "TransientGatewayError",
]
