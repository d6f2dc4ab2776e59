"""Falcon error handlers mapping domain errors onto HTTP responses.

Usage
-----
Register error handlers on the Falcon app::

    from scmgate.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from scmgate.gateway.errors import CircuitOpenError
from scmgate.webhooks.errors import (
    UnsupportedEventTypeError,
    WebhookPayloadError,
    WebhookSignatureError,
)

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidInputError",
    "handle_circuit_open",
    "handle_invalid_input",
    "handle_invalid_signature",
    "handle_unsupported_event",
    "handle_webhook_payload",
    "register_error_handlers",
]


class InvalidInputError(Exception):
    """Raised for client validation errors that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


def _error_body(title: str, ex: Exception) -> dict[str, str]:
    return {"title": title, "description": str(ex)}


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_webhook_payload(
    _req: Request,
    resp: Response,
    ex: WebhookPayloadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookPayloadError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    resp.media = _error_body("Invalid webhook payload", ex)


async def handle_invalid_signature(
    _req: Request,
    resp: Response,
    ex: WebhookSignatureError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookSignatureError`` to an HTTP 401 JSON response."""
    resp.status = falcon.HTTP_401
    resp.media = _error_body("Invalid webhook signature", ex)


async def handle_unsupported_event(
    _req: Request,
    resp: Response,
    ex: UnsupportedEventTypeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UnsupportedEventTypeError`` to an HTTP 422 JSON response.

    The body echoes the event type so GitHub's delivery log shows why the
    delivery was refused.
    """
    resp.status = falcon.HTTP_422
    media = _error_body("Unsupported event", ex)
    if ex.event_type is not None:
        media["event"] = ex.event_type
    resp.media = media


async def handle_circuit_open(
    _req: Request,
    resp: Response,
    ex: CircuitOpenError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``CircuitOpenError`` to HTTP 503 with a ``Retry-After`` hint."""
    resp.status = falcon.HTTP_503
    resp.set_header("Retry-After", str(max(int(ex.retry_in_s), 1)))
    resp.media = _error_body("GitHub unavailable", ex)


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Attach every scmgate error handler to ``app``."""
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(WebhookPayloadError, handle_webhook_payload)
    app.add_error_handler(WebhookSignatureError, handle_invalid_signature)
    app.add_error_handler(UnsupportedEventTypeError, handle_unsupported_event)
    app.add_error_handler(CircuitOpenError, handle_circuit_open)
