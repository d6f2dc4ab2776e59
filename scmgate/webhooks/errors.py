"""Webhook normalisation errors."""

from __future__ import annotations


class WebhookError(ValueError):
    """Base class for webhook ingress failures."""


class UnsupportedEventTypeError(WebhookError):
    """Raised for an event family other than ``pull_request`` or ``push``.

    Attributes
    ----------
    event_type
        Value of the ``X-GitHub-Event`` header, or ``None`` when absent.

    """

    def __init__(self, message: str, *, event_type: str | None) -> None:
        """Initialise with the offending event type."""
        self.event_type = event_type
        super().__init__(message)

    @classmethod
    def for_event(cls, event_type: str) -> UnsupportedEventTypeError:
        """Return an error for an event family this service does not handle."""
        return cls(f"Event {event_type} not supported", event_type=event_type)

    @classmethod
    def missing_header(cls) -> UnsupportedEventTypeError:
        """Return an error for a request without an event type header."""
        return cls("Missing X-GitHub-Event header", event_type=None)


class WebhookPayloadError(WebhookError):
    """Raised when a required payload field is missing or has the wrong type."""

    @classmethod
    def missing_field(cls, event_type: str, field: str) -> WebhookPayloadError:
        """Return an error for an absent or ill-typed payload field."""
        return cls(f"{event_type} payload missing or invalid field: {field}")

    @classmethod
    def not_an_object(cls) -> WebhookPayloadError:
        """Return an error for a payload that is not a JSON object."""
        return cls("Webhook payload must be a JSON object")


class WebhookSignatureError(WebhookError):
    """Raised when a delivery's HMAC signature is absent or wrong."""

    @classmethod
    def missing(cls) -> WebhookSignatureError:
        """Return an error for a delivery without a signature header."""
        return cls("Missing X-Hub-Signature-256 header")

    @classmethod
    def mismatch(cls) -> WebhookSignatureError:
        """Return an error for a signature that does not match the body."""
        return cls("Webhook signature does not match payload")
