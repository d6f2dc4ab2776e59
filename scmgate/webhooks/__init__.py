"""GitHub webhook normalisation."""

from __future__ import annotations

from .errors import (
    UnsupportedEventTypeError,
    WebhookError,
    WebhookPayloadError,
    WebhookSignatureError,
)
from .models import PullRequestAction, PullRequestEvent, PushEvent, WebhookEvent
from .normalizer import event_type_from_headers, normalize_action, normalize_webhook
from .signature import compute_signature, verify_signature

__all__ = [
    "PullRequestAction",
    "PullRequestEvent",
    "PushEvent",
    "UnsupportedEventTypeError",
    "WebhookError",
    "WebhookEvent",
    "WebhookPayloadError",
    "WebhookSignatureError",
    "compute_signature",
    "event_type_from_headers",
    "normalize_action",
    "normalize_webhook",
    "verify_signature",
]
