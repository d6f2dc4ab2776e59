"""HMAC-SHA256 verification of GitHub webhook deliveries."""

from __future__ import annotations

import hashlib
import hmac

from .errors import WebhookSignatureError

SIGNATURE_HEADER = "X-Hub-Signature-256"
_SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for ``body``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{_SIGNATURE_PREFIX}{digest}"


def verify_signature(body: bytes, signature: str | None, secret: str) -> None:
    """Check ``signature`` against the raw request ``body``.

    Raises
    ------
    WebhookSignatureError
        If the signature is absent, lacks the ``sha256=`` prefix, or does not
        match.

    """
    if not signature:
        raise WebhookSignatureError.missing()
    if not signature.startswith(_SIGNATURE_PREFIX):
        raise WebhookSignatureError.mismatch()
    if not hmac.compare_digest(compute_signature(body, secret), signature):
        raise WebhookSignatureError.mismatch()
