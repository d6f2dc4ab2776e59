"""GitHub webhook ingress resource.

``POST /webhooks/github`` verifies the delivery signature when a secret is
configured, normalises the payload, and answers with the canonical event as
JSON. Error mapping lives in :mod:`scmgate.api.errors`.

Usage
-----
Register the resource on the Falcon app::

    app.add_route(
        "/webhooks/github",
        GitHubWebhookResource(scm=scm, webhook_secret=secret),
    )

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from scmgate.api.errors import InvalidInputError
from scmgate.logging import get_logger, log_info
from scmgate.webhooks.normalizer import normalize_webhook
from scmgate.webhooks.signature import SIGNATURE_HEADER, verify_signature

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from scmgate.scm.protocol import ScmProvider
    from scmgate.webhooks.models import WebhookEvent

__all__ = ["GitHubWebhookResource"]

logger = get_logger(__name__)


class GitHubWebhookResource:
    """Resource normalising GitHub webhook deliveries.

    Parameters
    ----------
    scm
        Provider whose ``parse_hook`` is used; the pure normaliser is used
        when omitted.
    webhook_secret
        Shared secret for ``X-Hub-Signature-256`` verification. Signatures
        are not checked when ``None``.

    """

    def __init__(
        self,
        *,
        scm: ScmProvider | None = None,
        webhook_secret: str | None = None,
    ) -> None:
        """Configure the resource."""
        self._scm = scm
        self._webhook_secret = webhook_secret

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /webhooks/github requests.

        Parameters
        ----------
        req
            Falcon request carrying the GitHub delivery.
        resp
            Falcon response populated with the canonical event.

        """
        body = await req.stream.read()
        if self._webhook_secret is not None:
            verify_signature(
                body, req.get_header(SIGNATURE_HEADER), self._webhook_secret
            )

        try:
            payload = msgspec.json.decode(body)
        except msgspec.DecodeError as exc:
            msg = "request body is not valid JSON"
            raise InvalidInputError(msg, field="body") from exc

        event = await self._normalise(req.headers, payload)
        log_info(
            logger,
            "Accepted %s webhook for %s (delivery %s)",
            event.action,
            event.checkout_url,
            req.get_header("X-GitHub-Delivery") or "unknown",
        )
        resp.data = msgspec.json.encode(event)
        resp.content_type = falcon.MEDIA_JSON
        resp.status = falcon.HTTP_200

    async def _normalise(
        self, headers: dict[str, str], payload: typ.Any  # noqa: ANN401
    ) -> WebhookEvent:
        if self._scm is not None:
            return await self._scm.parse_hook(headers, payload)
        return normalize_webhook(headers, payload)
