"""Health probe resources and the gateway statistics endpoint.

``HealthResource`` and ``ReadyResource`` are stateless and always registered.
``StatsResource`` exposes the provider's call health snapshot and is only
registered when a provider is wired into the app.

Usage
-----
Register health endpoints on the Falcon app::

    from scmgate.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())
    app.add_route("/stats", StatsResource(scm))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import msgspec

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from scmgate.scm.protocol import ScmProvider

__all__ = ["HealthResource", "ReadyResource", "StatsResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource returning ``{"status": "ready"}``.

    Readiness does not depend on the breaker: an open breaker means GitHub is
    struggling, not that this process cannot accept webhooks.
    """

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK


class StatsResource:
    """Gateway statistics resource.

    Responds with the :class:`~scmgate.gateway.stats.GatewayHealthSnapshot`
    of the wired provider: request counters, average latency, and breaker
    state.
    """

    def __init__(self, scm: ScmProvider) -> None:
        """Configure the resource with the provider whose stats it reports."""
        self._scm = scm

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /stats requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with the health snapshot.

        """
        resp.media = msgspec.to_builtins(self._scm.stats())
        resp.status = HTTPStatus.OK
