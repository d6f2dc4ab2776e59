"""Application factory for the scmgate Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints, the GitHub webhook endpoint, and, when a
provider is wired in, the gateway statistics endpoint.

Usage
-----
Create an app that only normalises webhooks::

    app = create_app()

Create a full app::

    from scmgate.api.app import AppDependencies, create_app

    deps = AppDependencies(scm=GitHubScm(gateway), webhook_secret="s3cret")
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from scmgate.api.errors import register_error_handlers
from scmgate.api.health.resources import HealthResource, ReadyResource, StatsResource
from scmgate.api.webhooks.resources import GitHubWebhookResource

if typ.TYPE_CHECKING:
    from scmgate.scm.protocol import ScmProvider

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    scm
        Source control provider; enables ``GET /stats`` and routes webhook
        normalisation through its ``parse_hook``.
    webhook_secret
        Shared secret for webhook signature verification.

    """

    scm: ScmProvider | None = None
    webhook_secret: str | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, webhooks are
        normalised without signature checks and ``/stats`` is not served.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    app = falcon.asgi.App()

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())
    app.add_route(
        "/webhooks/github",
        GitHubWebhookResource(scm=deps.scm, webhook_secret=deps.webhook_secret),
    )
    if deps.scm is not None:
        app.add_route("/stats", StatsResource(deps.scm))

    register_error_handlers(app)
    return app
