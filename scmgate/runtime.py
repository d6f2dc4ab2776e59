"""scmgate runtime entrypoint.

This module provides the ASGI application factory used by Granian. It wires
the gateway, resolver, and GitHub provider from environment configuration
and delegates to :func:`scmgate.api.app.create_app` for application
construction, keeping the ``scmgate.runtime:create_app`` entrypoint stable.

Configuration is driven by environment variables:

- ``SCMGATE_HOST``: Bind address (default ``0.0.0.0``)
- ``SCMGATE_PORT``: Listen port (default ``8080``)
- ``SCMGATE_LOG_LEVEL``: Log level (default ``INFO``)
- ``SCMGATE_WEBHOOK_SECRET``: Webhook signing secret (optional; enables
  ``X-Hub-Signature-256`` verification when set)
- ``SCMGATE_GITHUB_API_URL``, ``SCMGATE_RETRY_*``, ``SCMGATE_BREAKER_*``,
  ``SCMGATE_CALL_TIMEOUT_S``: see :mod:`scmgate.gateway.config`
- ``SCMGATE_RESOLVER_CACHE_TTL_S``: see :mod:`scmgate.identity.config`

Run the service directly with ``python -m scmgate.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from scmgate.gateway.errors import GatewayConfigError
from scmgate.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid SCMGATE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    Returns
    -------
    falcon.asgi.App
        Application serving health, stats, and webhook endpoints.

    Raises
    ------
    SystemExit
        If any ``SCMGATE_*`` variable holds an invalid value.

    """
    from scmgate.api.app import AppDependencies
    from scmgate.api.app import create_app as _create_api_app
    from scmgate.gateway.client import ResilientGateway
    from scmgate.gateway.config import GatewayConfig
    from scmgate.identity.config import ResolverConfig
    from scmgate.identity.resolver import IdentityResolver
    from scmgate.scm.github import GitHubScm

    try:
        gateway_config = GatewayConfig.from_env()
        resolver_config = ResolverConfig.from_env()
    except GatewayConfigError as exc:
        log_error(logger, "Invalid scmgate configuration: %s", exc)
        raise SystemExit(1) from exc

    gateway = ResilientGateway(gateway_config)
    scm = GitHubScm(gateway, IdentityResolver(gateway, config=resolver_config))
    webhook_secret = os.environ.get("SCMGATE_WEBHOOK_SECRET") or None
    if webhook_secret is None:
        log_warning(
            logger,
            "SCMGATE_WEBHOOK_SECRET not set; webhook signatures are not verified",
        )
    return _create_api_app(AppDependencies(scm=scm, webhook_secret=webhook_secret))


def main() -> None:
    """Start the scmgate runtime server using Granian.

    Reads ``SCMGATE_HOST``, ``SCMGATE_PORT``, and ``SCMGATE_LOG_LEVEL`` from
    the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("SCMGATE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("SCMGATE_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("SCMGATE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid SCMGATE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting scmgate runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "scmgate.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
