"""scmgate: resilient GitHub source control adapter for a CI orchestrator."""

from __future__ import annotations

from scmgate.gateway import GatewayConfig, ResilientGateway
from scmgate.identity import IdentityResolver, Locator
from scmgate.scm import GitHubScm, ScmProvider
from scmgate.webhooks import normalize_webhook

__all__ = [
    "GatewayConfig",
    "GitHubScm",
    "IdentityResolver",
    "Locator",
    "ResilientGateway",
    "ScmProvider",
    "normalize_webhook",
]
