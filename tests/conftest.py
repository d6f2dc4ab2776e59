"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import secrets
import typing as typ

import pytest
import pytest_asyncio

from scmgate.gateway.client import ResilientGateway
from scmgate.gateway.config import BreakerPolicy, GatewayConfig, RetryPolicy
from scmgate.identity.config import ResolverConfig
from scmgate.identity.resolver import IdentityResolver
from scmgate.scm.github import GitHubScm
from tests.helpers.github_api import API_ROOT, FakeClock, FakeGitHub, RecordingSleep

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture
def token() -> str:
    """Return a throwaway bearer token."""
    return secrets.token_hex(8)


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an empty fake GitHub API."""
    return FakeGitHub()


@pytest.fixture
def clock() -> FakeClock:
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    """Provide a sleep replacement that records backoff delays."""
    return RecordingSleep()


def make_config(
    *,
    max_retries: int = 2,
    failure_threshold: int = 5,
    cooldown_s: float = 30.0,
    call_timeout_s: float | None = 10.0,
) -> GatewayConfig:
    """Build a gateway configuration pointed at the fake API root."""
    return GatewayConfig(
        retry=RetryPolicy(
            max_retries=max_retries,
            initial_delay_s=0.5,
            max_delay_s=8.0,
            jitter_s=0.0,
        ),
        breaker=BreakerPolicy(
            failure_threshold=failure_threshold,
            failure_rate_threshold=None,
            cooldown_s=cooldown_s,
            call_timeout_s=call_timeout_s,
        ),
        base_url=API_ROOT,
    )


type GatewayFactory = cabc.Callable[..., ResilientGateway]


@pytest_asyncio.fixture
async def gateway_factory(
    fake_github: FakeGitHub, clock: FakeClock, sleep: RecordingSleep
) -> cabc.AsyncIterator[GatewayFactory]:
    """Build gateways wired to the fake API, clock, and sleep."""
    clients = []

    def _build(**overrides: typ.Any) -> ResilientGateway:  # noqa: ANN401
        http_client = fake_github.client()
        clients.append(http_client)
        return ResilientGateway(
            make_config(**overrides),
            http_client=http_client,
            clock=clock,
            sleep=sleep,
        )

    yield _build
    for http_client in clients:
        await http_client.aclose()


@pytest_asyncio.fixture
async def gateway(gateway_factory: GatewayFactory) -> ResilientGateway:
    """Provide a gateway with default test settings."""
    return gateway_factory()


@pytest.fixture
def resolver(gateway: ResilientGateway, clock: FakeClock) -> IdentityResolver:
    """Provide a resolver with a 60 second cache on the fake clock."""
    return IdentityResolver(
        gateway, config=ResolverConfig(cache_ttl_s=60.0), clock=clock
    )


@pytest.fixture
def scm(gateway: ResilientGateway, resolver: IdentityResolver) -> GitHubScm:
    """Provide a GitHub provider backed by the fake API."""
    return GitHubScm(gateway, resolver)
