"""Unit tests for IdentityResolver."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import pytest

from scmgate.gateway.errors import RemoteRejectionError, ResponseShapeError
from scmgate.identity.config import ResolverConfig
from scmgate.identity.errors import UnresolvableIdentifierError
from scmgate.identity.models import Locator
from scmgate.identity.resolver import IdentityResolver

if typ.TYPE_CHECKING:
    from scmgate.gateway.client import ResilientGateway
    from tests.helpers.github_api import FakeClock, FakeGitHub

_CANONICAL = "github.com:1296269:main"
_LOOKUP_PATH = "/repositories/1296269"


@pytest.mark.asyncio
async def test_checkout_url_resolves_without_remote_call(
    resolver: IdentityResolver, fake_github: FakeGitHub, token: str
) -> None:
    """URL identifiers are parsed locally."""
    locator = await resolver.resolve("git@github.com:octo/reef.git#dev", token)

    assert locator == Locator("github.com", "octo", "reef", "dev")
    assert fake_github.requests == [], "no remote call expected for a URL"


@pytest.mark.asyncio
async def test_canonical_id_resolves_through_lookup(
    resolver: IdentityResolver, fake_github: FakeGitHub, token: str
) -> None:
    """Canonical ids are resolved with one get_by_id call."""
    fake_github.json("GET", _LOOKUP_PATH, {"id": 1296269, "full_name": "octo/reef"})

    locator = await resolver.resolve(_CANONICAL, token)

    assert locator == Locator("github.com", "octo", "reef", "main")
    request = fake_github.calls_to(_LOOKUP_PATH)[0]
    assert request.headers["Authorization"] == f"Bearer {token}"


@pytest.mark.asyncio
async def test_lookup_is_memoised_within_ttl(
    resolver: IdentityResolver,
    fake_github: FakeGitHub,
    clock: FakeClock,
    token: str,
) -> None:
    """A second resolve inside the TTL is served from the cache."""
    fake_github.json("GET", _LOOKUP_PATH, {"id": 1296269, "full_name": "octo/reef"})

    await resolver.resolve(_CANONICAL, token)
    clock.advance(30.0)
    await resolver.resolve(_CANONICAL, token)
    assert len(fake_github.calls_to(_LOOKUP_PATH)) == 1

    clock.advance(31.0)
    await resolver.resolve(_CANONICAL, token)
    assert len(fake_github.calls_to(_LOOKUP_PATH)) == 2, "expired entry refetched"


@pytest.mark.asyncio
async def test_failures_are_not_cached(
    resolver: IdentityResolver, fake_github: FakeGitHub, token: str
) -> None:
    """A failed lookup is retried on the next resolve."""
    fake_github.add(
        "GET",
        _LOOKUP_PATH,
        httpx.Response(404, json={"message": "Not Found"}),
        httpx.Response(200, json={"id": 1296269, "full_name": "octo/reef"}),
    )

    with pytest.raises(RemoteRejectionError):
        await resolver.resolve(_CANONICAL, token)
    assert len(resolver.cache) == 0

    locator = await resolver.resolve(_CANONICAL, token)
    assert locator.slug == "octo/reef"


@pytest.mark.asyncio
async def test_zero_ttl_disables_memoisation(
    gateway: ResilientGateway, fake_github: FakeGitHub, token: str
) -> None:
    """With a zero TTL every resolve performs a lookup."""
    resolver = IdentityResolver(gateway, config=ResolverConfig(cache_ttl_s=0))
    fake_github.json("GET", _LOOKUP_PATH, {"id": 1296269, "full_name": "octo/reef"})

    await resolver.resolve(_CANONICAL, token)
    await resolver.resolve(_CANONICAL, token)

    assert len(fake_github.calls_to(_LOOKUP_PATH)) == 2


@pytest.mark.asyncio
async def test_concurrent_misses_converge(
    resolver: IdentityResolver, fake_github: FakeGitHub, token: str
) -> None:
    """Concurrent resolves agree on one locator."""
    fake_github.json("GET", _LOOKUP_PATH, {"id": 1296269, "full_name": "octo/reef"})

    results = await asyncio.gather(
        *(resolver.resolve(_CANONICAL, token) for _ in range(3))
    )

    assert len(set(results)) == 1
    assert len(resolver.cache) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["octo/reef", "", "github.com:abc:main"])
async def test_unparseable_input_is_unresolvable(
    resolver: IdentityResolver, identifier: str, token: str
) -> None:
    """Input matching no grammar raises UnresolvableIdentifierError."""
    with pytest.raises(UnresolvableIdentifierError):
        await resolver.resolve(identifier, token)


@pytest.mark.asyncio
async def test_bad_full_name_is_unresolvable(
    resolver: IdentityResolver, fake_github: FakeGitHub, token: str
) -> None:
    """A full_name without an owner/repo split cannot be resolved."""
    fake_github.json("GET", _LOOKUP_PATH, {"id": 1296269, "full_name": "reef"})

    with pytest.raises(UnresolvableIdentifierError, match="full_name"):
        await resolver.resolve(_CANONICAL, token)


@pytest.mark.asyncio
async def test_missing_full_name_is_a_shape_error(
    resolver: IdentityResolver, fake_github: FakeGitHub, token: str
) -> None:
    """A lookup body without full_name raises ResponseShapeError."""
    fake_github.json("GET", _LOOKUP_PATH, {"id": 1296269})

    with pytest.raises(ResponseShapeError, match="full_name"):
        await resolver.resolve(_CANONICAL, token)


def test_resolver_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """SCMGATE_RESOLVER_CACHE_TTL_S overrides the default TTL."""
    monkeypatch.delenv("SCMGATE_RESOLVER_CACHE_TTL_S", raising=False)
    assert ResolverConfig.from_env().cache_ttl_s == 60.0

    monkeypatch.setenv("SCMGATE_RESOLVER_CACHE_TTL_S", "5")
    assert ResolverConfig.from_env().cache_ttl_s == 5.0
