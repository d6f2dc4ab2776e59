"""Resolve any supported repository identifier into a :class:`Locator`.

Checkout URLs are parsed locally. Canonical repository ids need GitHub to map
the numeric id back to ``owner/repo``; those lookups go through the gateway
and successful results are memoised for a short time.
"""

from __future__ import annotations

import time
import typing as typ

from scmgate.gateway.errors import ResponseShapeError
from scmgate.gateway.models import CallDescriptor
from scmgate.logging import get_logger, log_debug

from .cache import TTLCache
from .config import ResolverConfig
from .errors import InvalidIdentifierError, UnresolvableIdentifierError
from .grammar import CANONICAL_ID_GRAMMAR, parse
from .models import CanonicalRepositoryId, Locator

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from scmgate.gateway.client import ResilientGateway

logger = get_logger(__name__)


class IdentityResolver:
    """Turn checkout URLs and canonical ids into locators.

    Parameters
    ----------
    gateway
        Gateway used for ``get_by_id`` lookups.
    config
        Resolver settings; defaults are used when omitted.
    clock
        Monotonic clock for cache expiry.

    """

    def __init__(
        self,
        gateway: ResilientGateway,
        *,
        config: ResolverConfig | None = None,
        clock: cabc.Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise the resolver with an empty cache."""
        self._gateway = gateway
        self._config = config or ResolverConfig()
        self._cache: TTLCache[str, Locator] = TTLCache(
            self._config.cache_ttl_s, clock=clock
        )

    @property
    def cache(self) -> TTLCache[str, Locator]:
        """Return the lookup cache."""
        return self._cache

    async def resolve(self, identifier: str, token: str) -> Locator:
        """Resolve ``identifier`` into a :class:`Locator`.

        Raises
        ------
        UnresolvableIdentifierError
            If the input is neither a checkout URL nor a canonical id, or
            GitHub returns an unusable ``full_name``.
        GatewayError
            Propagated unchanged from the ``get_by_id`` lookup.

        """
        try:
            return parse(identifier)
        except InvalidIdentifierError:
            pass

        canonical = CANONICAL_ID_GRAMMAR.match(identifier)
        if not isinstance(canonical, CanonicalRepositoryId):
            raise UnresolvableIdentifierError.unrecognised(identifier)

        cached = self._cache.get(identifier)
        if cached is not None:
            log_debug(logger, "Resolved %s from cache", identifier)
            return cached
        locator = await self._lookup(identifier, canonical, token)
        log_debug(logger, "Resolved %s to %s via GitHub", identifier, locator.slug)
        return self._cache.set_if_absent(identifier, locator)

    async def _lookup(
        self, identifier: str, canonical: CanonicalRepositoryId, token: str
    ) -> Locator:
        descriptor = CallDescriptor(
            "get_by_id", token, {"id": canonical.remote_id}
        )
        repository = await self._gateway.invoke(descriptor)
        if not isinstance(repository, dict):
            raise ResponseShapeError.missing(descriptor.qualified_name, "full_name")
        full_name = repository.get("full_name")
        if not isinstance(full_name, str):
            raise ResponseShapeError.missing(descriptor.qualified_name, "full_name")
        owner, sep, repo = full_name.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise UnresolvableIdentifierError.bad_full_name(identifier, full_name)
        return Locator(
            host=canonical.host, owner=owner, repo=repo, branch=canonical.branch
        )
