"""Configuration for identity resolution."""

from __future__ import annotations

import dataclasses as dc
import os

from scmgate.gateway.errors import GatewayConfigError

_DEFAULT_CACHE_TTL_S = 60.0


@dc.dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Identity resolver settings.

    Attributes
    ----------
    cache_ttl_s
        Lifetime of memoised canonical-id lookups in seconds. ``0`` disables
        memoisation.

    """

    cache_ttl_s: float = _DEFAULT_CACHE_TTL_S

    @classmethod
    def from_env(cls) -> ResolverConfig:
        """Build configuration from ``SCMGATE_RESOLVER_CACHE_TTL_S``.

        Raises
        ------
        GatewayConfigError
            If the variable is not a non-negative number.

        """
        name = "SCMGATE_RESOLVER_CACHE_TTL_S"
        raw = os.environ.get(name, "").strip()
        if not raw:
            return cls()
        try:
            ttl = float(raw)
        except ValueError as exc:
            raise GatewayConfigError.invalid_env(name, raw, "a number") from exc
        if ttl < 0:
            raise GatewayConfigError.invalid_env(name, raw, "a non-negative number")
        return cls(cache_ttl_s=ttl)
