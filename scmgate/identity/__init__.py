"""Repository identifier parsing and resolution."""

from __future__ import annotations

from .cache import TTLCache
from .config import ResolverConfig
from .errors import IdentityError, InvalidIdentifierError, UnresolvableIdentifierError
from .grammar import (
    GRAMMARS,
    Grammar,
    checkout_url_for,
    format_checkout_url,
    match_identifier,
    parse,
    parse_canonical_id,
)
from .models import DEFAULT_BRANCH, CanonicalRepositoryId, Locator
from .resolver import IdentityResolver

__all__ = [
    "DEFAULT_BRANCH",
    "GRAMMARS",
    "CanonicalRepositoryId",
    "Grammar",
    "IdentityError",
    "IdentityResolver",
    "InvalidIdentifierError",
    "Locator",
    "ResolverConfig",
    "TTLCache",
    "UnresolvableIdentifierError",
    "checkout_url_for",
    "format_checkout_url",
    "match_identifier",
    "parse",
    "parse_canonical_id",
]
