"""Identifier grammars for repository checkout URLs and canonical ids.

Each supported identifier shape is a named :class:`Grammar`. The grammars are
tried in the order of :data:`GRAMMARS` and the first match wins, so callers
never need to know which shape they hold.

Supported shapes:

- ``ssh``: ``git@github.com:octo/reef.git#main``
- ``https``: ``https://github.com/octo/reef.git#main`` or
  ``git://github.com/octo/reef.git``
- ``canonical_id``: ``github.com:1296269:main``

Branch suffixes keep their case; everything else may be lower-cased by
:func:`format_checkout_url` for comparison.

Examples
--------
>>> parse("git@github.com:octo/reef.git#Feature")
Locator(host='github.com', owner='octo', repo='reef', branch='Feature')
>>> match_identifier("github.com:42:main")
CanonicalRepositoryId(host='github.com', remote_id='42', branch='main')

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import re

from .errors import InvalidIdentifierError
from .models import DEFAULT_BRANCH, CanonicalRepositoryId, Locator, ParsedIdentifier

_SSH_PATTERN = re.compile(
    r"^[^@/:\s]+@(?P<host>[^@/:\s]+):"
    r"(?P<owner>[^/:\s]+)/(?P<repo>[^/#\s]+?)\.git"
    r"(?:#(?P<branch>\S+))?$"
)
_HTTPS_PATTERN = re.compile(
    r"^(?:https://(?:[^@/:\s]+@)?|git://)(?P<host>[^@/:\s]+)/"
    r"(?P<owner>[^/:\s]+)/(?P<repo>[^/#\s]+?)(?:\.git)?"
    r"(?:#(?P<branch>\S+))?$"
)
_CANONICAL_ID_PATTERN = re.compile(
    r"^(?P<host>[^@/:\s]+):(?P<remote_id>\d+):(?P<branch>\S+)$"
)


def _locator_from_match(found: re.Match[str]) -> Locator:
    return Locator(
        host=found["host"],
        owner=found["owner"],
        repo=found["repo"],
        branch=found["branch"] or DEFAULT_BRANCH,
    )


def _canonical_id_from_match(found: re.Match[str]) -> CanonicalRepositoryId:
    return CanonicalRepositoryId(
        host=found["host"],
        remote_id=found["remote_id"],
        branch=found["branch"],
    )


@dataclasses.dataclass(frozen=True, slots=True)
class Grammar:
    """A named identifier grammar and the builder for its matches."""

    name: str
    pattern: re.Pattern[str]
    build: cabc.Callable[[re.Match[str]], ParsedIdentifier]

    def match(self, text: str) -> ParsedIdentifier | None:
        """Return the parsed identifier, or ``None`` when ``text`` does not match."""
        found = self.pattern.match(text)
        if found is None:
            return None
        return self.build(found)


SSH_GRAMMAR = Grammar("ssh", _SSH_PATTERN, _locator_from_match)
HTTPS_GRAMMAR = Grammar("https", _HTTPS_PATTERN, _locator_from_match)
CANONICAL_ID_GRAMMAR = Grammar(
    "canonical_id", _CANONICAL_ID_PATTERN, _canonical_id_from_match
)

GRAMMARS: tuple[Grammar, ...] = (SSH_GRAMMAR, HTTPS_GRAMMAR, CANONICAL_ID_GRAMMAR)
URL_GRAMMARS: tuple[Grammar, ...] = (SSH_GRAMMAR, HTTPS_GRAMMAR)


def _first_match(
    text: str, grammars: cabc.Iterable[Grammar]
) -> ParsedIdentifier | None:
    for grammar in grammars:
        parsed = grammar.match(text)
        if parsed is not None:
            return parsed
    return None


def match_identifier(text: str) -> ParsedIdentifier:
    """Match ``text`` against every grammar in priority order.

    Raises
    ------
    InvalidIdentifierError
        If no grammar matches.

    """
    parsed = _first_match(text, GRAMMARS)
    if parsed is None:
        raise InvalidIdentifierError.no_match(text)
    return parsed


def parse(text: str) -> Locator:
    """Parse a checkout URL into a :class:`Locator`.

    Canonical repository ids are rejected here because their numeric id has to
    be resolved against GitHub; use
    :class:`scmgate.identity.resolver.IdentityResolver` for those.

    Raises
    ------
    InvalidIdentifierError
        If ``text`` is not an SSH or HTTPS/Git checkout URL.

    """
    parsed = _first_match(text, URL_GRAMMARS)
    if isinstance(parsed, Locator):
        return parsed
    if CANONICAL_ID_GRAMMAR.match(text) is not None:
        raise InvalidIdentifierError.not_a_url(text)
    raise InvalidIdentifierError.no_match(text)


def parse_canonical_id(text: str) -> CanonicalRepositoryId:
    """Parse a ``host:remote_id:branch`` identifier.

    Raises
    ------
    InvalidIdentifierError
        If ``text`` is not a canonical repository id.

    """
    parsed = CANONICAL_ID_GRAMMAR.match(text)
    if not isinstance(parsed, CanonicalRepositoryId):
        raise InvalidIdentifierError.no_match(text)
    return parsed


def format_checkout_url(text: str) -> str:
    """Normalise a checkout URL for storage and comparison.

    Everything before the ``#`` is lower-cased and the branch is re-appended
    untouched, defaulting to ``master`` when absent.

    >>> format_checkout_url("git@GitHub.com:Octo/Reef.git#Feature")
    'git@github.com:octo/reef.git#Feature'

    """
    locator = parse(text)
    base = text.split("#", 1)[0].lower()
    return f"{base}#{locator.branch}"


def checkout_url_for(locator: Locator) -> str:
    """Render ``locator`` as an SSH checkout URL including its branch."""
    return f"git@{locator.host}:{locator.owner}/{locator.repo}.git#{locator.branch}"
