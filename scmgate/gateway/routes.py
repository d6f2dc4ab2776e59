"""Catalogue of GitHub REST routes the gateway may call.

Only the operations listed in :data:`ROUTES` are reachable; the gateway is not
a general HTTP client.
"""

from __future__ import annotations

import dataclasses
import re
import typing as typ
from urllib.parse import quote

from .errors import InvalidCallError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


@dataclasses.dataclass(frozen=True, slots=True)
class PreparedRequest:
    """HTTP request material derived from a route and call parameters."""

    method: str
    path: str
    query: dict[str, str] = dataclasses.field(default_factory=dict)
    body: dict[str, typ.Any] | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class Route:
    """A GitHub REST endpoint and the parameters it consumes.

    ``path`` placeholders are required; ``query`` and ``body`` names are
    optional and only sent when the call supplies a non-``None`` value.
    """

    method: str
    path: str
    query: tuple[str, ...] = ()
    body: tuple[str, ...] = ()

    def prepare(
        self, operation: str, params: cabc.Mapping[str, typ.Any]
    ) -> PreparedRequest:
        """Fill the route from ``params``.

        Raises
        ------
        InvalidCallError
            If a path placeholder has no value.

        """

        def _substitute(found: re.Match[str]) -> str:
            name = found.group(1)
            value = params.get(name)
            if value is None or value == "":
                raise InvalidCallError.missing_parameter(operation, name)
            return quote(str(value), safe="/")

        path = _PLACEHOLDER_RE.sub(_substitute, self.path)
        query = {
            name: str(params[name])
            for name in self.query
            if params.get(name) is not None
        }
        body = (
            {name: params[name] for name in self.body if params.get(name) is not None}
            if self.body
            else None
        )
        return PreparedRequest(method=self.method, path=path, query=query, body=body)


ROUTES: dict[tuple[str, str], Route] = {
    ("repos", "get_by_id"): Route("GET", "/repositories/{id}"),
    ("repos", "get"): Route("GET", "/repos/{owner}/{repo}"),
    ("repos", "get_branch"): Route("GET", "/repos/{owner}/{repo}/branches/{branch}"),
    ("repos", "get_content"): Route(
        "GET", "/repos/{owner}/{repo}/contents/{path}", query=("ref",)
    ),
    ("repos", "get_commit"): Route("GET", "/repos/{owner}/{repo}/commits/{sha}"),
    ("git", "get_reference"): Route("GET", "/repos/{owner}/{repo}/git/ref/{ref}"),
    ("repos", "create_status"): Route(
        "POST",
        "/repos/{owner}/{repo}/statuses/{sha}",
        body=("state", "target_url", "description", "context"),
    ),
    ("users", "get_user"): Route("GET", "/users/{username}"),
}


def route_for(scope: str, operation: str) -> Route:
    """Return the route registered for ``scope``/``operation``.

    Raises
    ------
    InvalidCallError
        If the pair is not in the catalogue.

    """
    try:
        return ROUTES[(scope, operation)]
    except KeyError:
        raise InvalidCallError.unknown_operation(scope, operation) from None
