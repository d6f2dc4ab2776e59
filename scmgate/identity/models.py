"""Typed repository identity models."""

from __future__ import annotations

import dataclasses

DEFAULT_BRANCH = "master"
CANONICAL_ID_DELIMITER = ":"


@dataclasses.dataclass(frozen=True, slots=True)
class Locator:
    """Resolved repository coordinates.

    Attributes
    ----------
    host
        Git host name, for example ``github.com``.
    owner
        Repository owner (user or organisation).
    repo
        Repository name without any ``.git`` suffix.
    branch
        Branch or ref name. Case-sensitive and never folded.

    """

    host: str
    owner: str
    repo: str
    branch: str = DEFAULT_BRANCH

    def __post_init__(self) -> None:
        """Reject empty host, owner, or repo segments."""
        for field in ("host", "owner", "repo"):
            if not getattr(self, field):
                msg = f"Locator.{field} must be non-empty"
                raise ValueError(msg)
        if not self.branch:
            object.__setattr__(self, "branch", DEFAULT_BRANCH)

    @property
    def slug(self) -> str:
        """Return the GitHub-style ``owner/repo`` identifier."""
        return f"{self.owner}/{self.repo}"

    @property
    def key(self) -> str:
        """Return a lower-cased ``host/owner/repo`` key for comparisons."""
        return f"{self.host}/{self.owner}/{self.repo}".lower()


@dataclasses.dataclass(frozen=True, slots=True)
class CanonicalRepositoryId:
    """Durable ``host:remote_id:branch`` repository identifier.

    The numeric id is opaque: only GitHub can map it back to an owner and
    repository name.
    """

    host: str
    remote_id: str
    branch: str = DEFAULT_BRANCH

    def __str__(self) -> str:
        """Render the identifier in its stored form."""
        return CANONICAL_ID_DELIMITER.join((self.host, self.remote_id, self.branch))

    @classmethod
    def for_locator(
        cls, locator: Locator, remote_id: int | str
    ) -> CanonicalRepositoryId:
        """Mint an identifier for ``locator`` given GitHub's repository id."""
        return cls(host=locator.host, remote_id=str(remote_id), branch=locator.branch)


type ParsedIdentifier = Locator | CanonicalRepositoryId
