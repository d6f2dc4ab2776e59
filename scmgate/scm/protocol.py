"""ScmProvider protocol: the orchestrator's source control contract."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from scmgate.gateway.stats import GatewayHealthSnapshot
    from scmgate.identity.models import Locator
    from scmgate.scm.models import (
        AuthorDecoration,
        CommitDecoration,
        RepositoryIdentity,
        RepositoryPermissions,
        UrlDecoration,
    )
    from scmgate.webhooks.models import WebhookEvent


@typ.runtime_checkable
class ScmProvider(typ.Protocol):
    """Operations a source control provider offers the orchestrator.

    Every operation that touches the provider is a coroutine taking keyword
    arguments and an explicit per-call ``token``. ``identifier`` accepts any
    supported repository identifier: an SSH or HTTPS checkout URL, or a
    canonical ``host:remote_id:branch`` id.

    The protocol is runtime_checkable so wiring code can assert conformance.

    Examples
    --------
    >>> from scmgate.scm import GitHubScm, ScmProvider
    >>> isinstance(GitHubScm(gateway), ScmProvider)  # doctest: +SKIP
    True

    """

    async def get_permissions(
        self, *, identifier: str, token: str
    ) -> RepositoryPermissions:
        """Return the caller's permissions on the repository."""
        ...

    async def get_commit_sha(
        self, *, identifier: str, token: str, ref: str | None = None
    ) -> str:
        """Return the head SHA of the branch, or of ``ref`` when given."""
        ...

    async def update_commit_status(  # noqa: PLR0913
        self,
        *,
        identifier: str,
        token: str,
        sha: str,
        build_status: str,
        job_name: str | None = None,
        url: str | None = None,
    ) -> dict[str, typ.Any]:
        """Publish a build status against ``sha``."""
        ...

    async def get_file(
        self, *, identifier: str, token: str, path: str, ref: str | None = None
    ) -> str:
        """Return the decoded contents of a file."""
        ...

    async def get_repo_identity(
        self, *, identifier: str, token: str
    ) -> RepositoryIdentity:
        """Return the data needed to register the repository."""
        ...

    async def decorate_author(self, *, username: str, token: str) -> AuthorDecoration:
        """Return display data for a user."""
        ...

    async def decorate_commit(
        self, *, identifier: str, token: str, sha: str
    ) -> CommitDecoration:
        """Return display data for a commit."""
        ...

    async def decorate_url(self, *, identifier: str, token: str) -> UrlDecoration:
        """Return display data for the repository branch."""
        ...

    async def parse_url(self, *, identifier: str, token: str) -> str:
        """Return the canonical repository id for ``identifier``."""
        ...

    async def lookup_scm_uri(self, *, scm_uri: str, token: str) -> Locator:
        """Resolve a stored identifier into a locator."""
        ...

    def format_checkout_url(self, identifier: str) -> str:
        """Return the normalised checkout URL."""
        ...

    async def parse_hook(
        self,
        headers: cabc.Mapping[str, str],
        payload: cabc.Mapping[str, typ.Any],
    ) -> WebhookEvent:
        """Normalise a webhook delivery."""
        ...

    def stats(self) -> GatewayHealthSnapshot:
        """Return the provider's call health snapshot."""
        ...
