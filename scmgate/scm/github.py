"""GitHub implementation of the :class:`ScmProvider` contract.

Each operation resolves the repository identifier, then issues its GitHub
calls through the shared :class:`ResilientGateway` with the caller's token.
Response bodies are converted into the typed ``GitHub*`` structs so missing
or ill-typed fields surface as :class:`ResponseShapeError` rather than as
``KeyError`` deep inside an operation.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import typing as typ

import msgspec

from scmgate.gateway.errors import ResponseShapeError
from scmgate.gateway.models import CallDescriptor
from scmgate.identity import grammar
from scmgate.identity.models import CanonicalRepositoryId
from scmgate.identity.resolver import IdentityResolver
from scmgate.logging import get_logger, log_warning
from scmgate.webhooks.normalizer import normalize_webhook

from .errors import NotAFileError
from .models import (
    AuthorDecoration,
    CommitDecoration,
    GitHubBranch,
    GitHubCommit,
    GitHubContent,
    GitHubReference,
    GitHubRepository,
    GitHubUser,
    RepositoryIdentity,
    RepositoryPermissions,
    UrlDecoration,
)
from .status import DEFAULT_CONTEXT_PREFIX, STATE_MAP, commit_status_params

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from scmgate.gateway.client import ResilientGateway
    from scmgate.gateway.stats import GatewayHealthSnapshot
    from scmgate.identity.models import Locator
    from scmgate.webhooks.models import WebhookEvent

logger = get_logger(__name__)


def _convert[T](data: object, target: type[T], descriptor: CallDescriptor) -> T:
    try:
        return msgspec.convert(data, target)
    except msgspec.ValidationError as exc:
        raise ResponseShapeError.unexpected(
            descriptor.qualified_name, str(exc)
        ) from exc


def _browse_url(locator: Locator, tree: str) -> str:
    return f"https://{locator.host}/{locator.owner}/{locator.repo}/tree/{tree}"


def _repo_params(
    locator: Locator, **extra: typ.Any  # noqa: ANN401
) -> dict[str, typ.Any]:
    return {"owner": locator.owner, "repo": locator.repo, **extra}


class GitHubScm:
    """Source control provider backed by the GitHub REST API.

    Parameters
    ----------
    gateway
        Gateway every remote call goes through.
    resolver
        Identity resolver; one sharing ``gateway`` is created when omitted.
    context_prefix
        Commit status context prefix, ``Screwdriver`` by default.

    """

    def __init__(
        self,
        gateway: ResilientGateway,
        resolver: IdentityResolver | None = None,
        *,
        context_prefix: str = DEFAULT_CONTEXT_PREFIX,
    ) -> None:
        """Initialise the provider."""
        self._gateway = gateway
        self._resolver = resolver or IdentityResolver(gateway)
        self._context_prefix = context_prefix

    @property
    def gateway(self) -> ResilientGateway:
        """Return the gateway used for remote calls."""
        return self._gateway

    @property
    def resolver(self) -> IdentityResolver:
        """Return the identity resolver."""
        return self._resolver

    async def _fetch_repository(
        self, locator: Locator, token: str
    ) -> GitHubRepository:
        descriptor = CallDescriptor("get", token, _repo_params(locator))
        data = await self._gateway.invoke(descriptor)
        return _convert(data, GitHubRepository, descriptor)

    async def _fetch_branch(self, locator: Locator, token: str) -> GitHubBranch:
        descriptor = CallDescriptor(
            "get_branch", token, _repo_params(locator, branch=locator.branch)
        )
        data = await self._gateway.invoke(descriptor)
        return _convert(data, GitHubBranch, descriptor)

    async def get_permissions(
        self, *, identifier: str, token: str
    ) -> RepositoryPermissions:
        """Return the permissions the token's identity holds on the repository.

        Raises
        ------
        ResponseShapeError
            If GitHub omits the ``permissions`` block, which happens for
            anonymous or app tokens.

        """
        locator = await self._resolver.resolve(identifier, token)
        repository = await self._fetch_repository(locator, token)
        if repository.permissions is None:
            raise ResponseShapeError.missing("repos.get", "permissions")
        return repository.permissions

    async def get_commit_sha(
        self, *, identifier: str, token: str, ref: str | None = None
    ) -> str:
        """Return the head SHA of the identifier's branch.

        When ``ref`` is given (for example ``heads/main`` or ``tags/v1.0``)
        the git reference is looked up instead of the branch.
        """
        locator = await self._resolver.resolve(identifier, token)
        if ref is None:
            branch = await self._fetch_branch(locator, token)
            return branch.commit.sha

        descriptor = CallDescriptor(
            "get_reference", token, _repo_params(locator, ref=ref), scope="git"
        )
        data = await self._gateway.invoke(descriptor)
        return _convert(data, GitHubReference, descriptor).target.sha

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
        """Publish ``build_status`` as a commit status on ``sha``.

        Unknown build statuses are published as ``failure``. Returns GitHub's
        acknowledgement body.
        """
        locator = await self._resolver.resolve(identifier, token)
        if build_status not in STATE_MAP:
            log_warning(
                logger,
                "Unknown build status %s for %s; reporting failure",
                build_status,
                locator.slug,
            )
        params = commit_status_params(
            build_status,
            job_name=job_name,
            url=url,
            context_prefix=self._context_prefix,
        )
        descriptor = CallDescriptor(
            "create_status", token, _repo_params(locator, sha=sha, **params)
        )
        ack = await self._gateway.invoke(descriptor)
        if not isinstance(ack, dict):
            raise ResponseShapeError.unexpected(
                descriptor.qualified_name, "expected a JSON object"
            )
        return ack

    async def get_file(
        self, *, identifier: str, token: str, path: str, ref: str | None = None
    ) -> str:
        """Return the UTF-8 contents of ``path``.

        ``ref`` defaults to the identifier's branch.

        Raises
        ------
        NotAFileError
            If ``path`` names a directory, symlink, or submodule.
        ResponseShapeError
            If the file content is absent or not base64 encoded.

        """
        locator = await self._resolver.resolve(identifier, token)
        descriptor = CallDescriptor(
            "get_content",
            token,
            _repo_params(locator, path=path, ref=ref or locator.branch),
        )
        data = await self._gateway.invoke(descriptor)
        # Directory listings come back as a JSON array.
        if isinstance(data, list):
            raise NotAFileError.for_path(path, "dir")
        content = _convert(data, GitHubContent, descriptor)
        if content.type != "file":
            raise NotAFileError.for_path(path, content.type)
        return self._decode_content(descriptor, content)

    @staticmethod
    def _decode_content(descriptor: CallDescriptor, content: GitHubContent) -> str:
        if content.content is None:
            raise ResponseShapeError.missing(descriptor.qualified_name, "content")
        if content.encoding != "base64":
            raise ResponseShapeError.unexpected(
                descriptor.qualified_name,
                f"unsupported content encoding {content.encoding!r}",
            )
        try:
            raw = base64.b64decode(content.content)
        except (binascii.Error, ValueError) as exc:
            raise ResponseShapeError.unexpected(
                descriptor.qualified_name, "content is not valid base64"
            ) from exc
        return raw.decode("utf-8", errors="replace")

    async def get_repo_identity(
        self, *, identifier: str, token: str
    ) -> RepositoryIdentity:
        """Return the canonical id, name, and branch URL of the repository.

        The repository and branch lookups run concurrently; if either fails
        the other is cancelled and the first error is raised.
        """
        locator = await self._resolver.resolve(identifier, token)
        try:
            async with asyncio.TaskGroup() as group:
                repo_task = group.create_task(self._fetch_repository(locator, token))
                branch_task = group.create_task(self._fetch_branch(locator, token))
        except BaseExceptionGroup as failures:
            raise failures.exceptions[0] from None

        repository = repo_task.result()
        branch = branch_task.result()
        if branch.links is None:
            raise ResponseShapeError.missing("repos.get_branch", "_links.html")
        return RepositoryIdentity(
            id=str(CanonicalRepositoryId.for_locator(locator, repository.id)),
            name=repository.full_name,
            url=branch.links.html,
            clone_url=grammar.checkout_url_for(locator),
        )

    async def decorate_author(self, *, username: str, token: str) -> AuthorDecoration:
        """Return avatar, display name, and profile URL for ``username``."""
        descriptor = CallDescriptor(
            "get_user", token, {"username": username}, scope="users"
        )
        data = await self._gateway.invoke(descriptor)
        user = _convert(data, GitHubUser, descriptor)
        return AuthorDecoration(
            avatar=user.avatar_url,
            name=user.name or user.login,
            username=user.login,
            url=user.html_url,
        )

    async def decorate_commit(
        self, *, identifier: str, token: str, sha: str
    ) -> CommitDecoration:
        """Return author, message, and browsable URL of commit ``sha``.

        Commits whose author has no GitHub account carry only the git-level
        author name.
        """
        locator = await self._resolver.resolve(identifier, token)
        descriptor = CallDescriptor("get_commit", token, _repo_params(locator, sha=sha))
        data = await self._gateway.invoke(descriptor)
        commit = _convert(data, GitHubCommit, descriptor)
        git_author = commit.commit.author.name if commit.commit.author else None
        account = commit.author
        return CommitDecoration(
            author=AuthorDecoration(
                avatar=account.avatar_url if account else None,
                name=git_author or (account.login if account else None),
                username=account.login if account else None,
                url=account.html_url if account else None,
            ),
            message=commit.commit.message,
            url=_browse_url(locator, sha),
        )

    async def decorate_url(self, *, identifier: str, token: str) -> UrlDecoration:
        """Return branch, ``owner/repo`` name, and browsable branch URL."""
        locator = await self._resolver.resolve(identifier, token)
        return UrlDecoration(
            branch=locator.branch,
            name=locator.slug,
            url=_browse_url(locator, locator.branch),
        )

    async def parse_url(self, *, identifier: str, token: str) -> str:
        """Return the canonical ``host:remote_id:branch`` id for ``identifier``."""
        locator = await self._resolver.resolve(identifier, token)
        repository = await self._fetch_repository(locator, token)
        return str(CanonicalRepositoryId.for_locator(locator, repository.id))

    async def lookup_scm_uri(self, *, scm_uri: str, token: str) -> Locator:
        """Resolve a stored canonical id (or checkout URL) into a locator."""
        return await self._resolver.resolve(scm_uri, token)

    def format_checkout_url(self, identifier: str) -> str:
        """Return the normalised checkout URL for ``identifier``."""
        return grammar.format_checkout_url(identifier)

    async def parse_hook(
        self,
        headers: cabc.Mapping[str, str],
        payload: cabc.Mapping[str, typ.Any],
    ) -> WebhookEvent:
        """Normalise a webhook delivery; see :func:`normalize_webhook`."""
        return normalize_webhook(headers, payload)

    def stats(self) -> GatewayHealthSnapshot:
        """Return the gateway's health snapshot."""
        return self._gateway.stats()
