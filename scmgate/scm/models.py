"""Typed results of repository operations and the GitHub payloads behind them.

Public results are msgspec Structs so they encode straight to JSON. The
``GitHub*`` structs describe only the fields each operation reads; GitHub's
responses are converted into them with :func:`msgspec.convert`, which ignores
every other field.
"""

from __future__ import annotations

import msgspec


class RepositoryPermissions(msgspec.Struct, kw_only=True, frozen=True):
    """Permission set the authenticated identity holds on a repository."""

    admin: bool = False
    push: bool = False
    pull: bool = False


class RepositoryIdentity(msgspec.Struct, kw_only=True, frozen=True):
    """Data needed to register a repository with the orchestrator.

    Attributes
    ----------
    id
        Canonical repository id ``host:remote_id:branch``.
    name
        GitHub ``owner/repo`` full name.
    url
        Browsable URL of the branch.
    clone_url
        Normalised SSH checkout URL including the branch.

    """

    id: str
    name: str
    url: str
    clone_url: str


class AuthorDecoration(msgspec.Struct, kw_only=True, frozen=True):
    """Display data for a GitHub user."""

    avatar: str | None
    name: str | None
    username: str | None
    url: str | None


class CommitDecoration(msgspec.Struct, kw_only=True, frozen=True):
    """Display data for a commit."""

    author: AuthorDecoration
    message: str
    url: str


class UrlDecoration(msgspec.Struct, kw_only=True, frozen=True):
    """Display data for a repository branch."""

    branch: str
    name: str
    url: str


class GitHubUser(msgspec.Struct):
    """Subset of a GitHub user object."""

    login: str
    avatar_url: str | None = None
    html_url: str | None = None
    name: str | None = None


class GitHubRepository(msgspec.Struct):
    """Subset of a GitHub repository object."""

    id: int
    full_name: str
    permissions: RepositoryPermissions | None = None


class GitHubCommitRef(msgspec.Struct):
    """Object a git reference or branch points at."""

    sha: str


class GitHubBranchLinks(msgspec.Struct):
    """Links attached to a GitHub branch."""

    html: str


class GitHubBranch(msgspec.Struct, rename={"links": "_links"}):
    """Subset of a GitHub branch object."""

    name: str
    commit: GitHubCommitRef
    links: GitHubBranchLinks | None = None


class GitHubReference(msgspec.Struct, rename={"target": "object"}):
    """Subset of a git reference object."""

    ref: str
    target: GitHubCommitRef


class GitHubContent(msgspec.Struct):
    """Subset of a repository content entry."""

    type: str
    path: str | None = None
    content: str | None = None
    encoding: str | None = None


class GitHubCommitAuthor(msgspec.Struct):
    """Git-level author recorded in a commit."""

    name: str | None = None


class GitHubCommitDetail(msgspec.Struct):
    """Git-level commit data."""

    message: str
    author: GitHubCommitAuthor | None = None


class GitHubCommit(msgspec.Struct):
    """Subset of a GitHub commit object."""

    sha: str
    commit: GitHubCommitDetail
    author: GitHubUser | None = None
