"""Repository operations against GitHub."""

from __future__ import annotations

from .errors import NotAFileError
from .github import GitHubScm
from .models import (
    AuthorDecoration,
    CommitDecoration,
    RepositoryIdentity,
    RepositoryPermissions,
    UrlDecoration,
)
from .protocol import ScmProvider
from .status import (
    DESCRIPTION_MAP,
    STATE_MAP,
    BuildStatus,
    commit_status_params,
    status_context,
)

__all__ = [
    "DESCRIPTION_MAP",
    "STATE_MAP",
    "AuthorDecoration",
    "BuildStatus",
    "CommitDecoration",
    "GitHubScm",
    "NotAFileError",
    "RepositoryIdentity",
    "RepositoryPermissions",
    "ScmProvider",
    "UrlDecoration",
    "commit_status_params",
    "status_context",
]
