"""Canonical webhook event records handed to the orchestrator.

Events form a msgspec tagged union keyed on ``type``: ``"pr"`` for pull
requests and ``"repo"`` for pushes. Encoding an event therefore always
carries its family, and decoding rejects any other tag.
"""

from __future__ import annotations

import enum
import typing as typ

import msgspec


class PullRequestAction(enum.StrEnum):
    """Pull-request actions the orchestrator reacts to."""

    OPENED = "opened"
    REOPENED = "reopened"
    SYNCHRONIZED = "synchronized"
    CLOSED = "closed"


class PullRequestEvent(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="type", tag="pr"
):
    """Normalised ``pull_request`` delivery.

    Attributes
    ----------
    action
        Canonical action; unrecognised GitHub actions arrive as ``closed``.
    branch
        Base branch the pull request targets.
    checkout_url
        SSH checkout URL of the base repository.
    sha
        Head commit of the pull request.
    username
        Login of the pull request author.
    pr_number
        Pull request number.
    pr_ref
        Merge ref, ``{checkout_url}#pull/{pr_number}/merge``.

    """

    action: PullRequestAction
    branch: str
    checkout_url: str
    sha: str
    username: str
    pr_number: int
    pr_ref: str


class PushEvent(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="type", tag="repo"
):
    """Normalised ``push`` delivery."""

    action: typ.Literal["push"] = "push"
    branch: str
    checkout_url: str
    sha: str
    username: str


type WebhookEvent = PullRequestEvent | PushEvent
