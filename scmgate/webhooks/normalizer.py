"""Translate GitHub webhook deliveries into canonical events.

Only ``pull_request`` and ``push`` deliveries are understood. Normalisation is
pure: no network access and no repository resolution.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from .errors import UnsupportedEventTypeError, WebhookPayloadError
from .models import PullRequestAction, PullRequestEvent, PushEvent

if typ.TYPE_CHECKING:
    from .models import WebhookEvent

EVENT_HEADER = "X-GitHub-Event"
BRANCH_REF_PREFIX = "refs/heads/"

_ACTION_ALIASES: dict[str, PullRequestAction] = {
    "opened": PullRequestAction.OPENED,
    "reopened": PullRequestAction.REOPENED,
    "synchronize": PullRequestAction.SYNCHRONIZED,
    "synchronized": PullRequestAction.SYNCHRONIZED,
    "closed": PullRequestAction.CLOSED,
}


def event_type_from_headers(headers: cabc.Mapping[str, str]) -> str | None:
    """Return the ``X-GitHub-Event`` value, matching the name case-insensitively."""
    wanted = EVENT_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == wanted:
            return value
    return None


def normalize_action(action: object) -> PullRequestAction:
    """Map a GitHub pull-request action onto :class:`PullRequestAction`.

    ``synchronize`` becomes ``synchronized``; anything unrecognised becomes
    ``closed``.
    """
    if isinstance(action, str):
        return _ACTION_ALIASES.get(action, PullRequestAction.CLOSED)
    return PullRequestAction.CLOSED


def _reach[T](
    payload: cabc.Mapping[str, typ.Any],
    path: str,
    expected: type[T],
    *,
    event_type: str,
) -> T:
    node: typ.Any = payload
    for segment in path.split("."):
        if not isinstance(node, cabc.Mapping) or segment not in node:
            raise WebhookPayloadError.missing_field(event_type, path)
        node = node[segment]
    # bool is an int subclass
    if not isinstance(node, expected) or isinstance(node, bool):
        raise WebhookPayloadError.missing_field(event_type, path)
    return node


def _pull_request_event(payload: cabc.Mapping[str, typ.Any]) -> PullRequestEvent:
    event = "pull_request"
    checkout_url = _reach(payload, "repository.ssh_url", str, event_type=event)
    pr_number = _reach(payload, "pull_request.number", int, event_type=event)
    return PullRequestEvent(
        action=normalize_action(payload.get("action")),
        branch=_reach(payload, "pull_request.base.ref", str, event_type=event),
        checkout_url=checkout_url,
        sha=_reach(payload, "pull_request.head.sha", str, event_type=event),
        username=_reach(payload, "pull_request.user.login", str, event_type=event),
        pr_number=pr_number,
        pr_ref=f"{checkout_url}#pull/{pr_number}/merge",
    )


def _push_event(payload: cabc.Mapping[str, typ.Any]) -> PushEvent:
    event = "push"
    ref = _reach(payload, "ref", str, event_type=event)
    return PushEvent(
        branch=ref.removeprefix(BRANCH_REF_PREFIX),
        checkout_url=_reach(payload, "repository.ssh_url", str, event_type=event),
        sha=_reach(payload, "after", str, event_type=event),
        username=_reach(payload, "sender.login", str, event_type=event),
    )


_BUILDERS: dict[
    str, cabc.Callable[[cabc.Mapping[str, typ.Any]], PullRequestEvent | PushEvent]
] = {
    "pull_request": _pull_request_event,
    "push": _push_event,
}


def normalize_webhook(
    headers: cabc.Mapping[str, str], payload: cabc.Mapping[str, typ.Any]
) -> WebhookEvent:
    """Normalise a GitHub delivery into a pull request or push event.

    Parameters
    ----------
    headers
        Request headers; the event type header is looked up case-insensitively.
    payload
        Decoded JSON body.

    Raises
    ------
    UnsupportedEventTypeError
        If the event type header is absent or names another event family.
    WebhookPayloadError
        If a required field is missing or has the wrong type.

    Examples
    --------
    >>> event = normalize_webhook(
    ...     {"x-github-event": "push"},
    ...     {
    ...         "ref": "refs/heads/main",
    ...         "after": "abc123",
    ...         "repository": {"ssh_url": "git@github.com:octo/reef.git"},
    ...         "sender": {"login": "octocat"},
    ...     },
    ... )
    >>> event.branch
    'main'

    """
    event_type = event_type_from_headers(headers)
    if event_type is None:
        raise UnsupportedEventTypeError.missing_header()
    builder = _BUILDERS.get(event_type)
    if builder is None:
        raise UnsupportedEventTypeError.for_event(event_type)
    if not isinstance(payload, cabc.Mapping):
        raise WebhookPayloadError.not_an_object()
    return builder(payload)
