"""Build status to GitHub commit status mapping."""

from __future__ import annotations

import enum
import typing as typ

DEFAULT_CONTEXT_PREFIX = "Screwdriver"
FALLBACK_STATE = "failure"
FALLBACK_DESCRIPTION = "failure"


class BuildStatus(enum.StrEnum):
    """Build outcomes reported by the orchestrator."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    ABORTED = "ABORTED"
    RUNNING = "RUNNING"
    QUEUED = "QUEUED"


STATE_MAP: dict[str, str] = {
    BuildStatus.SUCCESS: "success",
    BuildStatus.RUNNING: "pending",
    BuildStatus.QUEUED: "pending",
    BuildStatus.FAILURE: "failure",
    BuildStatus.ABORTED: "failure",
}

DESCRIPTION_MAP: dict[str, str] = {
    BuildStatus.SUCCESS: "Everything looks good!",
    BuildStatus.FAILURE: "Did not work as expected.",
    BuildStatus.ABORTED: "Aborted mid-flight",
    BuildStatus.RUNNING: "Testing your code...",
    BuildStatus.QUEUED: "Looking for a place to park...",
}


def status_context(job_name: str | None, prefix: str = DEFAULT_CONTEXT_PREFIX) -> str:
    """Return the status context, ``prefix/job_name`` or just ``prefix``."""
    return f"{prefix}/{job_name}" if job_name else prefix


def commit_status_params(
    build_status: str,
    *,
    job_name: str | None = None,
    url: str | None = None,
    context_prefix: str = DEFAULT_CONTEXT_PREFIX,
) -> dict[str, typ.Any]:
    """Return the ``create_status`` body for ``build_status``.

    Unknown statuses are reported as ``failure`` with the description
    ``failure``. ``target_url`` is only included when ``url`` is given.

    Examples
    --------
    >>> commit_status_params("RUNNING", job_name="main")["context"]
    'Screwdriver/main'

    """
    params: dict[str, typ.Any] = {
        "state": STATE_MAP.get(build_status, FALLBACK_STATE),
        "description": DESCRIPTION_MAP.get(build_status, FALLBACK_DESCRIPTION),
        "context": status_context(job_name, context_prefix),
    }
    if url:
        params["target_url"] = url
    return params
