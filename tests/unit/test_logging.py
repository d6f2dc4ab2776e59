"""Unit tests for the femtologging helpers in scmgate.logging."""

from __future__ import annotations

import typing as typ

import pytest

from scmgate.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_warning,
    normalize_log_level,
)


class _RecordingLogger:
    """Stands in for a femtologging logger."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, object | None]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        assert stack_info is False, "helpers never request stack info"
        self.records.append((level, message, exc_info))
        return message


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("warning", ("WARNING", False)),
        (" trace ", ("TRACE", False)),
        ("WARN", ("WARN", False)),
        (None, ("INFO", True)),
        ("", ("INFO", True)),
        ("verbose", ("INFO", True)),
    ],
)
def test_normalize_log_level(raw: str | None, expected: tuple[str, bool]) -> None:
    """Known levels are upper-cased; anything else falls back to INFO."""
    assert normalize_log_level(raw) == expected


@pytest.mark.parametrize(
    ("helper", "level"),
    [
        (log_debug, "DEBUG"),
        (log_info, "INFO"),
        (log_warning, "WARNING"),
        (log_error, "ERROR"),
    ],
)
def test_level_helpers_interpolate(
    helper: typ.Callable[..., None], level: str
) -> None:
    """Each helper interpolates percent placeholders before logging."""
    logger = _RecordingLogger()

    helper(logger, "resolved %s in %d ms", "octo/reef", 12)

    assert logger.records == [(level, "resolved octo/reef in 12 ms", None)]


def test_log_warning_forwards_exc_info() -> None:
    """Exception details reach the logger untouched."""
    logger = _RecordingLogger()
    exc = TimeoutError("GitHub did not answer")

    log_warning(logger, "retrying %s", "repos.get", exc_info=exc)

    assert logger.records == [("WARNING", "retrying repos.get", exc)]


@pytest.mark.parametrize(
    ("raw", "expected_level", "expected_invalid"),
    [("debug", "DEBUG", False), ("chatty", "INFO", True)],
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected_level: str,
    *,
    expected_invalid: bool,
) -> None:
    """configure_logging hands the normalized level to basicConfig."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("scmgate.logging.basicConfig", fake_basic_config)

    assert configure_logging(raw) == (expected_level, expected_invalid)
    assert captured == {"level": expected_level, "force": False}
