"""Unit tests for scmgate.api.errors error handlers.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_errors.py

"""

from __future__ import annotations

import falcon.asgi
import falcon.testing
import pytest

from scmgate.api.errors import InvalidInputError, register_error_handlers
from scmgate.gateway.errors import CircuitOpenError
from scmgate.webhooks.errors import UnsupportedEventTypeError


class _CircuitOpenResource:
    """Resource that fails fast as if GitHub were unavailable."""

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        raise CircuitOpenError.open("repos.get", 12.7)


class _BadRequestResource:
    """Resource that raises InvalidInputError without a field."""

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        msg = "invalid parameter"
        raise InvalidInputError(msg)


class _MissingHeaderResource:
    """Resource that raises UnsupportedEventTypeError for a missing header."""

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        raise UnsupportedEventTypeError.missing_header()


@pytest.fixture
def client() -> falcon.testing.TestClient:
    """Build a test client with error handlers registered."""
    app = falcon.asgi.App()
    app.add_route("/circuit-open", _CircuitOpenResource())
    app.add_route("/bad-request", _BadRequestResource())
    app.add_route("/missing-header", _MissingHeaderResource())
    register_error_handlers(app)
    return falcon.testing.TestClient(app)


class TestCircuitOpen:
    """Tests for the CircuitOpenError handler."""

    def test_returns_503_with_retry_after(
        self, client: falcon.testing.TestClient
    ) -> None:
        """Open breakers map to HTTP 503 with a whole-second Retry-After."""
        result = client.simulate_get("/circuit-open")

        assert result.status == falcon.HTTP_503, "expected HTTP 503"
        assert result.headers["retry-after"] == "12"
        assert "repos.get" in result.json["description"]


class TestInvalidInput:
    """Tests for the InvalidInputError handler."""

    def test_returns_400_without_field(
        self, client: falcon.testing.TestClient
    ) -> None:
        """Handler omits field when none was supplied."""
        result = client.simulate_get("/bad-request")

        assert result.status == falcon.HTTP_400, "expected HTTP 400"
        assert result.json == {
            "title": "Invalid input",
            "description": "invalid parameter",
        }


class TestUnsupportedEvent:
    """Tests for the UnsupportedEventTypeError handler."""

    def test_missing_header_has_no_event_field(
        self, client: falcon.testing.TestClient
    ) -> None:
        """A missing header maps to 422 without an event echo."""
        result = client.simulate_get("/missing-header")

        assert result.status == falcon.HTTP_422, "expected HTTP 422"
        assert "event" not in result.json
