"""Unit tests for the HTTP Basic credential challenge.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import base64
from collections.abc import Callable

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from access_gate.pep.basic_auth import BasicAuthChallenge, parse_basic_credentials


def _basic(token: str) -> str:
    return "Basic " + base64.b64encode(token.encode()).decode()


class TestParseBasicCredentials:
    """Tests for parse_basic_credentials()."""

    def test_valid_header(self) -> None:
        assert parse_basic_credentials(_basic("admin:pass")) == ("admin", "pass")

    def test_scheme_is_case_insensitive(self) -> None:
        header = "basic " + base64.b64encode(b"admin:pass").decode()

        assert parse_basic_credentials(header) == ("admin", "pass")

    def test_password_may_contain_colon(self) -> None:
        assert parse_basic_credentials(_basic("admin:pa:ss")) == ("admin", "pa:ss")

    def test_empty_password(self) -> None:
        assert parse_basic_credentials(_basic("admin:")) == ("admin", "")

    def test_unicode_credentials(self) -> None:
        assert parse_basic_credentials(_basic("jürgen:geheim")) == ("jürgen", "geheim")

    @pytest.mark.parametrize(
        "header",
        [
            "Bearer abc123",
            "Basic",
            "Basic ",
            "Basic not*base64!",
            _basic("no-colon"),
        ],
    )
    def test_invalid_headers(self, header: str) -> None:
        assert parse_basic_credentials(header) is None


class TestBasicAuthChallenge:
    """Tests for BasicAuthChallenge in front of a downstream app."""

    @pytest.fixture
    def downstream_calls(self) -> list[str]:
        return []

    @pytest.fixture
    def client(self, downstream_calls: list[str]) -> TestClient:
        async def endpoint(request: Request) -> PlainTextResponse:
            downstream_calls.append(request.url.path)
            return PlainTextResponse("secret data")

        challenge = BasicAuthChallenge(lambda u, p: (u, p) == ("admin", "pass"), realm="Staff")
        app = Starlette(
            routes=[Route("/{path:path}", endpoint)],
            middleware=[Middleware(BaseHTTPMiddleware, dispatch=challenge)],
        )
        return TestClient(app)

    def test_missing_header_challenges(self, client: TestClient, downstream_calls: list[str]) -> None:
        response = client.get("/reports")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Staff"'
        assert downstream_calls == []

    def test_valid_credentials_reach_downstream(
        self, client: TestClient, downstream_calls: list[str]
    ) -> None:
        response = client.get("/reports", auth=("admin", "pass"))

        assert response.status_code == 200
        assert response.text == "secret data"
        assert downstream_calls == ["/reports"]

    def test_wrong_password_challenges_again(
        self, client: TestClient, downstream_calls: list[str]
    ) -> None:
        response = client.get("/reports", auth=("admin", "wrong"))

        assert response.status_code == 401
        assert "www-authenticate" in response.headers
        assert downstream_calls == []

    def test_non_basic_scheme_is_bad_request(
        self, client: TestClient, downstream_calls: list[str]
    ) -> None:
        response = client.get("/reports", headers={"Authorization": "Bearer abc123"})

        assert response.status_code == 400
        assert downstream_calls == []

    def test_malformed_token_challenges(self, client: TestClient) -> None:
        response = client.get("/reports", headers={"Authorization": "Basic %%%"})

        assert response.status_code == 401

    def test_failed_attempt_logs_username_only(
        self, client: TestClient, system_events: Callable[[str], list[dict]]
    ) -> None:
        """Failed checks are logged without the password."""
        client.get("/reports", auth=("mallory", "hunter2"))

        failures = system_events("auth_failed")
        assert len(failures) == 1
        assert failures[0]["details"]["username"] == "mallory"
        assert "hunter2" not in str(failures[0])

    def test_challenge_response_default_realm(self) -> None:
        response = BasicAuthChallenge(lambda u, p: False).challenge_response()

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Restricted Area"'
