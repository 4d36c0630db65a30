"""Tests for AccessGateMiddleware enforcement.

Requests go through a real Starlette app via TestClient, whose client
address is always "testclient".
"""

import json
import logging
import re
from collections.abc import Callable
from pathlib import Path

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from access_gate.config import AccessGateConfig
from access_gate.pdp import Gatekeeper, GatekeeperBuilder
from access_gate.pep import AccessGateMiddleware, create_access_gate_app


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def downstream_calls() -> list[str]:
    """Paths that reached the downstream app."""
    return []


@pytest.fixture
def downstream(downstream_calls: list[str]) -> Starlette:
    async def endpoint(request: Request) -> PlainTextResponse:
        downstream_calls.append(request.url.path)
        return PlainTextResponse(f"hello from {request.url.path}", headers={"X-Downstream": "yes"})

    return Starlette(routes=[Route("/{path:path}", endpoint, methods=["GET", "POST"])])


@pytest.fixture
def make_client(downstream: Starlette) -> Callable[..., TestClient]:
    def _make(gatekeeper: Gatekeeper, realm: str = "Restricted Area") -> TestClient:
        return TestClient(AccessGateMiddleware(downstream, gatekeeper=gatekeeper, realm=realm))

    return _make


# ============================================================================
# Pass
# ============================================================================


class TestPass:
    """Requests that no rule stops reach the downstream app unchanged."""

    def test_no_rules(self, make_client, downstream_calls: list[str]) -> None:
        client = make_client(GatekeeperBuilder().build())

        response = client.get("/anything")

        assert response.status_code == 200
        assert response.text == "hello from /anything"
        assert response.headers["x-downstream"] == "yes"
        assert downstream_calls == ["/anything"]

    def test_post_body_forwarded(self, make_client) -> None:
        client = make_client(GatekeeperBuilder().build())

        response = client.post("/submit", content=b"payload")

        assert response.status_code == 200

    def test_disabled_gate(self, make_client, downstream_calls: list[str]) -> None:
        builder = GatekeeperBuilder().options(enabled=False)
        builder.block(all_resources=True)

        response = make_client(builder.build()).get("/admin")

        assert response.status_code == 200
        assert downstream_calls == ["/admin"]


# ============================================================================
# Block
# ============================================================================


class TestBlock:
    """Block decisions are answered without calling downstream."""

    def test_default_block_response(self, make_client, downstream_calls: list[str]) -> None:
        builder = GatekeeperBuilder()
        builder.block(resources="/admin")

        response = make_client(builder.build()).get("/admin")

        assert response.status_code == 403
        assert response.text == "<h1>Forbidden</h1>"
        assert response.headers["content-type"] == "text/html"
        assert downstream_calls == []

    def test_custom_status_and_body(self, make_client) -> None:
        builder = GatekeeperBuilder()
        builder.block(resources=re.compile(r"^/old"), status_code=410, body=["<h1>Gone</h1>", "<p>bye</p>"])

        response = make_client(builder.build()).get("/old/page")

        assert response.status_code == 410
        assert response.text == "<h1>Gone</h1><p>bye</p>"

    def test_block_by_origin(self, make_client, downstream_calls: list[str]) -> None:
        builder = GatekeeperBuilder()
        builder.block(origins="testclient")

        response = make_client(builder.build()).get("/")

        assert response.status_code == 403
        assert downstream_calls == []

    def test_unmatched_path_passes(self, make_client) -> None:
        builder = GatekeeperBuilder()
        builder.block(resources="/admin")

        assert make_client(builder.build()).get("/admin/users").status_code == 200

    def test_allow_precedence(self, make_client, downstream_calls: list[str]) -> None:
        """Block-all + restrict-all + allow /admin: only /admin gets through."""
        builder = GatekeeperBuilder()
        builder.allow(resources="/admin")
        builder.block(all_resources=True)
        builder.restrict(all_resources=True, credentials="admin,pass")
        client = make_client(builder.build())

        assert client.get("/admin").status_code == 200
        assert client.get("/other").status_code == 403
        assert downstream_calls == ["/admin"]

    def test_block_is_logged(self, make_client, system_events) -> None:
        builder = GatekeeperBuilder()
        builder.block(resources="/a")
        builder.block(resources="/admin")

        make_client(builder.build()).get("/admin")

        events = system_events("request_blocked")
        assert len(events) == 1
        assert events[0]["details"]["rule_index"] == 1
        assert events[0]["details"]["origin"] == "testclient"


# ============================================================================
# Restrict
# ============================================================================


class TestRestrict:
    """Restrict decisions go through the Basic credential challenge."""

    @pytest.fixture
    def client(self, make_client) -> TestClient:
        builder = GatekeeperBuilder()
        builder.restrict(all_resources=True, credentials={"username": "admin", "password": "pass"})
        return make_client(builder.build(), realm="Staff Only")

    def test_challenge_without_credentials(self, client: TestClient, downstream_calls: list[str]) -> None:
        response = client.get("/admin")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Staff Only"'
        assert response.headers["content-type"].startswith("text/plain")
        assert downstream_calls == []

    def test_valid_credentials(self, client: TestClient, downstream_calls: list[str]) -> None:
        response = client.get("/admin", auth=("admin", "pass"))

        assert response.status_code == 200
        assert response.text == "hello from /admin"
        assert downstream_calls == ["/admin"]

    def test_invalid_credentials(self, client: TestClient, downstream_calls: list[str]) -> None:
        response = client.get("/admin", auth=("admin", "nope"))

        assert response.status_code == 401
        assert downstream_calls == []

    def test_non_basic_scheme(self, client: TestClient) -> None:
        response = client.get("/admin", headers={"Authorization": "Digest username=admin"})

        assert response.status_code == 400

    def test_empty_restrict_rule_passes(self, make_client, downstream_calls: list[str]) -> None:
        builder = GatekeeperBuilder()
        builder.restrict(all_resources=True)

        response = make_client(builder.build()).get("/admin")

        assert response.status_code == 200
        assert downstream_calls == ["/admin"]

    def test_auth_disabled(self, make_client) -> None:
        builder = GatekeeperBuilder().options(auth=False)
        builder.restrict(all_resources=True, credentials="admin,pass")

        assert make_client(builder.build()).get("/admin").status_code == 200

    def test_restrict_is_logged(self, client: TestClient, system_events) -> None:
        client.get("/admin")

        events = system_events("request_restricted")
        assert len(events) == 1
        assert events[0]["details"]["tier"] == "restrict"


# ============================================================================
# Configuration
# ============================================================================


class TestCreateAccessGateApp:
    """Tests for create_access_gate_app()."""

    def test_wraps_app_with_configured_rules(self, downstream: Starlette, restore_logger: logging.Logger) -> None:
        config = AccessGateConfig.model_validate(
            {
                "realm": "Reports",
                "block": [{"resources": "/admin"}],
                "restrict": [{"resources": "/reports", "credentials": "ops,hunter2"}],
            }
        )
        client = TestClient(create_access_gate_app(downstream, config))

        assert client.get("/admin").status_code == 403
        challenged = client.get("/reports")
        assert challenged.status_code == 401
        assert challenged.headers["www-authenticate"] == 'Basic realm="Reports"'
        assert client.get("/reports", auth=("ops", "hunter2")).status_code == 200
        assert client.get("/").status_code == 200

    def test_applies_logging_config(
        self, downstream: Starlette, restore_logger: logging.Logger, tmp_path: Path
    ) -> None:
        """Failed credential checks land in the configured JSONL file."""
        log_path = tmp_path / "logs" / "gate.jsonl"
        config = AccessGateConfig.model_validate(
            {
                "restrict": [{"all_resources": True, "credentials": "admin,pass"}],
                "logging": {"log_level": "WARNING", "log_file": str(log_path)},
            }
        )
        client = TestClient(create_access_gate_app(downstream, config))

        response = client.get("/admin", auth=("admin", "wrong"))

        assert response.status_code == 401
        assert restore_logger.level == logging.WARNING
        entries = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert [entry["event"] for entry in entries] == ["auth_failed"]
        assert entries[0]["details"]["username"] == "admin"

    def test_uses_prebuilt_gatekeeper(self, downstream: Starlette, restore_logger: logging.Logger) -> None:
        builder = GatekeeperBuilder()
        builder.block(all_resources=True)
        gatekeeper = builder.build()

        gated = create_access_gate_app(downstream, AccessGateConfig(), gatekeeper=gatekeeper)

        assert gated.gatekeeper is gatekeeper

    def test_as_starlette_middleware(self, downstream_calls: list[str]) -> None:
        """The middleware also plugs into Starlette's middleware stack."""

        async def endpoint(request: Request) -> PlainTextResponse:
            downstream_calls.append(request.url.path)
            return PlainTextResponse("ok")

        builder = GatekeeperBuilder()
        builder.block(resources="/admin")
        app = Starlette(
            routes=[Route("/{path:path}", endpoint)],
            middleware=[Middleware(AccessGateMiddleware, gatekeeper=builder.build())],
        )
        client = TestClient(app)

        assert client.get("/admin").status_code == 403
        assert client.get("/home").status_code == 200
        assert downstream_calls == ["/home"]
