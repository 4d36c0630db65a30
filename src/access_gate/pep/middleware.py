"""Access gate enforcement middleware.

Sits in front of any ASGI application. For every HTTP request it extracts
the path and client address, asks the Gatekeeper for a decision, and
enforces it:

- PASS     → downstream app handles the request, response returned unchanged
- BLOCK    → block rule's status code and body (text/html); downstream never called
- RESTRICT → HTTP Basic challenge validated against the restrict rule's
             credentials; downstream called only after successful validation

The middleware holds no decision logic of its own.
Non-HTTP traffic (websocket, lifespan) passes through untouched.
"""

from __future__ import annotations

__all__ = [
    "AccessGateMiddleware",
    "create_access_gate_app",
]

from pathlib import Path
from typing import TYPE_CHECKING, assert_never

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from access_gate.constants import BLOCK_CONTENT_TYPE, DEFAULT_REALM
from access_gate.pdp import Disposition, Gatekeeper, build_gatekeeper
from access_gate.pdp.rules import BlockRule, RestrictRule
from access_gate.pep.basic_auth import BasicAuthChallenge
from access_gate.telemetry.system_logger import (
    configure_system_logger_file,
    get_system_logger,
    set_log_level,
)

if TYPE_CHECKING:
    from access_gate.config import AccessGateConfig

logger = get_system_logger()


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Middleware that enforces gatekeeper decisions on HTTP requests."""

    def __init__(self, app: ASGIApp, gatekeeper: Gatekeeper, realm: str = DEFAULT_REALM) -> None:
        """Initialize middleware.

        Args:
            app: Downstream ASGI application.
            gatekeeper: Frozen gatekeeper holding the rules.
            realm: Realm announced in credential challenges.
        """
        super().__init__(app)
        self.gatekeeper = gatekeeper
        self.realm = realm

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Evaluate the request and enforce the decision.

        Args:
            request: Incoming request.
            call_next: Downstream handler.

        Returns:
            Downstream response, block response, or challenge response.
        """
        path = request.url.path
        origin = request.client.host if request.client else ""

        decision = self.gatekeeper.evaluate(path, origin)
        disposition = decision.disposition

        if disposition is Disposition.PASS:
            return await call_next(request)

        if disposition is Disposition.BLOCK:
            assert isinstance(decision.rule, BlockRule)
            self._log_decision("request_blocked", decision.rule, path, origin)
            return self._blocked_response(decision.rule)

        if disposition is Disposition.RESTRICT:
            assert isinstance(decision.rule, RestrictRule)
            self._log_decision("request_restricted", decision.rule, path, origin)
            challenge = BasicAuthChallenge(decision.rule.credentials_match, realm=self.realm)
            return await challenge(request, call_next)

        assert_never(disposition)

    @staticmethod
    def _blocked_response(rule: BlockRule) -> Response:
        return Response(
            content=rule.render_body(),
            status_code=rule.status_code,
            headers={"Content-Type": BLOCK_CONTENT_TYPE},
        )

    def _log_decision(self, event: str, rule: BlockRule | RestrictRule, path: str, origin: str) -> None:
        kind, index = self.gatekeeper.locate(rule)
        logger.info(
            {
                "event": event,
                "message": f"{kind.value} rule #{index + 1} matched {path} from {origin or '-'}",
                "component": "middleware",
                "details": {"path": path, "origin": origin, "tier": kind.value, "rule_index": index},
            }
        )


def create_access_gate_app(
    app: ASGIApp,
    config: "AccessGateConfig",
    gatekeeper: Gatekeeper | None = None,
) -> AccessGateMiddleware:
    """Wrap an ASGI app with a gate built from configuration.

    Also applies the logging settings: the system logger level and, when
    log_file is set, the JSONL file for WARNING and above.

    Args:
        app: Downstream ASGI application.
        config: Validated AccessGateConfig.
        gatekeeper: Already built gatekeeper. Built from config if omitted.

    Returns:
        ASGI application enforcing the configured rules.
    """
    set_log_level(config.logging.log_level)
    if config.logging.log_file:
        configure_system_logger_file(Path(config.logging.log_file).expanduser())

    if gatekeeper is None:
        gatekeeper = build_gatekeeper(config)
    return AccessGateMiddleware(app, gatekeeper=gatekeeper, realm=config.realm)
