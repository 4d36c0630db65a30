"""HTTP Basic credential challenge.

The restrict tier only decides THAT credentials are needed. This module is
the collaborator that asks for them and checks them:

- No Authorization header        → 401 with WWW-Authenticate: Basic realm="..."
- Scheme other than Basic        → 400 Bad Request
- Undecodable or malformed token → 401 challenge
- Validator rejects credentials  → 401 challenge (logged, username only)
- Validator accepts credentials  → request forwarded downstream

Passwords are never logged.
"""

from __future__ import annotations

__all__ = [
    "BasicAuthChallenge",
    "CredentialValidator",
    "parse_basic_credentials",
]

import base64
import binascii
from collections.abc import Callable

from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from access_gate.constants import DEFAULT_REALM
from access_gate.telemetry.system_logger import get_system_logger

logger = get_system_logger()

CredentialValidator = Callable[[str, str], bool]


def parse_basic_credentials(header_value: str) -> tuple[str, str] | None:
    """Decode a Basic Authorization header value.

    Args:
        header_value: Full header value, e.g. "Basic YWRtaW46cGFzcw==".

    Returns:
        (username, password), or None if the header is not Basic or the
        token is not valid Base64 "user:pass".
    """
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "basic" or not token.strip():
        return None
    try:
        decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


class BasicAuthChallenge:
    """Issues and verifies an HTTP Basic challenge for one request.

    Attributes:
        realm: Realm announced in the WWW-Authenticate header.
    """

    def __init__(self, validator: CredentialValidator, realm: str = DEFAULT_REALM) -> None:
        """Initialize the challenge.

        Args:
            validator: Called with (username, password); True accepts.
            realm: Realm announced to the client.
        """
        self._validator = validator
        self.realm = realm

    async def __call__(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Forward the request if it carries valid credentials, else challenge.

        Args:
            request: Incoming request.
            call_next: Downstream handler, called at most once.

        Returns:
            Downstream response or a 400/401 response.
        """
        header = request.headers.get("authorization")
        if not header:
            return self.challenge_response()

        scheme = header.strip().partition(" ")[0]
        if scheme.lower() != "basic":
            logger.info(
                {
                    "event": "auth_bad_scheme",
                    "message": f"Rejected non-Basic authorization scheme: {scheme}",
                    "component": "basic_auth",
                    "details": {"scheme": scheme, "path": request.url.path},
                }
            )
            return self.bad_request_response()

        credentials = parse_basic_credentials(header)
        if credentials is None:
            return self.challenge_response()

        username, password = credentials
        if not self._validator(username, password):
            logger.warning(
                {
                    "event": "auth_failed",
                    "message": f"Credential check failed for user {username!r} on {request.url.path}",
                    "component": "basic_auth",
                    "details": {
                        "username": username,
                        "path": request.url.path,
                        "origin": request.client.host if request.client else None,
                    },
                }
            )
            return self.challenge_response()

        return await call_next(request)

    def challenge_response(self) -> Response:
        """401 response asking the client for Basic credentials."""
        return Response(
            status_code=401,
            media_type="text/plain",
            headers={"WWW-Authenticate": f'Basic realm="{self.realm}"'},
        )

    @staticmethod
    def bad_request_response() -> Response:
        """400 response for unsupported authorization schemes."""
        return Response(status_code=400, media_type="text/plain")
