"""Policy Enforcement Point (PEP) - Request interception and enforcement.

This module intercepts requests, asks the PDP for a decision, and enforces
it. The PDP decides; the PEP renders:

- PASS → forward to downstream app
- BLOCK → status code + HTML body from the block rule
- RESTRICT → HTTP Basic challenge

Structure:
    middleware.py - AccessGateMiddleware (Starlette middleware, the dispatcher)
    basic_auth.py - BasicAuthChallenge (credential challenge collaborator)
"""

from access_gate.pep.basic_auth import BasicAuthChallenge, CredentialValidator, parse_basic_credentials
from access_gate.pep.middleware import AccessGateMiddleware, create_access_gate_app

__all__ = [
    # Middleware
    "AccessGateMiddleware",
    "create_access_gate_app",
    # Credential challenge
    "BasicAuthChallenge",
    "CredentialValidator",
    "parse_basic_credentials",
]
