"""access-gate: path and origin based request gating for ASGI applications.

Usage:
    from access_gate import GatekeeperBuilder, AccessGateMiddleware

    builder = GatekeeperBuilder()
    builder.block(resources="/admin")
    app = AccessGateMiddleware(app, gatekeeper=builder.build())
"""

__version__ = "0.1.0"

from access_gate.pdp import (
    Decision,
    Disposition,
    Gatekeeper,
    GatekeeperBuilder,
    build_gatekeeper,
)
from access_gate.pep import AccessGateMiddleware, create_access_gate_app

__all__ = [
    "__version__",
    "AccessGateMiddleware",
    "Decision",
    "Disposition",
    "Gatekeeper",
    "GatekeeperBuilder",
    "build_gatekeeper",
    "create_access_gate_app",
]
