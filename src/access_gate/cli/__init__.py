"""Command-line interface for access-gate.

Provides commands for validating configuration, checking how a request
would be decided, and serving an ASGI app behind the gate.
"""

from .main import cli, main

__all__ = ["cli", "main"]
