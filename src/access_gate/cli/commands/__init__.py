"""CLI commands for access-gate."""
