"""Shared utilities for access-gate."""
