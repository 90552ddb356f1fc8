"""Errors raised by the saved-simulation store layer."""

from __future__ import annotations


class StoreError(RuntimeError):
    """Raised when a store request fails or a saved record is malformed."""
