"""Custom exception hierarchy for the school admin service."""

from errors.exceptions import EntityNotFoundError, StoreError

__all__ = ["EntityNotFoundError", "StoreError"]
