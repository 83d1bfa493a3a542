"""Errors raised by ledger and statistics operations."""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for rating ledger operations."""


class ValidationError(LedgerError, ValueError):
    """Raised when input is rejected before any state changes."""


class ConstraintError(ValidationError):
    """Raised when the store rejects a write on a uniqueness constraint."""


class NotFoundError(LedgerError):
    """Raised when a player or match id does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class TransactionFailure(LedgerError):
    """Raised when a write failed in the store and was rolled back."""


__all__ = [
    "ConstraintError",
    "LedgerError",
    "NotFoundError",
    "TransactionFailure",
    "ValidationError",
]
