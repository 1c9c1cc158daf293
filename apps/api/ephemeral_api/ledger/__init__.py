"""Privacy-preserving ephemeral ledger core."""

from ephemeral_api.ledger.errors import (
    InvalidNullifierError,
    LedgerError,
    ProcessingError,
    ValidationError,
)
from ephemeral_api.ledger.service import EphemeralLedger, get_ledger

__all__ = [
    "EphemeralLedger",
    "get_ledger",
    "LedgerError",
    "ValidationError",
    "InvalidNullifierError",
    "ProcessingError",
]
