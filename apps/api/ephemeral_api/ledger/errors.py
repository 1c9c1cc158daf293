"""Ledger error taxonomy."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class ValidationError(LedgerError):
    """A request field is missing or malformed."""

    def __init__(self, field: str, message: str = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}")


class InvalidNullifierError(LedgerError):
    """Effect proof requested for a nullifier the ledger never recorded."""

    def __init__(self, nullifier: str):
        self.nullifier = nullifier
        super().__init__("Invalid nullifier")


class ProcessingError(LedgerError):
    """State transition failed; the transaction stays unprocessed."""


class DuplicateNullifierError(ProcessingError):
    """Nullifier already present in the set (double spend)."""


class PersistenceError(ProcessingError):
    """Durable write of a state transition failed and was rolled back."""
