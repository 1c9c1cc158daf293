"""Database models - import all models here for Alembic discovery."""

from ephemeral_api.models.ledger import NoteRecord, NullifierRecord, StateCommitmentRecord

__all__ = [
    "StateCommitmentRecord",
    "NullifierRecord",
    "NoteRecord",
]
