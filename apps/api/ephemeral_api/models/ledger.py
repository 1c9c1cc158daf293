"""Durable ledger models.

Only derived, non-sensitive artifacts live here. Raw transactions (sender,
signature, asset) stay in the in-memory black box and never reach a table.
"""

from sqlalchemy import BigInteger, Boolean, Column, Float, Integer, String

from ephemeral_api.db.base import Base


class StateCommitmentRecord(Base):
    """Append-only chain of state digests, one per processed transaction."""

    __tablename__ = "state_commitments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    commitment = Column(String(66), nullable=False, index=True)
    block_height = Column(Integer, nullable=False, unique=True, index=True)
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds
    proof_hash = Column(String(64), nullable=True)


class NullifierRecord(Base):
    """Spent marker."""

    __tablename__ = "nullifiers"

    nullifier = Column(String(64), primary_key=True)
    timestamp = Column(BigInteger, nullable=False)


class NoteRecord(Base):
    """Recipient note, tracked by its commitment."""

    __tablename__ = "notes"

    commitment = Column(String(64), primary_key=True)
    value = Column(Float, nullable=False)
    recipient = Column(String(255), nullable=False, index=True)
    created_at = Column(BigInteger, nullable=False)
    spent = Column(Boolean, default=False, nullable=False)
