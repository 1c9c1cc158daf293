"""Durable append-only store for commitments, nullifiers and notes."""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ephemeral_api.ledger.commitments import state_commitment
from ephemeral_api.ledger.errors import PersistenceError
from ephemeral_api.ledger.state import LedgerState, Note
from ephemeral_api.models import NoteRecord, NullifierRecord, StateCommitmentRecord

logger = logging.getLogger(__name__)


class LedgerRepository:
    """Persistence layer. Never sees raw transactions."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize repository with a session factory."""
        self.session_factory = session_factory

    def append_transition(self, state: LedgerState, note: Note, nullifier: str, timestamp: int) -> None:
        """Write one block's artifacts in a single transaction.

        A nullifier already on record keeps its first timestamp; the block
        still lands, matching the in-memory set.
        """
        db = self.session_factory()
        try:
            db.add(
                StateCommitmentRecord(
                    commitment=state.commitment,
                    block_height=state.block_height,
                    timestamp=timestamp,
                    proof_hash=state.proof_hash,
                )
            )
            if db.get(NullifierRecord, nullifier) is None:
                db.add(NullifierRecord(nullifier=nullifier, timestamp=timestamp))
            db.add(
                NoteRecord(
                    commitment=note.commitment,
                    value=note.value,
                    recipient=note.recipient,
                    created_at=note.created_at,
                    spent=note.spent,
                )
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"Failed to persist block {state.block_height}: {e}") from e
        finally:
            db.close()

    def load_state(self) -> LedgerState:
        """Rebuild in-memory state from durable records."""
        db = self.session_factory()
        try:
            head = (
                db.query(StateCommitmentRecord)
                .order_by(StateCommitmentRecord.block_height.desc())
                .first()
            )
            if head is None:
                return LedgerState()

            notes = {
                row.commitment: Note(
                    commitment=row.commitment,
                    value=row.value,
                    recipient=row.recipient,
                    created_at=row.created_at,
                    spent=row.spent,
                )
                for row in db.query(NoteRecord).order_by(NoteRecord.created_at.asc()).all()
            }
            nullifiers = {
                row.nullifier: row.timestamp
                for row in db.query(NullifierRecord).order_by(NullifierRecord.timestamp.asc()).all()
            }
            state = LedgerState(
                notes=notes,
                nullifiers=nullifiers,
                block_height=head.block_height,
                commitment=head.commitment,
                active_notes=len(notes),
                proof_hash=head.proof_hash,
            )
            if state.compute_commitment() != head.commitment:
                logger.warning(
                    f"Restored head at height {head.block_height} does not match stored notes and nullifiers"
                )
            return state
        finally:
            db.close()

    def verify_chain(self) -> tuple[bool, Optional[str]]:
        """Check height continuity and that the head is recomputable."""
        db = self.session_factory()
        try:
            records = (
                db.query(StateCommitmentRecord)
                .order_by(StateCommitmentRecord.block_height.asc())
                .all()
            )
            if not records:
                return True, None

            for expected, record in enumerate(records, start=1):
                if record.block_height != expected:
                    return False, f"Expected block height {expected}, found {record.block_height}"

            head = records[-1]
            note_ids = [row.commitment for row in db.query(NoteRecord.commitment).all()]
            nullifiers = [row.nullifier for row in db.query(NullifierRecord.nullifier).all()]
            # Fewer only when duplicate nullifiers were let through
            if len(nullifiers) > head.block_height:
                return False, (
                    f"Nullifier count {len(nullifiers)} exceeds block height {head.block_height}"
                )

            recomputed = state_commitment(note_ids, nullifiers, head.block_height)
            if recomputed != head.commitment:
                return False, f"Head commitment mismatch at block {head.block_height}"
            return True, None
        finally:
            db.close()
