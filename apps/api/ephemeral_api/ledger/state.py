"""In-memory ledger state: note store, nullifier set and chain head."""

from dataclasses import dataclass, field, replace
from typing import Optional

from ephemeral_api.ledger.commitments import GENESIS_COMMITMENT, state_commitment


@dataclass(frozen=True)
class Note:
    """A unit of value bound to a recipient."""

    commitment: str
    value: float
    recipient: str
    created_at: int
    spent: bool = False


@dataclass
class LedgerState:
    """Current note/nullifier sets and the chain head derived from them."""

    notes: dict[str, Note] = field(default_factory=dict)
    nullifiers: dict[str, int] = field(default_factory=dict)  # nullifier -> timestamp
    block_height: int = 0
    commitment: str = GENESIS_COMMITMENT
    active_notes: int = 0
    proof_hash: Optional[str] = None

    @property
    def nullifier_count(self) -> int:
        return len(self.nullifiers)

    def has_nullifier(self, nullifier: str) -> bool:
        return nullifier in self.nullifiers

    def compute_commitment(self) -> str:
        """Recompute the head from current contents."""
        if self.block_height == 0 and not self.notes and not self.nullifiers:
            return GENESIS_COMMITMENT
        return state_commitment(self.notes.keys(), self.nullifiers.keys(), self.block_height)

    def balance_of(self, address: str) -> float:
        return sum(note.value for note in self.notes.values() if note.recipient == address)

    def advance(self, note: Note, nullifier: str, timestamp: int) -> "LedgerState":
        """Return the next state with one note and one nullifier added.

        The receiver is left untouched so a failed write can be discarded.
        """
        notes = dict(self.notes)
        notes[note.commitment] = note
        nullifiers = dict(self.nullifiers)
        nullifiers[nullifier] = timestamp
        next_state = replace(
            self,
            notes=notes,
            nullifiers=nullifiers,
            block_height=self.block_height + 1,
            active_notes=self.active_notes + 1,
        )
        next_state.commitment = next_state.compute_commitment()
        return next_state
