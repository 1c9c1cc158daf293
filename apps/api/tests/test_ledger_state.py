"""Tests for in-memory ledger state."""

from ephemeral_api.ledger.commitments import GENESIS_COMMITMENT, state_commitment
from ephemeral_api.ledger.state import LedgerState, Note


def _note(commitment, value=5.0, recipient="B"):
    return Note(commitment=commitment, value=value, recipient=recipient, created_at=1)


def test_empty_state_is_genesis():
    """A fresh state sits at genesis with no proof."""
    state = LedgerState()
    assert state.block_height == 0
    assert state.commitment == GENESIS_COMMITMENT
    assert state.compute_commitment() == GENESIS_COMMITMENT
    assert state.proof_hash is None


def test_advance_returns_new_state_without_mutating():
    """Advancing leaves the original state untouched."""
    state = LedgerState()
    next_state = state.advance(_note("cm1"), "nf1", 10)

    assert state.block_height == 0
    assert state.notes == {}
    assert state.nullifiers == {}

    assert next_state.block_height == 1
    assert next_state.active_notes == 1
    assert next_state.nullifier_count == 1
    assert "cm1" in next_state.notes
    assert next_state.has_nullifier("nf1")


def test_commitment_recomputable_from_contents():
    """The head equals a full recomputation over notes, nullifiers and height."""
    state = LedgerState().advance(_note("cm1"), "nf1", 10).advance(_note("cm2"), "nf2", 11)
    assert state.commitment == state_commitment(["cm1", "cm2"], ["nf1", "nf2"], 2)
    assert state.compute_commitment() == state.compute_commitment()


def test_balance_sums_recipient_notes():
    """Balance only counts notes addressed to the address."""
    state = (
        LedgerState()
        .advance(_note("cm1", 5.0, "B"), "nf1", 10)
        .advance(_note("cm2", 2.5, "B"), "nf2", 11)
        .advance(_note("cm3", 7.0, "C"), "nf3", 12)
    )
    assert state.balance_of("B") == 7.5
    assert state.balance_of("C") == 7.0
    assert state.balance_of("nobody") == 0
