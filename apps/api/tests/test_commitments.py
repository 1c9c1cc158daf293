"""Tests for commitment, nullifier and digest functions."""

import hashlib

from ephemeral_api.ledger.commitments import (
    GENESIS_COMMITMENT,
    canonical_json,
    commit,
    nullify,
    proof_digest,
    state_commitment,
)


def test_genesis_commitment():
    """Genesis head is the prefixed digest of the literal 'genesis'."""
    assert GENESIS_COMMITMENT == "0x" + hashlib.sha256(b"genesis").hexdigest()


def test_commit_matches_colon_joined_digest():
    """Commitment hashes value:recipient:randomness."""
    expected = hashlib.sha256(b"5:0xabc:deadbeef").hexdigest()
    assert commit(5, "0xabc", "deadbeef") == expected


def test_commit_integral_float_equals_int():
    """5.0 and 5 produce the same commitment."""
    assert commit(5.0, "B", "r") == commit(5, "B", "r")
    assert commit(5.5, "B", "r") == hashlib.sha256(b"5.5:B:r").hexdigest()


def test_commit_binds_every_input():
    """Changing any input changes the commitment."""
    base = commit(5, "B", "r1")
    assert commit(6, "B", "r1") != base
    assert commit(5, "C", "r1") != base
    assert commit(5, "B", "r2") != base


def test_nullify_is_deterministic():
    """Same secret and commitment always yield the same nullifier."""
    assert nullify("sig1", "cm") == nullify("sig1", "cm")
    assert nullify("sig1", "cm") == hashlib.sha256(b"sig1:cm").hexdigest()
    assert nullify("sig2", "cm") != nullify("sig1", "cm")


def test_canonical_json_is_compact():
    """Canonical JSON has no whitespace and integral floats as ints."""
    assert canonical_json({"a": 1.0, "b": [2.5, "x"]}) == '{"a":1,"b":[2.5,"x"]}'


def test_proof_digest_depends_on_statement():
    """Proof digest changes with the statement."""
    first = proof_digest({"amount": 5, "nullifier": "n1"})
    assert first == proof_digest({"amount": 5.0, "nullifier": "n1"})
    assert first != proof_digest({"amount": 5, "nullifier": "n2"})


def test_state_commitment_order_independent():
    """The head depends on set contents, not insertion order."""
    first = state_commitment(["n1", "n2"], ["x", "y"], 2)
    second = state_commitment(["n2", "n1"], ["y", "x"], 2)
    assert first == second
    assert first.startswith("0x")
    assert len(first) == 66


def test_state_commitment_binds_block_height():
    """Same sets at a different height give a different head."""
    assert state_commitment(["n1"], ["x"], 1) != state_commitment(["n1"], ["x"], 2)
