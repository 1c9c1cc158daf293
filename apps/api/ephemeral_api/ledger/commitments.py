"""Commitment, nullifier and digest functions.

All functions here are pure: identical inputs always produce identical output.
"""

import hashlib
import json
import math
from typing import Iterable

GENESIS_COMMITMENT = "0x" + hashlib.sha256(b"genesis").hexdigest()


def _sha256(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def canonical_number(value):
    """Render integral floats as ints so 5 and 5.0 hash identically."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def _canonicalize(obj):
    if isinstance(obj, dict):
        return {key: _canonicalize(val) for key, val in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_canonicalize(item) for item in obj]
    return canonical_number(obj)


def canonical_json(obj) -> str:
    """Compact JSON with numbers in canonical form."""
    return json.dumps(_canonicalize(obj), separators=(",", ":"), ensure_ascii=False)


def commit(value, recipient: str, randomness: str) -> str:
    """Bind (value, recipient, randomness) to a note commitment."""
    return _sha256(f"{canonical_number(value)}:{recipient}:{randomness}")


def nullify(secret: str, commitment: str) -> str:
    """Derive the spend marker for a commitment."""
    return _sha256(f"{secret}:{commitment}")


def proof_digest(statement: dict) -> str:
    """Placeholder validity proof: one-way digest over a public statement."""
    return _sha256(canonical_json(statement))


def state_commitment(note_ids: Iterable[str], nullifiers: Iterable[str], block_height: int) -> str:
    """Digest of the full ledger state at a block height.

    Note ids and nullifiers are sorted, so the result depends on set contents
    only and not on insertion order.
    """
    state_data = {
        "notes": sorted(note_ids),
        "nullifiers": sorted(nullifiers),
        "blockHeight": block_height,
    }
    return "0x" + _sha256(canonical_json(state_data))
