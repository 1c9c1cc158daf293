"""Tests for the /api chain endpoints."""

import pytest

from ephemeral_api.ledger.commitments import GENESIS_COMMITMENT


def _process_due(ledger, clock):
    clock.advance(ledger.settings.processing_delay_ms)
    return ledger.produce_due_blocks()


def test_state_at_genesis(client):
    """Fresh ledger reports genesis."""
    response = client.get("/api/state")
    assert response.status_code == 200
    assert response.json() == {
        "currentCommitment": GENESIS_COMMITMENT,
        "blockHeight": 0,
        "activeNotes": 0,
        "nullifierCount": 0,
        "proofGenerated": False,
    }


def test_submit_transaction(client, ledger):
    """Submission returns an id and lands in the black box."""
    response = client.post(
        "/api/transaction",
        json={"from": "A", "to": "B", "amount": 5, "signature": "sig1"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Transaction submitted to ephemeral pool"
    assert data["transactionId"] in ledger.queue
    # Processing is deferred to block time
    assert ledger.get_state()["block_height"] == 0


@pytest.mark.parametrize("missing", ["from", "to", "amount", "signature"])
def test_submit_missing_field_is_400(client, missing):
    """Every required field is enforced."""
    body = {"from": "A", "to": "B", "amount": 5, "signature": "sig1"}
    del body[missing]
    response = client.post("/api/transaction", json=body)
    assert response.status_code == 400
    assert missing in response.json()["detail"]


def test_submit_malformed_amount_is_400(client):
    """Non-numeric amounts are rejected."""
    response = client.post(
        "/api/transaction",
        json={"from": "A", "to": "B", "amount": "lots", "signature": "sig1"},
    )
    assert response.status_code == 400


def test_submit_non_json_body_is_400(client):
    """Unparseable bodies are client errors."""
    response = client.post(
        "/api/transaction",
        content="not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400


def test_scenario_transfer_then_balance(client, ledger, clock):
    """A sends 5 to B: balance, height and nullifier count follow."""
    before = client.get("/api/state").json()
    client.post(
        "/api/transaction",
        json={"from": "A", "to": "B", "amount": 5, "signature": "sig1"},
    )
    assert _process_due(ledger, clock) == 1

    balance = client.post("/api/balance", json={"address": "B"}).json()
    assert balance == {"address": "B", "balance": 5, "currency": "ETH"}

    after = client.get("/api/state").json()
    assert after["blockHeight"] == before["blockHeight"] + 1
    assert after["nullifierCount"] == before["nullifierCount"] + 1
    assert after["proofGenerated"] is True


def test_scenario_effect_proof_matches_head(client, ledger, clock):
    """A nullifier from a processed transfer yields a proof on the current head."""
    client.post(
        "/api/transaction",
        json={"from": "A", "to": "B", "amount": 5, "signature": "sig1"},
    )
    _process_due(ledger, clock)
    nullifier = next(iter(ledger.state.nullifiers))

    response = client.post(
        "/api/effect-proof",
        json={"recipient": "0xrecipient", "amount": 5, "nullifier": nullifier},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Effect proof generated for cross-chain withdrawal"
    proof = data["proof"]
    assert proof["stateCommitment"] == client.get("/api/state").json()["currentCommitment"]
    assert proof["nullifier"] == nullifier
    assert proof["recipient"] == "0xrecipient"
    assert proof["token"] == "0x0000000000000000000000000000000000000000"
    assert proof["amount"] == "5000000000000000000"
    assert len(proof["zkProof"]) == 64


def test_effect_proof_unknown_nullifier_is_400(client):
    """Unknown nullifiers are rejected."""
    response = client.post(
        "/api/effect-proof",
        json={"recipient": "0xrecipient", "amount": 5, "nullifier": "deadbeef"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid nullifier"


def test_effect_proof_string_amount_is_exact(client, ledger, clock):
    """Decimal strings keep all 18 decimals on the wire."""
    ledger.submit("A", "B", 5, None, "sig1")
    _process_due(ledger, clock)
    nullifier = next(iter(ledger.state.nullifiers))

    ok = client.post(
        "/api/effect-proof",
        json={"recipient": "0xr", "amount": "1.000000000000000001", "nullifier": nullifier},
    )
    too_precise = client.post(
        "/api/effect-proof",
        json={"recipient": "0xr", "amount": "1.0000000000000000001", "nullifier": nullifier},
    )

    assert ok.json()["proof"]["amount"] == "1000000000000000001"
    assert too_precise.status_code == 400
    assert "18 decimals" in too_precise.json()["detail"]


def test_effect_proof_missing_fields_is_400(client):
    """Recipient, amount and nullifier are required."""
    response = client.post("/api/effect-proof", json={"recipient": "0xrecipient"})
    assert response.status_code == 400


def test_balance_requires_address(client):
    """Balance without an address is a client error."""
    response = client.post("/api/balance", json={"privateKey": "ignored"})
    assert response.status_code == 400
    assert "address" in response.json()["detail"]


def test_balance_ignores_private_key(client, ledger, clock):
    """The private key does not gate or change the result."""
    ledger.submit("A", "B", 3, None, "sig1")
    _process_due(ledger, clock)
    with_key = client.post("/api/balance", json={"address": "B", "privateKey": "k"}).json()
    without_key = client.post("/api/balance", json={"address": "B"}).json()
    assert with_key["balance"] == without_key["balance"] == 3


def test_txpool_lists_redacted_pending(client, ledger, clock):
    """Pool shows pending entries with redacted addresses and a processed count."""
    ledger.submit("0x1111111111111111", "0x2222222222222222", 1, None, "sig1")
    _process_due(ledger, clock)
    tx_id = ledger.submit("0x3333333333333333", "0x4444444444444444", 2, "USDC", "sig2")

    data = client.get("/api/txpool").json()
    assert data["totalPending"] == 1
    assert data["processed"] == 1
    assert data["pending"] == [
        {
            "id": tx_id,
            "from": "0x33333333...",
            "to": "0x44444444...",
            "amount": 2.0,
            "asset": "USDC",
            "timestamp": clock(),
        }
    ]


def test_cleanup_with_cutoff(client, ledger, clock):
    """Cleanup removes processed entries before the cutoff."""
    ledger.submit("A", "B", 1, None, "sig1")
    _process_due(ledger, clock)
    ledger.submit("A", "C", 1, None, "sig2")

    response = client.delete("/api/cleanup", params={"olderThan": clock()})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "deletedTransactions": 1,
        "remainingTransactions": 1,
        "message": "Ephemeral transaction data cleaned up",
    }


def test_cleanup_default_cutoff_keeps_recent(client, ledger, clock):
    """Without olderThan, recent processed entries are kept."""
    ledger.submit("A", "B", 1, None, "sig1")
    _process_due(ledger, clock)
    data = client.delete("/api/cleanup").json()
    assert data["deletedTransactions"] == 0
    assert data["remainingTransactions"] == 1


def test_cleanup_malformed_cutoff_is_400(client):
    """olderThan must be an integer timestamp."""
    response = client.delete("/api/cleanup", params={"olderThan": "yesterday"})
    assert response.status_code == 400


def test_only_one_chain_router_registered():
    """Each /api path is registered once."""
    from ephemeral_api.main import app

    paths = [route.path for route in app.routes if hasattr(route, "path") and route.path.startswith("/api")]
    assert len(paths) == len(set(paths))
    assert "/api/effect-proof" in paths
