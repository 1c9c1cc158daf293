"""Tests for health endpoints."""


def test_health_check(client, ledger):
    """Test health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["chainId"] == 31337
    assert data["blockHeight"] == 0
    assert data["transactionsInBlackBox"] == 0


def test_health_counts_black_box(client, ledger):
    """Black box size includes pending entries."""
    ledger.submit("A", "B", 1, None, "sig1")
    assert client.get("/health").json()["transactionsInBlackBox"] == 1


def test_readiness_check(client):
    """Test readiness endpoint."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] is True


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Ephemeral Chain API"


def test_correlation_id_echoed(client):
    """Responses carry the caller's correlation ID."""
    response = client.get("/health", headers={"x-correlation-id": "corr-1"})
    assert response.headers["x-correlation-id"] == "corr-1"
    assert client.get("/health").headers["x-correlation-id"]


def test_metrics_exposed(client):
    """Prometheus metrics are mounted."""
    response = client.get("/metrics/")
    assert response.status_code == 200
    assert "ephemeral_blocks_processed_total" in response.text
