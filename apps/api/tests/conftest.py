"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import ephemeral_api.models  # noqa: F401
from ephemeral_api.db.base import Base
from ephemeral_api.db.session import get_db
from ephemeral_api.ledger.repository import LedgerRepository
from ephemeral_api.ledger.service import EphemeralLedger, get_ledger
from ephemeral_api.settings import Settings


# Use test database URL from environment or default to SQLite in-memory
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite:///:memory:"
)

GENESIS_TIME_MS = 1_700_000_000_000


class ManualClock:
    """Deterministic epoch-millisecond clock driven by tests."""

    def __init__(self, now: int = GENESIS_TIME_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture(scope="function")
def engine():
    """Create a test database engine with ledger tables."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(TEST_DATABASE_URL)

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Create a test database session."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(session_factory) -> LedgerRepository:
    return LedgerRepository(session_factory)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        processing_delay_ms=1000,
        retention_window_ms=2 * 60 * 60 * 1000,
        cleanup_default_window_ms=24 * 60 * 60 * 1000,
    )


@pytest.fixture
def ledger(settings, repository, clock) -> EphemeralLedger:
    """Ledger backed by the test database and a manual clock."""
    return EphemeralLedger(settings, repository=repository, clock=clock)


@pytest.fixture
def client(ledger, db):
    """API client wired to the test ledger. Lifespan tasks are not started."""
    from ephemeral_api.main import app

    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def submit_and_process(ledger, clock):
    """Submit a transfer and advance block time until it is processed."""

    def _submit(sender="A", recipient="B", amount=5, signature="sig1", asset=None):
        tx_id = ledger.submit(sender, recipient, amount, asset, signature)
        clock.advance(ledger.settings.processing_delay_ms)
        ledger.produce_due_blocks()
        return tx_id

    return _submit
