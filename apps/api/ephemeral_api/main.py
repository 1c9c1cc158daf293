"""Ephemeral Chain API - Main FastAPI application."""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy import text
from sqlalchemy.orm import Session

from ephemeral_api.db.session import get_db, init_db
from ephemeral_api.ledger import EphemeralLedger, get_ledger
from ephemeral_api.ledger.tasks import run_block_producer, run_retention_sweeper, stop_tasks
from ephemeral_api.middleware.correlation import CorrelationIDMiddleware
from ephemeral_api.routes import chain
from ephemeral_api.settings import get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s", "module": "%(name)s"}',
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Ephemeral Chain API...")
    try:
        settings.validate_production_settings()
        init_db()
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    ledger = get_ledger()
    ledger.restore()
    logger.info(f"Chain ID: {settings.chain_id}")
    logger.info(f"Head commitment: {ledger.state.commitment}")

    tasks = [
        asyncio.create_task(run_block_producer(ledger, settings.block_poll_interval_seconds)),
        asyncio.create_task(run_retention_sweeper(ledger, settings.sweep_interval_seconds)),
    ]
    yield
    logger.info("Shutting down Ephemeral Chain API...")
    await stop_tasks(tasks)


# Create FastAPI app
app = FastAPI(
    title="Ephemeral Chain API",
    description="Privacy-preserving ephemeral ledger with effect proofs for bridge withdrawals",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(CorrelationIDMiddleware)

# Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# Register routers
app.include_router(chain.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and query parameters are client errors (400)."""
    errors = exc.errors()
    location = ".".join(str(part) for part in errors[0]["loc"]) if errors else "request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Invalid field: {location}"},
    )


@app.get("/health")
async def health_check(ledger: EphemeralLedger = Depends(get_ledger)):
    """Health check endpoint (basic liveness)."""
    health = ledger.health()
    return {
        "status": "healthy",
        "chainId": health["chain_id"],
        "blockHeight": health["block_height"],
        "transactionsInBlackBox": health["transactions_in_black_box"],
    }


@app.get("/ready")
async def readiness_check(db: Session = Depends(get_db)):
    """Readiness check endpoint (verifies the durable store)."""
    checks = {"database": False}
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.error(f"Database check failed: {e}")

    all_ready = all(checks.values())
    return JSONResponse(
        content={
            "status": "ready" if all_ready else "not_ready",
            "checks": checks,
        },
        status_code=200 if all_ready else 503,
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Ephemeral Chain API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
