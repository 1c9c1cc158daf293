"""Ephemeral ledger service: the single writer over ledger state."""

import logging
import threading
from functools import lru_cache
from typing import Callable, Optional

from ephemeral_api.ledger.intake import IntakeQueue
from ephemeral_api.ledger.processor import TransactionProcessor, fresh_randomness
from ephemeral_api.ledger.proofs import EffectProof, EffectProofGenerator
from ephemeral_api.ledger.repository import LedgerRepository
from ephemeral_api.ledger.scheduler import BlockScheduler
from ephemeral_api.ledger.state import LedgerState
from ephemeral_api.ledger.sweeper import RetentionSweeper
from ephemeral_api.ledger.validation import require_text
from ephemeral_api.settings import Settings, get_settings
from ephemeral_api.utils import metrics
from ephemeral_api.utils.clock import Clock, now_ms

logger = logging.getLogger(__name__)


class EphemeralLedger:
    """Owns ledger state, the black box and block production.

    Every read and write goes through one re-entrant lock, so the block
    producer, the sweeper and request handlers never interleave mid-update.
    """

    def __init__(
        self,
        settings: Settings,
        repository: Optional[LedgerRepository] = None,
        clock: Clock = now_ms,
        randomness: Callable[[], str] = fresh_randomness,
    ):
        """Initialize ledger from settings."""
        self.settings = settings
        self.repository = repository
        self.clock = clock
        self._lock = threading.RLock()
        self.state = LedgerState()
        self.queue = IntakeQueue(default_asset=settings.default_asset, clock=clock)
        self.scheduler = BlockScheduler(clock=clock)
        self.processor = TransactionProcessor(
            self.queue,
            repository=repository,
            reject_duplicate_nullifiers=settings.reject_duplicate_nullifiers,
            clock=clock,
            randomness=randomness,
        )
        self.proofs = EffectProofGenerator(zero_address=settings.zero_address)
        self.sweeper = RetentionSweeper(
            self.queue,
            self._lock,
            retention_window_ms=settings.retention_window_ms,
            default_window_ms=settings.cleanup_default_window_ms,
            clock=clock,
        )

    def restore(self) -> None:
        """Load the last durable state, if any."""
        if self.repository is None:
            return
        with self._lock:
            self.state = self.repository.load_state()
            metrics.block_height.set(self.state.block_height)
        logger.info(f"Ledger restored at block {self.state.block_height}: {self.state.commitment}")

    def submit(self, sender, recipient, amount, asset, signature) -> str:
        """Accept a transfer into the black box and schedule its block."""
        with self._lock:
            tx = self.queue.submit(sender, recipient, amount, asset, signature)
            self.scheduler.schedule(tx.id, self.settings.processing_delay_ms)
            metrics.intake_queue_size.set(len(self.queue))
        metrics.transactions_submitted.labels(asset=tx.asset).inc()
        logger.info(f"Transaction {tx.id} submitted to ephemeral pool")
        return tx.id

    def process(self, transaction_id: str) -> bool:
        """Run the state transition for one transaction; True if state advanced."""
        with self._lock:
            before = self.state
            self.state = self.processor.process(before, transaction_id)
            return self.state is not before

    def produce_due_blocks(self, now: Optional[int] = None) -> int:
        """Process every transaction whose block time has come."""
        produced = 0
        with self._lock:
            for transaction_id in self.scheduler.pop_due(now):
                if self.process(transaction_id):
                    produced += 1
        return produced

    def get_state(self) -> dict:
        with self._lock:
            state = self.state
            return {
                "current_commitment": state.commitment,
                "block_height": state.block_height,
                "active_notes": state.active_notes,
                "nullifier_count": state.nullifier_count,
                "proof_generated": state.proof_hash is not None,
            }

    def get_balance(self, address, private_key: Optional[str] = None) -> float:
        """Sum of note values for an address.

        The private key is accepted for interface compatibility; notes are
        not encrypted, so nothing is gated on it.
        """
        address = require_text(address, "address")
        with self._lock:
            return self.state.balance_of(address)

    def transaction_pool(self) -> dict:
        with self._lock:
            pending = self.queue.list_pending(self.settings.address_redaction_length)
            return {
                "pending": pending,
                "total_pending": len(pending),
                "processed": self.queue.processed_count(),
            }

    def cleanup(self, older_than: Optional[int] = None) -> dict:
        deleted = self.sweeper.sweep(older_than)
        with self._lock:
            remaining = len(self.queue)
        logger.info(f"Cleanup removed {deleted} transactions, {remaining} remain")
        return {"deleted": deleted, "remaining": remaining}

    def generate_effect_proof(self, recipient, amount, token, nullifier) -> EffectProof:
        with self._lock:
            return self.proofs.generate(self.state, recipient, amount, token, nullifier)

    def health(self) -> dict:
        with self._lock:
            return {
                "chain_id": self.settings.chain_id,
                "block_height": self.state.block_height,
                "transactions_in_black_box": len(self.queue),
            }


@lru_cache()
def get_ledger() -> EphemeralLedger:
    """Get the process-wide ledger instance."""
    from ephemeral_api.db.session import SessionLocal

    return EphemeralLedger(get_settings(), repository=LedgerRepository(SessionLocal))
