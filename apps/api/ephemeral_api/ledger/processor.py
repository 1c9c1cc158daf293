"""State-transition function: folds one queued transaction into the ledger."""

import logging
import secrets
import time
from typing import Callable, Optional

from ephemeral_api.ledger.commitments import commit, nullify, proof_digest
from ephemeral_api.ledger.errors import DuplicateNullifierError, ProcessingError
from ephemeral_api.ledger.intake import IntakeQueue
from ephemeral_api.ledger.repository import LedgerRepository
from ephemeral_api.ledger.state import LedgerState, Note
from ephemeral_api.utils import metrics
from ephemeral_api.utils.clock import Clock, now_ms

logger = logging.getLogger(__name__)


def fresh_randomness() -> str:
    return secrets.token_hex(16)


class TransactionProcessor:
    """Consumes intake entries and produces the next ledger state.

    The new state is persisted before it is returned, so callers only ever
    expose a head that has durably landed.
    """

    def __init__(
        self,
        queue: IntakeQueue,
        repository: Optional[LedgerRepository] = None,
        reject_duplicate_nullifiers: bool = True,
        clock: Clock = now_ms,
        randomness: Callable[[], str] = fresh_randomness,
    ):
        self.queue = queue
        self.repository = repository
        self.reject_duplicate_nullifiers = reject_duplicate_nullifiers
        self.clock = clock
        self.randomness = randomness

    def process(self, state: LedgerState, transaction_id: str) -> LedgerState:
        """Process one transaction; return the state to keep.

        Missing or already processed entries are a no-op. Failures are logged
        and the input state is returned unchanged with the entry left
        unprocessed. Nothing retries it.
        """
        tx = self.queue.get(transaction_id)
        if tx is None or tx.processed:
            return state

        started = time.perf_counter()
        try:
            timestamp = self.clock()
            recipient_note = Note(
                commitment=commit(tx.amount, tx.recipient, self.randomness()),
                value=tx.amount,
                recipient=tx.recipient,
                created_at=timestamp,
            )
            # The sender note is recomputed here, never stored or debited
            sender_note_id = commit(tx.amount, tx.sender, self.randomness())
            nullifier = nullify(tx.signature, sender_note_id)

            if self.reject_duplicate_nullifiers and state.has_nullifier(nullifier):
                raise DuplicateNullifierError(f"Nullifier {nullifier} already spent")

            next_state = state.advance(recipient_note, nullifier, timestamp)
            next_state.proof_hash = proof_digest(
                {
                    "oldCommitment": state.commitment,
                    "newCommitment": next_state.commitment,
                    "transaction": {"amount": tx.amount, "nullifier": nullifier},
                }
            )

            if self.repository is not None:
                self.repository.append_transition(next_state, recipient_note, nullifier, timestamp)

            tx.processed = True
        except ProcessingError as e:
            metrics.processing_failures.labels(reason=type(e).__name__).inc()
            logger.error(f"Transaction {transaction_id} left unprocessed: {e}")
            return state
        except Exception as e:
            metrics.processing_failures.labels(reason="unexpected").inc()
            logger.error(f"Error processing transaction {transaction_id}: {e}", exc_info=True)
            return state

        metrics.blocks_processed.inc()
        metrics.block_height.set(next_state.block_height)
        metrics.processing_duration.observe(time.perf_counter() - started)
        logger.info(
            f"Transaction {transaction_id} processed. "
            f"Block {next_state.block_height}, new state: {next_state.commitment}"
        )
        return next_state
