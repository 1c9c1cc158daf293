"""Intake queue ("black box") for submitted, not yet processed transfers.

Entries live only in process memory and are purged once processed and past
the retention cutoff.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from ephemeral_api.ledger.validation import require_amount, require_text
from ephemeral_api.utils.clock import Clock, now_ms


@dataclass
class PendingTransaction:
    """Raw transfer request awaiting processing."""

    id: str
    sender: str
    recipient: str
    amount: float
    asset: str
    signature: str
    timestamp: int
    processed: bool = False


def redact(address: str, length: int) -> str:
    """Keep a short prefix of an address for display."""
    return address[:length] + "..."


class IntakeQueue:
    """Ephemeral holding area keyed by transaction id."""

    def __init__(self, default_asset: str = "ETH", clock: Clock = now_ms):
        self.default_asset = default_asset
        self.clock = clock
        self._entries: dict[str, PendingTransaction] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, transaction_id: str) -> bool:
        return transaction_id in self._entries

    def __iter__(self):
        return iter(list(self._entries.values()))

    def get(self, transaction_id: str) -> Optional[PendingTransaction]:
        return self._entries.get(transaction_id)

    def submit(self, sender, recipient, amount, asset, signature) -> PendingTransaction:
        """Validate and store a transfer request."""
        sender = require_text(sender, "from")
        recipient = require_text(recipient, "to")
        amount = require_amount(amount)
        signature = require_text(signature, "signature")
        if asset is not None and not isinstance(asset, str):
            asset = str(asset)

        transaction = PendingTransaction(
            id=secrets.token_hex(32),
            sender=sender,
            recipient=recipient,
            amount=amount,
            asset=asset or self.default_asset,
            signature=signature,
            timestamp=self.clock(),
        )
        self._entries[transaction.id] = transaction
        return transaction

    def pending(self) -> list[PendingTransaction]:
        return [tx for tx in self._entries.values() if not tx.processed]

    def processed_count(self) -> int:
        return sum(1 for tx in self._entries.values() if tx.processed)

    def list_pending(self, redaction_length: int = 10) -> list[dict]:
        """Unprocessed entries with addresses redacted for display."""
        return [
            {
                "id": tx.id,
                "from": redact(tx.sender, redaction_length),
                "to": redact(tx.recipient, redaction_length),
                "amount": tx.amount,
                "asset": tx.asset,
                "timestamp": tx.timestamp,
            }
            for tx in self.pending()
        ]

    def delete(self, older_than: int) -> int:
        """Remove processed entries older than the cutoff; return the count."""
        expired = [
            tx_id
            for tx_id, tx in self._entries.items()
            if tx.processed and tx.timestamp < older_than
        ]
        for tx_id in expired:
            del self._entries[tx_id]
        return len(expired)
