"""Effect proofs consumed by the lock-and-release bridge contract."""

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional

from ephemeral_api.ledger.commitments import proof_digest
from ephemeral_api.ledger.errors import InvalidNullifierError, ValidationError
from ephemeral_api.ledger.state import LedgerState
from ephemeral_api.ledger.validation import require_exact_amount, require_text
from ephemeral_api.utils import metrics

logger = logging.getLogger(__name__)

WEI_DECIMALS = 18
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def to_wei(amount) -> str:
    """Convert an ether-denominated amount to a wei decimal string.

    Exact for any number of significant digits; more than 18 decimals raise.
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError("amount", "Field 'amount' must be a number") from None
    if not value.is_finite():
        raise ValidationError("amount", "Field 'amount' must be a number")

    with localcontext() as ctx:
        # Shifting the exponent must never round the coefficient
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        try:
            wei = value.scaleb(WEI_DECIMALS)
        except ArithmeticError:
            raise ValidationError("amount", "Field 'amount' is out of range") from None
        if wei != wei.to_integral_value():
            raise ValidationError("amount", "Field 'amount' has more than 18 decimals")
    return str(int(wei))


@dataclass(frozen=True)
class EffectProof:
    """Withdrawal statement bound to a chain head."""

    state_commitment: str
    nullifier: str
    recipient: str
    token: str
    amount: str  # wei
    zk_proof: str

    def to_dict(self) -> dict:
        return asdict(self)


class EffectProofGenerator:
    """Builds effect proofs against the current ledger state."""

    def __init__(self, zero_address: str = ZERO_ADDRESS):
        self.zero_address = zero_address

    def generate(
        self,
        state: LedgerState,
        recipient,
        amount,
        token: Optional[str],
        nullifier,
    ) -> EffectProof:
        """Bind (recipient, amount, token, nullifier) to the current head.

        Reads state only. The proof describes the head in force now, not the
        head at the time the nullifier was recorded. The digest hashes the
        amount exactly as requested, so a numeric string stays a string.
        """
        try:
            recipient = require_text(recipient, "recipient")
            wei = to_wei(require_exact_amount(amount))
            nullifier = require_text(nullifier, "nullifier")
        except ValidationError:
            metrics.effect_proofs_rejected.labels(reason="validation").inc()
            raise

        if not state.has_nullifier(nullifier):
            metrics.effect_proofs_rejected.labels(reason="invalid_nullifier").inc()
            raise InvalidNullifierError(nullifier)

        token = token or self.zero_address
        zk_proof = proof_digest(
            {
                "stateCommitment": state.commitment,
                "effect": {
                    "recipient": recipient,
                    "amount": amount,
                    "token": token,
                    "nullifier": nullifier,
                },
            }
        )
        metrics.effect_proofs_generated.inc()
        logger.info(f"Effect proof issued at block {state.block_height}")
        return EffectProof(
            state_commitment=state.commitment,
            nullifier=nullifier,
            recipient=recipient,
            token=token,
            amount=wei,
            zk_proof=zk_proof,
        )
