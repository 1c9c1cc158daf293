"""Ephemeral chain endpoints: state, transactions, balances, proofs."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ephemeral_api.ledger import EphemeralLedger, InvalidNullifierError, ValidationError, get_ledger
from ephemeral_api.settings import get_settings

router = APIRouter(prefix="/api", tags=["chain"])


class CamelModel(BaseModel):
    """Serialize snake_case fields as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChainStateResponse(CamelModel):
    current_commitment: str
    block_height: int
    active_notes: int
    nullifier_count: int
    proof_generated: bool


class TransactionRequest(BaseModel):
    """Transfer request. Fields are checked by the ledger so errors map to 400."""

    sender: Optional[Any] = Field(None, alias="from")
    recipient: Optional[Any] = Field(None, alias="to")
    amount: Optional[Any] = None
    asset: Optional[str] = None
    signature: Optional[Any] = None


class TransactionResponse(CamelModel):
    success: bool = True
    transaction_id: str
    message: str = "Transaction submitted to ephemeral pool"


class BalanceRequest(CamelModel):
    address: Optional[Any] = None
    private_key: Optional[str] = None


class BalanceResponse(CamelModel):
    address: str
    balance: float
    currency: str


class PooledTransaction(BaseModel):
    """Redacted black box entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sender: str = Field(alias="from")
    recipient: str = Field(alias="to")
    amount: float
    asset: str
    timestamp: int


class TransactionPoolResponse(CamelModel):
    pending: list[PooledTransaction]
    total_pending: int
    processed: int


class CleanupResponse(CamelModel):
    success: bool = True
    deleted_transactions: int
    remaining_transactions: int
    message: str = "Ephemeral transaction data cleaned up"


class EffectProofRequest(BaseModel):
    recipient: Optional[Any] = None
    amount: Optional[Any] = None
    token: Optional[str] = None
    nullifier: Optional[Any] = None


class EffectProofBody(CamelModel):
    state_commitment: str
    nullifier: str
    recipient: str
    token: str
    amount: str
    zk_proof: str


class EffectProofResponse(CamelModel):
    success: bool = True
    proof: EffectProofBody
    message: str = "Effect proof generated for cross-chain withdrawal"


def _bad_request(error: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.get("/state", response_model=ChainStateResponse)
async def get_state(ledger: EphemeralLedger = Depends(get_ledger)):
    """Current chain head and aggregate counters."""
    return ChainStateResponse(**ledger.get_state())


@router.post("/transaction", response_model=TransactionResponse)
async def submit_transaction(
    request_data: TransactionRequest,
    ledger: EphemeralLedger = Depends(get_ledger),
):
    """Submit a transfer to the black box; processing happens after block time."""
    try:
        transaction_id = ledger.submit(
            request_data.sender,
            request_data.recipient,
            request_data.amount,
            request_data.asset,
            request_data.signature,
        )
    except ValidationError as e:
        raise _bad_request(e)
    return TransactionResponse(transaction_id=transaction_id)


@router.post("/balance", response_model=BalanceResponse)
async def get_balance(
    request_data: BalanceRequest,
    ledger: EphemeralLedger = Depends(get_ledger),
):
    """Balance of an address over all recipient notes."""
    try:
        balance = ledger.get_balance(request_data.address, request_data.private_key)
    except ValidationError as e:
        raise _bad_request(e)
    return BalanceResponse(
        address=request_data.address,
        balance=balance,
        currency=get_settings().balance_currency,
    )


@router.get("/txpool", response_model=TransactionPoolResponse)
async def get_transaction_pool(ledger: EphemeralLedger = Depends(get_ledger)):
    """Unprocessed black box entries with redacted addresses."""
    pool = ledger.transaction_pool()
    pending = [
        PooledTransaction(
            id=entry["id"],
            sender=entry["from"],
            recipient=entry["to"],
            amount=entry["amount"],
            asset=entry["asset"],
            timestamp=entry["timestamp"],
        )
        for entry in pool["pending"]
    ]
    return TransactionPoolResponse(
        pending=pending,
        total_pending=pool["total_pending"],
        processed=pool["processed"],
    )


@router.delete("/cleanup", response_model=CleanupResponse)
async def cleanup(
    older_than: Optional[int] = Query(None, alias="olderThan", description="Cutoff in epoch milliseconds"),
    ledger: EphemeralLedger = Depends(get_ledger),
):
    """Purge processed black box entries older than the cutoff."""
    result = ledger.cleanup(older_than)
    return CleanupResponse(
        deleted_transactions=result["deleted"],
        remaining_transactions=result["remaining"],
    )


@router.post("/effect-proof", response_model=EffectProofResponse)
async def generate_effect_proof(
    request_data: EffectProofRequest,
    ledger: EphemeralLedger = Depends(get_ledger),
):
    """Bind a recorded nullifier and withdrawal statement to the chain head."""
    try:
        proof = ledger.generate_effect_proof(
            request_data.recipient,
            request_data.amount,
            request_data.token,
            request_data.nullifier,
        )
    except (ValidationError, InvalidNullifierError) as e:
        raise _bad_request(e)
    return EffectProofResponse(proof=EffectProofBody(**proof.to_dict()))
