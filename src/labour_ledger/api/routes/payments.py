"""Payment endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from labour_ledger.api.dependencies import DbSession, OwnerId
from labour_ledger.api.schemas import (
    BalanceStatusResponse,
    ErrorResponse,
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    RecordedPaymentResponse,
    WorkerResponse,
)
from labour_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post(
    "",
    response_model=RecordedPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_payment(
    db: DbSession,
    owner_id: OwnerId,
    payload: PaymentCreate,
) -> RecordedPaymentResponse:
    """Record a payment; overpaying is allowed and flagged in the response."""
    result = await LedgerService(db).record_payment(
        owner_id,
        payload.worker_id,
        payload.entry_date,
        payload.amount,
        note=payload.note,
    )
    await db.commit()

    payment = PaymentResponse.model_validate(result.entry)
    return RecordedPaymentResponse(
        **payment.model_dump(),
        current_balance=result.worker.current_balance,
        balance_status=BalanceStatusResponse.for_balance(result.worker.current_balance),
        exceeds_balance=result.exceeds_balance,
    )


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> PaymentListResponse:
    payments = await LedgerService(db).list_payments(
        owner_id,
        worker_ids=[worker_id] if worker_id else None,
        date_from=date_from,
        date_to=date_to,
    )
    return PaymentListResponse(
        items=[PaymentResponse.model_validate(p) for p in payments],
        total=len(payments),
    )


@router.delete(
    "/{payment_id}",
    response_model=WorkerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_payment(
    db: DbSession,
    owner_id: OwnerId,
    payment_id: Annotated[UUID, Path()],
) -> WorkerResponse:
    worker = await LedgerService(db).delete_payment(owner_id, payment_id)
    await db.commit()
    return WorkerResponse.from_worker(worker)
