"""Worker master data endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from labour_ledger.api.dependencies import DbSession, OwnerId
from labour_ledger.api.schemas import (
    ErrorResponse,
    LedgerEventResponse,
    ReconciliationResponse,
    WorkerCreate,
    WorkerDeleteResponse,
    WorkerLedgerResponse,
    WorkerListResponse,
    WorkerResponse,
    WorkerUpdate,
)
from labour_ledger.services.ledger_service import LedgerService
from labour_ledger.services.worker_service import WorkerService

router = APIRouter(prefix="/workers", tags=["workers"])


# ============================================================================
# Worker CRUD
# ============================================================================


@router.post(
    "",
    response_model=WorkerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_worker(
    db: DbSession,
    owner_id: OwnerId,
    payload: WorkerCreate,
) -> WorkerResponse:
    """Create a worker; the opening balance cannot be changed afterwards."""
    worker = await WorkerService(db).create_worker(
        owner_id,
        name=payload.name,
        phone=payload.phone,
        category=payload.category,
        subcategory=payload.subcategory,
        opening_balance=payload.opening_balance,
    )
    await db.commit()
    return WorkerResponse.from_worker(worker)


@router.get("", response_model=WorkerListResponse)
async def list_workers(
    db: DbSession,
    owner_id: OwnerId,
    category: str | None = None,
    subcategory: str | None = None,
) -> WorkerListResponse:
    """List workers with their current balances."""
    workers = await WorkerService(db).list_workers(
        owner_id, category=category, subcategory=subcategory
    )
    return WorkerListResponse(
        items=[WorkerResponse.from_worker(w) for w in workers],
        total=len(workers),
    )


@router.get(
    "/{worker_id}",
    response_model=WorkerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_worker(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: Annotated[UUID, Path()],
) -> WorkerResponse:
    worker = await WorkerService(db).get_worker(owner_id, worker_id)
    return WorkerResponse.from_worker(worker)


@router.patch(
    "/{worker_id}",
    response_model=WorkerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_worker(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: Annotated[UUID, Path()],
    payload: WorkerUpdate,
) -> WorkerResponse:
    """Update name, phone, category or subcategory."""
    changes = payload.model_dump(exclude_unset=True)
    worker = await WorkerService(db).update_worker(owner_id, worker_id, **changes)
    await db.commit()
    return WorkerResponse.from_worker(worker)


@router.delete(
    "/{worker_id}",
    response_model=WorkerDeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_worker(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: Annotated[UUID, Path()],
) -> WorkerDeleteResponse:
    """Delete a worker together with all of their attendance and payments."""
    deleted = await WorkerService(db).delete_worker(owner_id, worker_id)
    await db.commit()
    return WorkerDeleteResponse(worker_id=worker_id, deleted_events=deleted)


# ============================================================================
# Ledger history and consistency
# ============================================================================


@router.get(
    "/{worker_id}/ledger",
    response_model=WorkerLedgerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_worker_ledger(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: Annotated[UUID, Path()],
) -> WorkerLedgerResponse:
    """A worker's events in chronological order with running balances."""
    ledger = LedgerService(db)
    worker = await ledger.workers.get_worker(owner_id, worker_id)
    history = await ledger.list_history(owner_id, worker_id)
    return WorkerLedgerResponse(
        worker=WorkerResponse.from_worker(worker),
        events=[LedgerEventResponse.from_entry(e) for e in history],
    )


@router.get(
    "/{worker_id}/reconciliation",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_worker(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: Annotated[UUID, Path()],
) -> ReconciliationResponse:
    """Compare the stored balance with a replay of the history."""
    result = await LedgerService(db).verify_worker(owner_id, worker_id)
    return ReconciliationResponse.from_result(result)


@router.post(
    "/{worker_id}/recompute",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def recompute_worker(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: Annotated[UUID, Path()],
) -> ReconciliationResponse:
    """Replay the history and repair any drifted snapshot or balance."""
    result = await LedgerService(db).recompute_worker(owner_id, worker_id)
    await db.commit()
    return ReconciliationResponse.from_result(result)
