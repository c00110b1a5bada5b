"""Attendance endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from labour_ledger.api.dependencies import DbSession, OwnerId
from labour_ledger.api.schemas import (
    AttendanceCreate,
    AttendanceListResponse,
    AttendanceResponse,
    BalanceStatusResponse,
    ErrorResponse,
    RecordedAttendanceResponse,
    WorkerResponse,
)
from labour_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post(
    "",
    response_model=RecordedAttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_attendance(
    db: DbSession,
    owner_id: OwnerId,
    payload: AttendanceCreate,
) -> RecordedAttendanceResponse:
    """Record one day of attendance for a worker.

    Returns 409 when attendance already exists for that worker and date.
    """
    result = await LedgerService(db).record_attendance(
        owner_id,
        payload.worker_id,
        payload.entry_date,
        payload.status,
        payload.base_amount,
        note=payload.note,
    )
    await db.commit()

    entry = AttendanceResponse.model_validate(result.entry)
    return RecordedAttendanceResponse(
        **entry.model_dump(),
        current_balance=result.worker.current_balance,
        balance_status=BalanceStatusResponse.for_balance(result.worker.current_balance),
    )


@router.get("", response_model=AttendanceListResponse)
async def list_attendance(
    db: DbSession,
    owner_id: OwnerId,
    worker_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> AttendanceListResponse:
    entries = await LedgerService(db).list_attendance(
        owner_id,
        worker_ids=[worker_id] if worker_id else None,
        date_from=date_from,
        date_to=date_to,
    )
    return AttendanceListResponse(
        items=[AttendanceResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.delete(
    "/{attendance_entry_id}",
    response_model=WorkerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_attendance(
    db: DbSession,
    owner_id: OwnerId,
    attendance_entry_id: Annotated[UUID, Path()],
) -> WorkerResponse:
    """Remove an attendance entry; returns the worker with the replayed balance."""
    worker = await LedgerService(db).delete_attendance_entry(owner_id, attendance_entry_id)
    await db.commit()
    return WorkerResponse.from_worker(worker)
