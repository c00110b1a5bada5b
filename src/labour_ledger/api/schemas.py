"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from labour_ledger.calculators.balance import classify
from labour_ledger.calculators.types import AttendanceStatus, BalanceState
from labour_ledger.formatting import format_phone


class ErrorResponse(BaseModel):
    """Error body returned for every handled failure."""

    detail: str
    code: str
    field: str | None = None


# ============================================================================
# Catalogue
# ============================================================================


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    subcategories: list[str]


# ============================================================================
# Worker schemas
# ============================================================================


class BalanceStatusResponse(BaseModel):
    status: BalanceState
    message: str
    style_class: str

    @classmethod
    def for_balance(cls, balance: Decimal) -> BalanceStatusResponse:
        classified = classify(balance)
        return cls(
            status=classified.status,
            message=classified.message,
            style_class=classified.style_class,
        )


class WorkerCreate(BaseModel):
    """Schema for creating a worker."""

    name: str = Field(min_length=1)
    phone: str
    category: str
    subcategory: str
    opening_balance: Decimal = Field(default=Decimal("0"), decimal_places=2)


class WorkerUpdate(BaseModel):
    """Schema for updating a worker; opening balance is not accepted."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    category: str | None = None
    subcategory: str | None = None


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    worker_id: UUID
    name: str
    phone: str
    phone_display: str
    category: str
    subcategory: str
    opening_balance: Decimal
    current_balance: Decimal
    balance_status: BalanceStatusResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_worker(cls, worker: Any) -> WorkerResponse:
        return cls(
            worker_id=worker.worker_id,
            name=worker.name,
            phone=worker.phone,
            phone_display=format_phone(worker.phone),
            category=worker.category,
            subcategory=worker.subcategory,
            opening_balance=worker.opening_balance,
            current_balance=worker.current_balance,
            balance_status=BalanceStatusResponse.for_balance(worker.current_balance),
            created_at=worker.created_at,
            updated_at=worker.updated_at,
        )


class WorkerListResponse(BaseModel):
    items: list[WorkerResponse]
    total: int


class WorkerDeleteResponse(BaseModel):
    worker_id: UUID
    deleted_events: int


# ============================================================================
# Ledger event schemas
# ============================================================================


class AttendanceCreate(BaseModel):
    """Schema for recording one day of attendance."""

    worker_id: UUID
    entry_date: date
    status: AttendanceStatus
    base_amount: Decimal = Field(ge=0, decimal_places=2)
    note: str | None = None


class PaymentCreate(BaseModel):
    """Schema for recording a payment."""

    worker_id: UUID
    entry_date: date
    amount: Decimal = Field(gt=0, decimal_places=2)
    note: str | None = None


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    attendance_entry_id: UUID
    worker_id: UUID
    entry_date: date
    status: AttendanceStatus
    base_amount: Decimal
    amount: Decimal
    note: str | None = None
    balance_after: Decimal
    sequence: int
    created_at: datetime


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: UUID
    worker_id: UUID
    entry_date: date
    amount: Decimal
    note: str | None = None
    balance_after: Decimal
    sequence: int
    created_at: datetime


class RecordedAttendanceResponse(AttendanceResponse):
    """Attendance as recorded, with the worker's resulting balance."""

    current_balance: Decimal
    balance_status: BalanceStatusResponse


class RecordedPaymentResponse(PaymentResponse):
    """Payment as recorded; ``exceeds_balance`` is advisory only."""

    current_balance: Decimal
    balance_status: BalanceStatusResponse
    exceeds_balance: bool = False


class AttendanceListResponse(BaseModel):
    items: list[AttendanceResponse]
    total: int


class PaymentListResponse(BaseModel):
    items: list[PaymentResponse]
    total: int


class LedgerEventResponse(BaseModel):
    """One row of a worker's merged ledger history."""

    kind: str
    entry_id: UUID
    entry_date: date
    status: AttendanceStatus | None = None
    amount: Decimal
    balance_after: Decimal
    note: str | None = None
    sequence: int

    @classmethod
    def from_entry(cls, entry: Any) -> LedgerEventResponse:
        return cls(
            kind=entry.kind.value,
            entry_id=entry.entry_id,
            entry_date=entry.entry_date,
            status=getattr(entry, "status", None),
            amount=entry.amount,
            balance_after=entry.balance_after,
            note=entry.note,
            sequence=entry.sequence,
        )


class WorkerLedgerResponse(BaseModel):
    worker: WorkerResponse
    events: list[LedgerEventResponse]


class ReconciliationResponse(BaseModel):
    worker_id: UUID
    stored_balance: Decimal
    replayed_balance: Decimal
    drift: Decimal
    is_consistent: bool
    stale_entries: list[UUID]
    repaired: bool

    @classmethod
    def from_result(cls, result: Any) -> ReconciliationResponse:
        return cls(
            worker_id=result.worker_id,
            stored_balance=result.stored_balance,
            replayed_balance=result.replayed_balance,
            drift=result.drift,
            is_consistent=result.is_consistent,
            stale_entries=result.stale_entries,
            repaired=result.repaired,
        )


# ============================================================================
# Report schemas
# ============================================================================


class SummaryResponse(BaseModel):
    total_owed_by_owner: Decimal
    total_owed_to_owner: Decimal
    total_wages_given: Decimal
    total_payments_made: Decimal
    active_workers: int
    workers_count: int
    present_days: int
    absent_days: int
    half_days: int
    total_attendance_days: int
    total_transactions: int
    net_balance: Decimal
    net_amount: Decimal
    filters: dict[str, Any]
