"""Liveness, readiness and ledger database health."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from labour_ledger import __version__
from labour_ledger.api.dependencies import DbSession
from labour_ledger.models import AttendanceEntry, Payment, Worker

router = APIRouter(tags=["health"])

LEDGER_TABLES = (Worker, AttendanceEntry, Payment)


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    database: str
    ledger_tables: dict[str, str]


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """Check the database connection and that every ledger table is queryable.

    Reports ``degraded`` when the database answers but a table is missing,
    for instance when the app starts with ``CREATE_SCHEMA=false`` against an
    empty database.
    """
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError:
        database = "unreachable"

    tables: dict[str, str] = {}
    for model in LEDGER_TABLES:
        name = model.__tablename__
        if database != "healthy":
            tables[name] = "unknown"
            continue
        try:
            await db.execute(select(func.count()).select_from(model).limit(1))
            tables[name] = "ok"
        except SQLAlchemyError:
            await db.rollback()
            tables[name] = "missing"

    healthy = database == "healthy" and all(v == "ok" for v in tables.values())
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        database=database,
        ledger_tables=tables,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
