"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from labour_ledger.calculators.types import ReportFilters
from labour_ledger.database import async_session_factory
from labour_ledger.errors import ValidationError


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_owner_id(
    x_owner_id: Annotated[str | None, Header()] = None
) -> UUID:
    """Extract the acting ledger owner from the header set by the auth proxy."""
    if not x_owner_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Owner-ID header is required",
        )
    try:
        return UUID(x_owner_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Owner-ID format",
        )


async def get_report_filters(
    worker_id: UUID | None = None,
    category: str | None = None,
    subcategory: str | None = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
) -> ReportFilters:
    """Collect dashboard/report filters from the query string."""
    try:
        return ReportFilters(
            worker_id=worker_id,
            category=category,
            subcategory=subcategory,
            date_from=date_from,
            date_to=date_to,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
OwnerId = Annotated[UUID, Depends(get_owner_id)]
Filters = Annotated[ReportFilters, Depends(get_report_filters)]
