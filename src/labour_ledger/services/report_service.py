"""Report service: scopes workers and events for dashboards and exports."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from labour_ledger.calculators.summary import SummaryStats, summarize
from labour_ledger.calculators.types import LedgerSnapshot, ReportFilters
from labour_ledger.services.ledger_service import LedgerService
from labour_ledger.services.worker_service import WorkerService


class ReportService:
    """Builds filtered snapshots; the aggregator and exporters never filter."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.workers = WorkerService(session)
        self.ledger = LedgerService(session)

    async def build_snapshot(
        self,
        owner_id: UUID,
        filters: ReportFilters | None = None,
    ) -> LedgerSnapshot:
        """Materialize the workers and events selected by ``filters``.

        Worker filters (worker, category, subcategory) scope both the worker
        list and the events; the date range scopes only the events.
        """
        filters = filters or ReportFilters()
        workers = await self.workers.list_workers(
            owner_id,
            worker_id=filters.worker_id,
            category=filters.category,
            subcategory=filters.subcategory,
        )
        events = await self.ledger.list_events(
            owner_id,
            worker_ids=[w.worker_id for w in workers],
            date_from=filters.date_from,
            date_to=filters.date_to,
        )
        return LedgerSnapshot(workers=workers, events=events, filters=filters)

    async def summary(
        self,
        owner_id: UUID,
        filters: ReportFilters | None = None,
    ) -> SummaryStats:
        snapshot = await self.build_snapshot(owner_id, filters)
        return summarize(snapshot.workers, snapshot.events)
