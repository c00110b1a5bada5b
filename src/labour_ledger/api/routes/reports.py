"""Dashboard summary and export endpoints."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from labour_ledger.api.dependencies import DbSession, Filters, OwnerId
from labour_ledger.api.schemas import SummaryResponse
from labour_ledger.services.export_service import ExportService
from labour_ledger.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    db: DbSession,
    owner_id: OwnerId,
    filters: Filters,
) -> SummaryResponse:
    """Aggregate balances and attendance for the filtered workers and dates."""
    stats = await ReportService(db).summary(owner_id, filters)
    return SummaryResponse(**stats.to_dict(), filters=filters.as_dict())


@router.get("/export.csv")
async def export_csv(
    db: DbSession,
    owner_id: OwnerId,
    filters: Filters,
) -> Response:
    snapshot = await ReportService(db).build_snapshot(owner_id, filters)
    exporter = ExportService()
    return Response(
        content=exporter.render_csv(snapshot),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{exporter.filename("csv")}"'
        },
    )


@router.get("/export.html", response_class=HTMLResponse)
async def export_html(
    db: DbSession,
    owner_id: OwnerId,
    filters: Filters,
) -> HTMLResponse:
    """Printable report; the browser's print dialog produces the PDF."""
    snapshot = await ReportService(db).build_snapshot(owner_id, filters)
    return HTMLResponse(content=ExportService().render_html(snapshot))
