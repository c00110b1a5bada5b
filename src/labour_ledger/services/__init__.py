"""Labour ledger services."""

from labour_ledger.services.export_service import ExportService
from labour_ledger.services.ledger_service import LedgerService, ReconciliationResult, RecordResult
from labour_ledger.services.report_service import ReportService
from labour_ledger.services.worker_service import WorkerService

__all__ = [
    "ExportService",
    "LedgerService",
    "ReconciliationResult",
    "RecordResult",
    "ReportService",
    "WorkerService",
]
