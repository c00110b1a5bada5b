"""Export a ledger snapshot as CSV text or a printable HTML report."""

from __future__ import annotations

import csv
import html
import io
from datetime import date
from typing import Any

from labour_ledger.calculators.balance import classify
from labour_ledger.calculators.summary import summarize
from labour_ledger.calculators.types import LedgerSnapshot
from labour_ledger.formatting import format_currency, format_phone

REPORT_TITLE = "Labour Ledger - Export Report"


class ExportService:
    """Renders snapshots; reads only what it is given."""

    def filename(self, extension: str, on: date | None = None) -> str:
        on = on or date.today()
        return f"labour_ledger_report_{on.isoformat()}.{extension}"

    def render_csv(self, snapshot: LedgerSnapshot, exported_on: date | None = None) -> str:
        """Export a snapshot to CSV format.

        Returns CSV content as a string.
        """
        exported_on = exported_on or date.today()
        output = io.StringIO()
        writer = csv.writer(output)

        # Header
        writer.writerow([REPORT_TITLE])
        writer.writerow([f"Export Date: {exported_on.isoformat()}"])
        if snapshot.range_label:
            writer.writerow([f"Date Range: {snapshot.range_label}"])
        writer.writerow([])

        writer.writerow(["Workers Summary"])
        writer.writerow([
            "Name",
            "Phone",
            "Category",
            "Subcategory",
            "Opening Balance",
            "Current Balance",
            "Status",
        ])
        for worker in snapshot.workers:
            writer.writerow([
                worker.name,
                worker.phone,
                worker.category,
                worker.subcategory,
                _plain(worker.opening_balance),
                _plain(worker.current_balance),
                classify(worker.current_balance).message,
            ])
        writer.writerow([])

        writer.writerow(["Detailed Transactions"])
        writer.writerow(["Date", "Worker Name", "Type", "Attendance", "Amount", "Balance", "Note"])
        names = {w.worker_id: w.name for w in snapshot.workers}
        for event in _by_date(snapshot.events):
            writer.writerow([
                event.entry_date.isoformat(),
                names.get(event.worker_id, "Unknown"),
                event.kind.value,
                getattr(event, "status", "") or "",
                _plain(event.amount),
                _plain(event.balance_after),
                event.note or "",
            ])

        return output.getvalue()

    def render_html(self, snapshot: LedgerSnapshot, exported_on: date | None = None) -> str:
        """Render a self-contained printable report."""
        exported_on = exported_on or date.today()
        stats = summarize(snapshot.workers, snapshot.events)

        if snapshot.range_label:
            range_text = f"Date Range: {snapshot.range_label}"
        else:
            range_text = "All Records"

        cards = [
            ("Total I Owe Workers", format_currency(stats.total_owed_by_owner)),
            ("Total Workers Owe Me", format_currency(stats.total_owed_to_owner)),
            ("Total Wages", format_currency(stats.total_wages_given)),
            ("Total Payments", format_currency(stats.total_payments_made)),
            ("Active Workers", str(stats.active_workers)),
            ("Transactions", str(stats.total_transactions)),
        ]
        card_html = "".join(
            f'<div class="stat-card"><div class="stat-value">{_e(value)}</div>'
            f'<div class="stat-label">{_e(label)}</div></div>'
            for label, value in cards
        )

        worker_rows = []
        for worker in snapshot.workers:
            status = classify(worker.current_balance)
            worker_rows.append(
                "<tr>"
                f"<td>{_e(worker.name)}</td>"
                f"<td>{_e(format_phone(worker.phone))}</td>"
                f"<td>{_e(worker.category)}</td>"
                f"<td>{_e(worker.subcategory)}</td>"
                f'<td class="amount">{_e(format_currency(worker.opening_balance))}</td>'
                f'<td class="amount">{_e(format_currency(worker.current_balance))}</td>'
                f'<td class="status-{status.status.value}">{_e(status.message)}</td>'
                "</tr>"
            )

        names = {w.worker_id: w.name for w in snapshot.workers}
        event_rows = []
        for event in _by_date(snapshot.events):
            event_rows.append(
                "<tr>"
                f"<td>{_e(event.entry_date.isoformat())}</td>"
                f"<td>{_e(names.get(event.worker_id, 'Unknown'))}</td>"
                f"<td>{_e(event.kind.value)}</td>"
                f"<td>{_e(getattr(event, 'status', '') or '')}</td>"
                f'<td class="amount">{_e(format_currency(event.amount))}</td>'
                f'<td class="amount">{_e(format_currency(event.balance_after))}</td>'
                f"<td>{_e(event.note or '')}</td>"
                "</tr>"
            )

        return _HTML_TEMPLATE.format(
            title=_e(REPORT_TITLE),
            exported_on=_e(exported_on.isoformat()),
            range_text=_e(range_text),
            cards=card_html,
            worker_rows="".join(worker_rows),
            event_rows="".join(event_rows),
        )


def _plain(amount: Any) -> str:
    """Amount without trailing zeros for CSV cells."""
    return format(amount.normalize(), "f")


def _e(value: Any) -> str:
    return html.escape(str(value))


def _by_date(events: Any) -> list[Any]:
    return sorted(events, key=lambda e: (e.entry_date, e.sequence))


_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: Arial, sans-serif; margin: 20px; color: #333; }}
.header {{ text-align: center; border-bottom: 2px solid #3B82F6; padding-bottom: 20px; margin-bottom: 30px; }}
.section-title {{ font-size: 18px; font-weight: bold; margin: 30px 0 15px; }}
table {{ width: 100%; border-collapse: collapse; margin-bottom: 20px; }}
th, td {{ border: 1px solid #E5E7EB; padding: 8px; text-align: left; font-size: 12px; }}
th {{ background-color: #F3F4F6; }}
.amount {{ text-align: right; }}
.status-i_owe {{ color: #DC2626; font-weight: bold; }}
.status-worker_owes {{ color: #059669; font-weight: bold; }}
.status-settled {{ color: #6B7280; }}
.summary-stats {{ display: grid; grid-template-columns: 1fr 1fr; gap: 20px; }}
.stat-card {{ background: #F9FAFB; padding: 15px; border: 1px solid #E5E7EB; }}
.stat-value {{ font-size: 18px; font-weight: bold; }}
.stat-label {{ font-size: 12px; color: #6B7280; }}
@media print {{ body {{ margin: 0; }} .stat-card {{ page-break-inside: avoid; }} }}
</style>
</head>
<body>
<div class="header">
<h1>{title}</h1>
<div>Export Date: {exported_on}<br>{range_text}</div>
</div>
<div class="summary-stats">{cards}</div>
<div class="section-title">Workers Summary</div>
<table>
<thead><tr><th>Name</th><th>Phone</th><th>Category</th><th>Subcategory</th><th class="amount">Opening Balance</th><th class="amount">Current Balance</th><th>Status</th></tr></thead>
<tbody>{worker_rows}</tbody>
</table>
<div class="section-title">Detailed Transactions</div>
<table>
<thead><tr><th>Date</th><th>Worker Name</th><th>Type</th><th>Attendance</th><th class="amount">Amount</th><th class="amount">Balance</th><th>Note</th></tr></thead>
<tbody>{event_rows}</tbody>
</table>
</body>
</html>
"""
