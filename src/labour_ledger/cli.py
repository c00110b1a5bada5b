"""Labour ledger command line interface.

Provides operational tools for:
- Balance verification against a replay of the history
- Balance repair
- Report export
- Dashboard summary

Usage:
    python -m labour_ledger.cli verify --owner-id X
    python -m labour_ledger.cli recompute --owner-id X [--worker-id Y]
    python -m labour_ledger.cli export --owner-id X --format csv --output report.csv
    python -m labour_ledger.cli summary --owner-id X --from 2024-01-01 --to 2024-01-31
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable, Coroutine
from uuid import UUID

from labour_ledger.calculators.types import ReportFilters
from labour_ledger.config import configure_logging, get_settings
from labour_ledger.database import create_schema, dispose_db, get_session, init_db
from labour_ledger.errors import LedgerError
from labour_ledger.services.export_service import ExportService
from labour_ledger.services.ledger_service import LedgerService, ReconciliationResult
from labour_ledger.services.report_service import ReportService

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO calendar date string."""
    return date.fromisoformat(s)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


class LedgerCli:
    """Labour ledger command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="labour-ledger",
            description="Labour ledger operational tools",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Override LOG_LEVEL",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        verify = subparsers.add_parser(
            "verify",
            help="Compare stored balances with a replay of each worker's history",
        )
        self._add_scope_args(verify)

        recompute = subparsers.add_parser(
            "recompute",
            help="Replay histories and repair drifted balances and snapshots",
        )
        self._add_scope_args(recompute)

        export = subparsers.add_parser(
            "export",
            help="Export workers and transactions",
        )
        self._add_filter_args(export)
        export.add_argument(
            "--format",
            choices=["csv", "html"],
            default="csv",
            help="Output format (default: csv)",
        )
        export.add_argument(
            "--output",
            type=Path,
            help="Output file (default: stdout)",
        )

        summary = subparsers.add_parser(
            "summary",
            help="Print dashboard totals as JSON",
        )
        self._add_filter_args(summary)

        return parser

    def _add_scope_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--owner-id",
            type=parse_uuid,
            required=True,
            help="Ledger owner ID",
        )
        parser.add_argument(
            "--worker-id",
            type=parse_uuid,
            help="Limit to a single worker",
        )

    def _add_filter_args(self, parser: argparse.ArgumentParser) -> None:
        self._add_scope_args(parser)
        parser.add_argument("--category", type=str, help="Category filter")
        parser.add_argument("--subcategory", type=str, help="Subcategory filter")
        parser.add_argument(
            "--from",
            dest="date_from",
            type=parse_date,
            help="First day of the range (YYYY-MM-DD)",
        )
        parser.add_argument(
            "--to",
            dest="date_to",
            type=parse_date,
            help="Last day of the range (YYYY-MM-DD)",
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(parsed.log_level)

        handlers: dict[str, Callable[[argparse.Namespace], Coroutine[Any, Any, int]]] = {
            "verify": self._cmd_verify,
            "recompute": self._cmd_recompute,
            "export": self._cmd_export,
            "summary": self._cmd_summary,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return asyncio.run(self._run(handler, parsed))
        except LedgerError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    async def _run(
        self,
        handler: Callable[[argparse.Namespace], Coroutine[Any, Any, int]],
        args: argparse.Namespace,
    ) -> int:
        engine, _ = init_db()
        try:
            if get_settings().create_schema:
                await create_schema(engine)
            return await handler(args)
        finally:
            await dispose_db()

    async def _cmd_verify(self, args: argparse.Namespace) -> int:
        """Verify balances without writing."""
        async with get_session() as session:
            ledger = LedgerService(session)
            if args.worker_id:
                results = [await ledger.verify_worker(args.owner_id, args.worker_id)]
            else:
                results = await ledger.verify_all(args.owner_id)

        return self._report(results, "Verification")

    async def _cmd_recompute(self, args: argparse.Namespace) -> int:
        """Replay and repair balances."""
        async with get_session() as session:
            ledger = LedgerService(session)
            if args.worker_id:
                results = [await ledger.recompute_worker(args.owner_id, args.worker_id)]
            else:
                results = await ledger.recompute_all(args.owner_id)

        repaired = sum(1 for r in results if r.repaired)
        print(f"Recomputed {len(results)} worker(s), repaired {repaired}.")
        return 0

    async def _cmd_export(self, args: argparse.Namespace) -> int:
        """Export a filtered snapshot to CSV or HTML."""
        filters = self._filters(args)
        async with get_session() as session:
            snapshot = await ReportService(session).build_snapshot(args.owner_id, filters)

        exporter = ExportService()
        if args.format == "html":
            content = exporter.render_html(snapshot)
        else:
            content = exporter.render_csv(snapshot)

        if args.output:
            args.output.write_text(content, encoding="utf-8")
            print(
                f"Exported {len(snapshot.workers)} worker(s) and "
                f"{len(snapshot.events)} transaction(s) to {args.output}"
            )
        else:
            sys.stdout.write(content)
        return 0

    async def _cmd_summary(self, args: argparse.Namespace) -> int:
        """Print dashboard totals."""
        filters = self._filters(args)
        async with get_session() as session:
            stats = await ReportService(session).summary(args.owner_id, filters)

        print(json.dumps({**stats.to_dict(), "filters": filters.as_dict()}, indent=2, default=str))
        return 0

    def _filters(self, args: argparse.Namespace) -> ReportFilters:
        return ReportFilters(
            worker_id=args.worker_id,
            category=args.category,
            subcategory=args.subcategory,
            date_from=args.date_from,
            date_to=args.date_to,
        )

    def _report(self, results: list[ReconciliationResult], label: str) -> int:
        drifted = [r for r in results if not r.is_consistent]
        for r in drifted:
            print(
                f"  ✗ {r.worker_id}: stored {r.stored_balance}, "
                f"replayed {r.replayed_balance}, "
                f"{len(r.stale_entries)} stale snapshot(s)"
            )

        print("\n" + "=" * 40)
        if drifted:
            print(f"{label}: FAILED ({len(drifted)} of {len(results)} worker(s) drifted)")
            print("Run 'labour-ledger recompute' to repair.")
            return 1
        print(f"{label}: PASSED ({len(results)} worker(s) consistent)")
        return 0


def main() -> int:
    """CLI entry point."""
    cli = LedgerCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
