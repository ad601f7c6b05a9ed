#!/usr/bin/env python3
"""
Overdue Sweep

Moves every pending installment whose due date has passed to ``overdue``.
Meant to run once a day from cron, shortly after midnight Lisbon time:

    1 0 * * * TZ=Europe/Lisbon python scripts/sweep_overdue.py

Usage:
    python scripts/sweep_overdue.py
    python scripts/sweep_overdue.py --dry-run
    python scripts/sweep_overdue.py --json

Arguments:
    --dry-run: List the installments that would change without writing
    --json: Output the report as JSON
"""
import argparse
import asyncio
import json
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from dotenv import load_dotenv

load_dotenv()

from application.service.sweep_overdue import SweepOverdueService
from domain.entities import PaymentStatus, SweepReport
from domain.services import compute_overdue_transitions
from infrastructure.calendar import SystemBusinessDayCalendar
from infrastructure.db.database import AsyncSessionLocal
from infrastructure.db.repositories.payment_repo_sqlalchemy import PaymentRepoSqlalchemy
from infrastructure.db.repositories.unit_of_work_sqlalchemy import SqlAlchemyUnitOfWork
from infrastructure.logging.logging_adapter import LoggingAdapter
from infrastructure.metrics.metrics_adapter import MetricsAdapter


async def run_sweep(dry_run: bool = False) -> SweepReport:
    calendar = SystemBusinessDayCalendar()
    async with AsyncSessionLocal() as session:
        payment_repo = PaymentRepoSqlalchemy(session)
        if dry_run:
            pending = await payment_repo.list_payments_by_status(PaymentStatus.PENDING)
            due = compute_overdue_transitions(pending, calendar.today())
            return SweepReport(checked=len(pending), transitioned=due, failed=[])

        service = SweepOverdueService(
            payment_repo=payment_repo,
            unit_of_work=SqlAlchemyUnitOfWork(session),
            calendar=calendar,
            metrics_port=MetricsAdapter(),
            logging_port=LoggingAdapter(job="sweep_overdue"),
        )
        return await service.execute()


def format_report(report: SweepReport, dry_run: bool) -> str:
    verb = "would move" if dry_run else "moved"
    lines = [
        f"Checked {report.checked} pending installments",
        f"{verb} {len(report.transitioned)} to overdue",
    ]
    for payment_id in report.transitioned:
        lines.append(f"  - {payment_id}")
    if report.skipped:
        lines.append(f"{len(report.skipped)} skipped (no longer pending)")
    if report.failed:
        lines.append(f"{len(report.failed)} failed:")
        for payment_id in report.failed:
            lines.append(f"  ! {payment_id}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Move past-due pending installments to overdue"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list what would change"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output raw JSON"
    )

    args = parser.parse_args()

    report = asyncio.run(run_sweep(dry_run=args.dry_run))

    if args.json:
        print(json.dumps({
            "checked": report.checked,
            "transitioned": report.transitioned,
            "failed": report.failed,
            "skipped": report.skipped,
        }, indent=2))
    else:
        print(format_report(report, dry_run=args.dry_run))

    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
