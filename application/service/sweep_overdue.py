import time
from typing import Optional

from domain.entities import PaymentStatus, SweepReport
from domain.interfaces import BusinessDayCalendar, LoggingPort, MetricsPort, PaymentRepository, UnitOfWork
from domain.services import compute_overdue_transitions
from application.service.noop_logger import NoOpLogger


class SweepOverdueService:
    """
    Daily batch: pending installments past their due date become overdue.

    Each transition is committed on its own; a failing record is logged,
    counted and skipped so it never blocks the rest of the batch.
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        unit_of_work: UnitOfWork,
        calendar: BusinessDayCalendar,
        metrics_port: Optional[MetricsPort] = None,
        logging_port: Optional[LoggingPort] = None,
    ):
        self.payment_repo = payment_repo
        self.unit_of_work = unit_of_work
        self.calendar = calendar
        self.metrics_port = metrics_port
        self.logging_port = logging_port

    async def execute(self) -> SweepReport:
        start_time = time.time()
        today = self.calendar.today()
        log = self.logging_port.bind(step="overdue_sweep", today=today.isoformat()) if self.logging_port else NoOpLogger()

        pending = await self.payment_repo.list_payments_by_status(PaymentStatus.PENDING)
        to_transition = compute_overdue_transitions(pending, today)
        log.info("overdue_sweep_started", pending_count=len(pending), due_count=len(to_transition))

        transitioned, skipped, failed = [], [], []
        for payment_id in to_transition:
            try:
                changed = await self.apply(payment_id)
            except Exception as e:
                await self.unit_of_work.rollback()
                failed.append(payment_id)
                if self.metrics_port:
                    self.metrics_port.increment_overdue_transition(outcome="failed")
                log.error("overdue_transition_failed", payment_id=payment_id, error=str(e), exc_info=True)
                continue
            if not changed:
                # settled since the pending list was read
                skipped.append(payment_id)
                if self.metrics_port:
                    self.metrics_port.increment_overdue_transition(outcome="skipped")
                log.info("overdue_transition_skipped", payment_id=payment_id)
                continue
            transitioned.append(payment_id)
            if self.metrics_port:
                self.metrics_port.increment_overdue_transition(outcome="transitioned")

        log.info(
            "overdue_sweep_completed",
            transitioned_count=len(transitioned),
            skipped_count=len(skipped),
            failed_count=len(failed),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return SweepReport(checked=len(pending), transitioned=transitioned, failed=failed, skipped=skipped)

    async def apply(self, payment_id: str) -> bool:
        """
        Move one payment to overdue and commit it.

        Only a payment that is still pending is changed; returns False when it
        was paid (or otherwise moved on) after the batch read it.
        """
        changed = await self.payment_repo.transition_status(
            payment_id, PaymentStatus.PENDING, PaymentStatus.OVERDUE
        )
        await self.unit_of_work.commit()
        return changed
