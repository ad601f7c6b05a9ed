import time
from typing import Optional

from domain.entities import Contract, Payment
from domain.exceptions import ScheduleAlreadyExistsError, ScheduleGenerationFailedError
from domain.interfaces import (
    BusinessDayCalendar,
    ContractRepository,
    LoggingPort,
    MetricsPort,
    PaymentRepository,
    UnitOfWork,
)
from domain.services import InstallmentScheduler
from application.service.noop_logger import NoOpLogger


class GenerateScheduleService:
    def __init__(
        self,
        contract_repo: ContractRepository,
        payment_repo: PaymentRepository,
        unit_of_work: UnitOfWork,
        calendar: BusinessDayCalendar,
        metrics_port: Optional[MetricsPort] = None,
        logging_port: Optional[LoggingPort] = None,
    ):
        self.contract_repo = contract_repo
        self.payment_repo = payment_repo
        self.unit_of_work = unit_of_work
        self.calendar = calendar
        self.metrics_port = metrics_port
        self.logging_port = logging_port

    async def execute(self, contract: Contract, payment_method: Optional[str] = None) -> list[Payment]:
        """
        Build and persist the installment schedule of a newly created contract.

        A contract without installments or start date yields an empty schedule.
        A contract that already has payments is rejected. If persisting fails,
        the installments written by this call are deleted before the error is
        surfaced; payments that existed before are never touched.

        Args:
            contract: Persisted contract
            payment_method: Stored on every generated installment

        Raises:
            InvalidAmountError: Contract value or down payment is invalid
            ScheduleAlreadyExistsError: Contract already has payments
            StaleContractError: Another writer changed the contract since it was read
            ScheduleGenerationFailedError: Installments could not be persisted
        """
        start_time = time.time()
        log = (
            self.logging_port.bind(contract_id=contract.id, step="schedule_generation")
            if self.logging_port else NoOpLogger()
        )

        existing = await self.payment_repo.list_payments_by_contract(contract.id)
        if existing:
            if self.metrics_port:
                self.metrics_port.increment_schedule_generation(outcome="rejected")
            log.warning("schedule_already_exists", payment_count=len(existing))
            raise ScheduleAlreadyExistsError(contract.id, len(existing))

        payments = InstallmentScheduler.build_schedule(contract, payment_method, today=self.calendar.today())
        if not payments:
            if self.metrics_port:
                self.metrics_port.increment_schedule_generation(outcome="skipped")
            log.info(
                "schedule_generation_skipped",
                number_of_payments=contract.number_of_payments,
                has_start_date=contract.start_date is not None,
            )
            return []

        try:
            # a concurrent generation for the same contract loses here
            await self.contract_repo.bump_version(contract.id, expected_version=contract.version)
        except Exception:
            await self.unit_of_work.rollback()
            raise

        try:
            await self.payment_repo.insert_payments(contract.id, payments)
            await self.unit_of_work.commit()
        except Exception as e:
            log.error("schedule_persist_failed", error=str(e), exc_info=True)
            if self.metrics_port:
                self.metrics_port.increment_schedule_generation(outcome="failed")
            await self._remove_partial_schedule(contract.id, [p.id for p in payments], log)
            raise ScheduleGenerationFailedError(
                f"Failed to generate installments for contract {contract.id}: {e}"
            ) from e

        if self.metrics_port:
            self.metrics_port.increment_schedule_generation(outcome="generated")
        log.info(
            "schedule_generated",
            installment_count=len(payments),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return payments

    async def _remove_partial_schedule(self, contract_id: str, payment_ids: list[str], log) -> None:
        await self.unit_of_work.rollback()
        try:
            await self.payment_repo.delete_payments_by_contract(contract_id, payment_ids=payment_ids)
            await self.unit_of_work.commit()
        except Exception as cleanup_error:
            await self.unit_of_work.rollback()
            log.error("schedule_cleanup_failed", error=str(cleanup_error), exc_info=True)
            raise ScheduleGenerationFailedError(
                f"Failed to generate installments for contract {contract_id} and to remove partial rows: "
                f"{cleanup_error}"
            ) from cleanup_error
        log.warning("partial_schedule_removed")
