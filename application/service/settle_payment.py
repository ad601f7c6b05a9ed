import time
from typing import Any, Optional

from domain.entities import Contract, Payment, PaymentStatus
from domain.exceptions import AlreadyPaidError, NotFoundError
from domain.interfaces import (
    BoundLogger,
    BusinessDayCalendar,
    ContractRepository,
    LoggingPort,
    MetricsPort,
    PaymentRepository,
    UnitOfWork,
)
from domain.services import Balances, LedgerOutcome
from application.service.liquidation import ContractLiquidationService
from application.service.noop_logger import NoOpLogger


class PaymentSettlementService:
    """
    Shared read-compute-write cycle for settling one installment.

    Subclasses compute a LedgerOutcome from the loaded payment and contract;
    this class validates the preconditions, writes the contract balances
    (compare-and-swap on the contract version), the payment row and the
    liquidation status, then commits once. Any failure rolls the whole
    reconciliation back and is re-raised unchanged.
    """

    flow = "settlement"

    def __init__(
        self,
        contract_repo: ContractRepository,
        payment_repo: PaymentRepository,
        unit_of_work: UnitOfWork,
        calendar: BusinessDayCalendar,
        metrics_port: Optional[MetricsPort] = None,
        logging_port: Optional[LoggingPort] = None,
    ):
        """
        Args:
            contract_repo: Repository for contracts and their balances
            payment_repo: Repository for installments
            unit_of_work: Transaction boundary shared by both repositories
            calendar: Business-day calendar used to date the payment
            metrics_port: Metrics port for emitting metrics (optional)
            logging_port: Logging port for structured logging (optional)
        """
        self.contract_repo = contract_repo
        self.payment_repo = payment_repo
        self.unit_of_work = unit_of_work
        self.calendar = calendar
        self.metrics_port = metrics_port
        self.logging_port = logging_port
        self.liquidation = ContractLiquidationService(contract_repo, payment_repo, metrics_port=metrics_port)

    def _bind_logger(self, **kwargs: Any) -> BoundLogger:
        if self.logging_port:
            return self.logging_port.bind(flow=self.flow, **kwargs)
        return NoOpLogger()

    async def _load(self, payment_id: str) -> tuple[Payment, Contract]:
        payment = await self.payment_repo.get_payment(payment_id)
        if payment is None:
            raise NotFoundError("payment", payment_id)
        if payment.status == PaymentStatus.PAID:
            raise AlreadyPaidError(payment_id)

        contract = await self.contract_repo.get_contract(payment.contract_id)
        if contract is None:
            raise NotFoundError("contract", payment.contract_id)
        return payment, contract

    @staticmethod
    def _balances(contract: Contract) -> Balances:
        return Balances.of(contract.positive_balance, contract.negative_balance)

    async def _commit_outcome(
        self,
        payment: Payment,
        contract: Contract,
        outcome: LedgerOutcome,
        log: BoundLogger,
        payment_method: Optional[str] = None,
    ) -> Payment:
        try:
            # version is bumped even when the balances do not change
            await self.contract_repo.update_contract_balances(
                contract.id,
                outcome.balances.positive,
                outcome.balances.negative,
                expected_version=contract.version,
            )

            fields: dict[str, Any] = {
                "status": PaymentStatus.PAID,
                "paid_amount": outcome.paid_amount,
                "paid_date": self.calendar.current_or_last_business_day(),
                "paid_in_full": outcome.paid_in_full,
                "positive_delta": outcome.positive_delta,
                "negative_delta": outcome.negative_delta,
            }
            if payment_method is not None:
                fields["payment_method"] = payment_method
            updated = await self.payment_repo.update_payment(payment.id, fields)

            await self.liquidation.check(contract.id, log=log)
            await self.unit_of_work.commit()
        except Exception:
            await self.unit_of_work.rollback()
            raise
        return updated

    async def _run(self, payment_id: str, compute, payment_method: Optional[str] = None, **log_context: Any):
        """
        Load, compute and commit.

        Args:
            payment_id: Installment to settle
            compute: Callable (payment, balances) -> LedgerOutcome
            payment_method: Stored on the payment when given
        """
        start_time = time.time()
        log = self._bind_logger(payment_id=payment_id, step="payment_settlement", **log_context)
        log.info("payment_settlement_started")

        try:
            payment, contract = await self._load(payment_id)
            balances = self._balances(contract)
            outcome = compute(payment, balances)
            log.info(
                "ledger_outcome_computed",
                contract_id=contract.id,
                kind=outcome.kind.value,
                positive_before=str(balances.positive),
                negative_before=str(balances.negative),
                positive_after=str(outcome.balances.positive),
                negative_after=str(outcome.balances.negative),
                paid_amount=str(outcome.paid_amount),
            )
            updated = await self._commit_outcome(payment, contract, outcome, log, payment_method)
        except Exception as e:
            if self.metrics_port:
                self.metrics_port.increment_payment_application(flow=self.flow, outcome="error")
            log.warning(
                "payment_settlement_failed",
                duration_ms=round((time.time() - start_time) * 1000, 2),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        if self.metrics_port:
            self.metrics_port.increment_payment_application(flow=self.flow, outcome=outcome.kind.value)
        log.info(
            "payment_settlement_completed",
            duration_ms=round((time.time() - start_time) * 1000, 2),
            kind=outcome.kind.value,
            contract_updated=outcome.contract_updated,
        )
        return updated, outcome
