import time
from typing import Optional

from domain.config import LedgerConfig, get_ledger_config
from domain.entities import ContractStatus, PaymentApplicationResult, PaymentStatus
from domain.exceptions import InvalidPaymentStateError, NotFoundError
from domain.interfaces import ContractRepository, LoggingPort, MetricsPort, PaymentRepository, UnitOfWork
from domain.services import Balances
from domain.services.balance_ledger import reverse_settlement
from domain.services.money import ZERO
from application.service.noop_logger import NoOpLogger


class ResetPaymentService:
    """
    Un-pay: put a paid installment back to ``pending``.

    Whether the balance movement recorded at pay-time is undone depends on
    ``LedgerConfig.unpay_policy``. The default keeps the balances as they
    are; ``reverse`` subtracts the recorded deltas from the contract's net
    position.
    """

    def __init__(
        self,
        contract_repo: ContractRepository,
        payment_repo: PaymentRepository,
        unit_of_work: UnitOfWork,
        ledger_config: Optional[LedgerConfig] = None,
        metrics_port: Optional[MetricsPort] = None,
        logging_port: Optional[LoggingPort] = None,
    ):
        self.contract_repo = contract_repo
        self.payment_repo = payment_repo
        self.unit_of_work = unit_of_work
        self.ledger_config = ledger_config or get_ledger_config()
        self.metrics_port = metrics_port
        self.logging_port = logging_port

    async def execute(self, payment_id: str) -> PaymentApplicationResult:
        start_time = time.time()
        log = (
            self.logging_port.bind(payment_id=payment_id, flow="reset", step="payment_reset")
            if self.logging_port else NoOpLogger()
        )

        payment = await self.payment_repo.get_payment(payment_id)
        if payment is None:
            raise NotFoundError("payment", payment_id)
        if payment.status != PaymentStatus.PAID:
            raise InvalidPaymentStateError(
                f"Only paid payments can be reset to pending (payment {payment_id} is {payment.status.value})"
            )
        contract = await self.contract_repo.get_contract(payment.contract_id)
        if contract is None:
            raise NotFoundError("contract", payment.contract_id)

        contract_updated = False
        message = "Payment reset to pending. Contract balances were not changed."
        try:
            if self.ledger_config.reverses_on_unpay:
                current = Balances.of(contract.positive_balance, contract.negative_balance)
                reverted = reverse_settlement(current, payment.positive_delta, payment.negative_delta)
                await self.contract_repo.update_contract_balances(
                    contract.id, reverted.positive, reverted.negative, expected_version=contract.version
                )
                contract_updated = reverted != current
                message = (
                    f"Payment reset to pending. Contract balances reverted to "
                    f"positive {reverted.positive}, negative {reverted.negative}."
                )
            else:
                await self.contract_repo.bump_version(contract.id, expected_version=contract.version)

            updated = await self.payment_repo.update_payment(payment.id, {
                "status": PaymentStatus.PENDING,
                "paid_date": None,
                "paid_amount": None,
                "paid_in_full": None,
                "positive_delta": ZERO,
                "negative_delta": ZERO,
            })

            # a contract with an open installment is no longer liquidated
            if contract.status == ContractStatus.LIQUIDADO:
                await self.contract_repo.update_contract_status(contract.id, ContractStatus.ATIVO)
                contract_updated = True

            await self.unit_of_work.commit()
        except Exception as e:
            await self.unit_of_work.rollback()
            if self.metrics_port:
                self.metrics_port.increment_payment_application(flow="reset", outcome="error")
            log.error("payment_reset_failed", error=str(e), exc_info=True)
            raise

        if self.metrics_port:
            self.metrics_port.increment_payment_application(flow="reset", outcome="reset")
        log.info(
            "payment_reset_completed",
            contract_id=contract.id,
            policy=self.ledger_config.unpay_policy,
            contract_updated=contract_updated,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return PaymentApplicationResult(payment=updated, contract_updated=contract_updated, message=message)
