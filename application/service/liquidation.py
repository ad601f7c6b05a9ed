from typing import Optional

from domain.entities import ContractStatus
from domain.exceptions import NotFoundError
from domain.interfaces import ContractRepository, PaymentRepository, UnitOfWork, MetricsPort, BoundLogger
from domain.services import should_liquidate
from application.service.noop_logger import NoOpLogger


class ContractLiquidationService:
    def __init__(
        self,
        contract_repo: ContractRepository,
        payment_repo: PaymentRepository,
        unit_of_work: Optional[UnitOfWork] = None,
        metrics_port: Optional[MetricsPort] = None,
    ):
        self.contract_repo = contract_repo
        self.payment_repo = payment_repo
        self.unit_of_work = unit_of_work
        self.metrics_port = metrics_port

    async def check(self, contract_id: str, log: Optional[BoundLogger] = None) -> bool:
        """
        Mark the contract ``liquidado`` if all of its payments are paid.

        Does not commit; payment settlement calls this inside its own
        transaction so the status change lands together with the payment.
        """
        log = log or NoOpLogger()
        contract = await self.contract_repo.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("contract", contract_id)

        payments = await self.payment_repo.list_payments_by_contract(contract_id)
        if not should_liquidate(contract, payments):
            return False

        await self.contract_repo.update_contract_status(contract_id, ContractStatus.LIQUIDADO)
        if self.metrics_port:
            self.metrics_port.increment_contract_liquidation()
        log.info("contract_liquidated", step="liquidation_check", contract_id=contract_id, payment_count=len(payments))
        return True

    async def execute(self, contract_id: str) -> bool:
        """Standalone, idempotent liquidation check with its own commit."""
        liquidated = await self.check(contract_id)
        if liquidated and self.unit_of_work:
            await self.unit_of_work.commit()
        return liquidated
