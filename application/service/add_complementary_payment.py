from datetime import date
from decimal import Decimal
from typing import Optional

from domain.entities import ContractStatus, Payment
from domain.exceptions import NotFoundError
from domain.interfaces import BusinessDayCalendar, ContractRepository, LoggingPort, PaymentRepository, UnitOfWork
from domain.services import InstallmentScheduler
from application.service.noop_logger import NoOpLogger


class AddComplementaryPaymentService:
    def __init__(
        self,
        contract_repo: ContractRepository,
        payment_repo: PaymentRepository,
        unit_of_work: UnitOfWork,
        calendar: BusinessDayCalendar,
        logging_port: Optional[LoggingPort] = None,
    ):
        self.contract_repo = contract_repo
        self.payment_repo = payment_repo
        self.unit_of_work = unit_of_work
        self.calendar = calendar
        self.logging_port = logging_port

    async def execute(
        self,
        contract_id: str,
        amount: Decimal,
        due_date: date,
        payment_type: str,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        """Add a ``comp*`` obligation to an existing contract."""
        log = (
            self.logging_port.bind(contract_id=contract_id, step="complementary_payment")
            if self.logging_port else NoOpLogger()
        )
        contract = await self.contract_repo.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("contract", contract_id)

        payment = InstallmentScheduler.build_complementary_payment(
            contract,
            amount=amount,
            due_date=due_date,
            payment_type=payment_type,
            today=self.calendar.today(),
            payment_method=payment_method,
            notes=notes,
        )
        try:
            await self.contract_repo.bump_version(contract.id, expected_version=contract.version)
            await self.payment_repo.insert_payments(contract.id, [payment])
            if contract.status == ContractStatus.LIQUIDADO:
                await self.contract_repo.update_contract_status(contract.id, ContractStatus.ATIVO)
            await self.unit_of_work.commit()
        except Exception:
            await self.unit_of_work.rollback()
            raise

        log.info(
            "complementary_payment_added",
            payment_id=payment.id,
            payment_type=payment.payment_type,
            amount=str(payment.amount),
            status=payment.status.value,
        )
        return payment
