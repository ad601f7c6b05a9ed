from typing import Optional

from domain.entities import Contract, ContractStatus
from domain.exceptions import InvalidContractStatusError, NotFoundError
from domain.interfaces import ContractRepository, LoggingPort, UnitOfWork
from application.service.noop_logger import NoOpLogger

# liquidado is only reached through the liquidation check
ADMINISTRATIVE_STATUSES = {
    ContractStatus.ATIVO,
    ContractStatus.RENEGOCIADO,
    ContractStatus.CANCELADO,
    ContractStatus.JURIDICO,
}


class UpdateContractStatusService:
    def __init__(
        self,
        contract_repo: ContractRepository,
        unit_of_work: UnitOfWork,
        logging_port: Optional[LoggingPort] = None,
    ):
        self.contract_repo = contract_repo
        self.unit_of_work = unit_of_work
        self.logging_port = logging_port

    async def execute(self, contract_id: str, status: ContractStatus) -> Contract:
        """
        Administrative status change (renegotiation, cancellation, legal action).

        Raises:
            NotFoundError: Contract does not exist
            InvalidContractStatusError: Status is ``liquidado``
            StaleContractError: Contract changed since it was read
        """
        log = (
            self.logging_port.bind(contract_id=contract_id, step="contract_status_update")
            if self.logging_port else NoOpLogger()
        )
        if status not in ADMINISTRATIVE_STATUSES:
            raise InvalidContractStatusError(
                f"Status '{status.value}' is set automatically once every payment is paid"
            )

        contract = await self.contract_repo.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("contract", contract_id)
        if contract.status == status:
            return contract

        try:
            await self.contract_repo.bump_version(contract.id, expected_version=contract.version)
            await self.contract_repo.update_contract_status(contract.id, status)
            await self.unit_of_work.commit()
        except Exception:
            await self.unit_of_work.rollback()
            raise

        log.info("contract_status_updated", previous=contract.status.value, status=status.value)
        return await self.contract_repo.get_contract(contract.id)
