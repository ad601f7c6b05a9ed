from decimal import Decimal
from typing import Optional

from typing_extensions import Protocol

from domain.entities import Contract, ContractStatus


class ContractRepository(Protocol):
    async def get_contract(self, contract_id: str) -> Optional[Contract]: ...

    async def update_contract_balances(
        self,
        contract_id: str,
        positive_balance: Decimal,
        negative_balance: Decimal,
        expected_version: int,
    ) -> Contract:
        """
        Compare-and-swap the balances on ``version``.

        Raises:
            StaleContractError: If the stored version differs from expected_version
        """
        ...

    async def bump_version(self, contract_id: str, expected_version: int) -> Contract:
        """
        Compare-and-swap on ``version`` without touching the balances; used by
        writes that must not interleave with a settlement of the same contract.

        Raises:
            StaleContractError: If the stored version differs from expected_version
        """
        ...

    async def update_contract_status(self, contract_id: str, status: ContractStatus) -> None: ...
