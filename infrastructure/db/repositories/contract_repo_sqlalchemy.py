from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from domain.entities import Contract, ContractStatus
from domain.exceptions import StaleContractError
from domain.interfaces import ContractRepository
from infrastructure.db.models import ContractModel


class ContractRepoSqlalchemy(ContractRepository):
    """SQLAlchemy implementation of ContractRepository. Flushes, never commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_contract(self, contract_id: str) -> Optional[Contract]:
        """Get a contract by ID."""
        stmt = (
            select(ContractModel)
            .where(ContractModel.id == contract_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        contract_model = result.scalar_one_or_none()
        return contract_model.to_domain() if contract_model else None

    async def update_contract_balances(
        self,
        contract_id: str,
        positive_balance: Decimal,
        negative_balance: Decimal,
        expected_version: int,
    ) -> Contract:
        """
        Write both balances only if nobody else wrote the contract since it was read.

        The UPDATE matches on (id, version) and bumps the version, so of two
        concurrent reconciliations of the same contract exactly one succeeds.
        """
        return await self._compare_and_swap(
            contract_id,
            expected_version,
            positive_balance=positive_balance,
            negative_balance=negative_balance,
        )

    async def bump_version(self, contract_id: str, expected_version: int) -> Contract:
        """Claim the contract for this transaction without changing its balances."""
        return await self._compare_and_swap(contract_id, expected_version)

    async def _compare_and_swap(self, contract_id: str, expected_version: int, **values) -> Contract:
        stmt = (
            update(ContractModel)
            .where(ContractModel.id == contract_id, ContractModel.version == expected_version)
            .values(version=ContractModel.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            raise StaleContractError(contract_id, expected_version)
        await self.db.flush()
        return await self._reload(contract_id)

    async def update_contract_status(self, contract_id: str, status: ContractStatus) -> None:
        stmt = (
            update(ContractModel)
            .where(ContractModel.id == contract_id)
            .values(status=status.value)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)
        await self.db.flush()

    async def _reload(self, contract_id: str) -> Contract:
        stmt = (
            select(ContractModel)
            .where(ContractModel.id == contract_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one().to_domain()
