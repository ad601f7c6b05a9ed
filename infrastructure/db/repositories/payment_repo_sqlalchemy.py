from enum import Enum
from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select, update
from domain.entities import Payment, PaymentStatus
from domain.exceptions import NotFoundError
from domain.interfaces import PaymentRepository
from infrastructure.db.models import PaymentModel

UPDATABLE_FIELDS = {
    "status",
    "payment_method",
    "paid_amount",
    "paid_date",
    "notes",
    "paid_in_full",
    "positive_delta",
    "negative_delta",
}


class PaymentRepoSqlalchemy(PaymentRepository):
    """SQLAlchemy implementation of PaymentRepository. Flushes, never commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_payment(self, payment_id: str) -> Optional[Payment]:
        """Get a payment by ID."""
        stmt = select(PaymentModel).where(PaymentModel.id == payment_id)
        result = await self.db.execute(stmt)
        payment_model = result.scalar_one_or_none()
        return payment_model.to_domain() if payment_model else None

    async def list_payments_by_contract(self, contract_id: str) -> list[Payment]:
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.contract_id == contract_id)
            .order_by(PaymentModel.due_date.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [pm.to_domain() for pm in result.scalars().all()]

    async def list_payments_by_status(self, status: PaymentStatus) -> list[Payment]:
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.status == status.value)
            .order_by(PaymentModel.due_date.asc())
        )
        result = await self.db.execute(stmt)
        return [pm.to_domain() for pm in result.scalars().all()]

    async def update_payment(self, payment_id: str, fields: dict[str, Any]) -> Payment:
        """
        Update the given columns of one payment.

        Raises:
            ValueError: If a field is not updatable (amount and due_date are immutable)
            NotFoundError: If the payment does not exist
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update payment fields: {sorted(unknown)}")

        values = {k: (v.value if isinstance(v, Enum) else v) for k, v in fields.items()}
        stmt = (
            update(PaymentModel)
            .where(PaymentModel.id == payment_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError("payment", payment_id)
        await self.db.flush()

        stmt = (
            select(PaymentModel)
            .where(PaymentModel.id == payment_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one().to_domain()

    async def insert_payments(self, contract_id: str, payments: list[Payment]) -> None:
        """Add the payments to the session; they become visible on commit."""
        for payment in payments:
            if payment.contract_id != contract_id:
                raise ValueError(f"Payment {payment.id} belongs to contract {payment.contract_id}, not {contract_id}")
            self.db.add(PaymentModel.from_domain(payment))
        await self.db.flush()

    async def transition_status(
        self,
        payment_id: str,
        from_status: PaymentStatus,
        to_status: PaymentStatus,
    ) -> bool:
        """Matches on the stored status, so a payment settled since it was read is left alone."""
        stmt = (
            update(PaymentModel)
            .where(PaymentModel.id == payment_id, PaymentModel.status == from_status.value)
            .values(status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount == 1

    async def delete_payments_by_contract(self, contract_id: str, payment_ids: Optional[list[str]] = None) -> None:
        stmt = delete(PaymentModel).where(PaymentModel.contract_id == contract_id)
        if payment_ids is not None:
            stmt = stmt.where(PaymentModel.id.in_(payment_ids))
        await self.db.execute(stmt)
        await self.db.flush()
