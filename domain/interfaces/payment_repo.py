from typing import Any, Optional

from typing_extensions import Protocol

from domain.entities import Payment, PaymentStatus


class PaymentRepository(Protocol):
    async def get_payment(self, payment_id: str) -> Optional[Payment]: ...
    async def list_payments_by_contract(self, contract_id: str) -> list[Payment]: ...
    async def list_payments_by_status(self, status: PaymentStatus) -> list[Payment]: ...
    async def update_payment(self, payment_id: str, fields: dict[str, Any]) -> Payment: ...

    async def transition_status(
        self,
        payment_id: str,
        from_status: PaymentStatus,
        to_status: PaymentStatus,
    ) -> bool:
        """
        Change the status only if the stored status is still ``from_status``.

        Returns:
            True if the row was changed, False if its status had already moved on
        """
        ...

    async def insert_payments(self, contract_id: str, payments: list[Payment]) -> None: ...

    async def delete_payments_by_contract(
        self,
        contract_id: str,
        payment_ids: Optional[list[str]] = None,
    ) -> None:
        """Delete the contract's payments; only ``payment_ids`` when given."""
        ...
