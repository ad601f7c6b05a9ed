from domain.entities import PaymentApplicationResult
from domain.services import balance_ledger
from application.service.settle_payment import PaymentSettlementService


class MarkPaymentPaidService(PaymentSettlementService):
    """One-click settlement of an installment at its scheduled amount."""

    flow = "mark_paid"

    async def execute(self, payment_id: str) -> PaymentApplicationResult:
        """
        Settle the installment for exactly ``payment.amount``.

        The amount first pays off any contract debt; the rest becomes credit.

        Raises:
            NotFoundError: Payment or its contract does not exist
            AlreadyPaidError: Payment is already paid
            StaleContractError: Contract balances changed concurrently
        """
        payment, outcome = await self._run(
            payment_id,
            lambda p, balances: balance_ledger.compute_full_payment(p.amount, balances),
        )
        return PaymentApplicationResult(
            payment=payment,
            contract_updated=outcome.contract_updated,
            message=outcome.message,
        )
