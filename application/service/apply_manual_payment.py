from decimal import Decimal
from typing import Optional

from domain.entities import PaymentApplicationResult
from domain.services import balance_ledger
from domain.services.money import MoneyLike
from application.service.settle_payment import PaymentSettlementService


class ApplyManualPaymentService(PaymentSettlementService):
    flow = "manual"

    async def execute(
        self,
        payment_id: str,
        amount: MoneyLike,
        use_positive_balance: MoneyLike = Decimal("0.00"),
        payment_method: Optional[str] = None,
    ) -> PaymentApplicationResult:
        """
        Settle an installment with an explicit amount, optionally using part of
        the contract's credit first.

        Args:
            payment_id: Installment to settle
            amount: Money received (> 0)
            use_positive_balance: Credit to consume, 0 <= value <= available credit
            payment_method: Free-form method stored on the payment

        Raises:
            NotFoundError: Payment or its contract does not exist
            AlreadyPaidError: Payment is already paid
            InvalidAmountError: amount <= 0 or malformed credit usage
            InsufficientBalanceError: Credit usage above available credit
            StaleContractError: Contract balances changed concurrently
        """
        payment, outcome = await self._run(
            payment_id,
            lambda p, balances: balance_ledger.compute_manual_payment(
                p.amount, balances, amount, use_positive_balance
            ),
            payment_method=payment_method,
            amount=str(amount),
            use_positive_balance=str(use_positive_balance),
        )
        return PaymentApplicationResult(
            payment=payment,
            contract_updated=outcome.contract_updated,
            message=outcome.message,
        )
