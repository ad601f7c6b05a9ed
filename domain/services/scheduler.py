"""
Installment Scheduler

Builds the ordered list of payment obligations for a newly created contract:
an optional down payment due on the start date, followed by N monthly
installments that split the remaining value cent-exactly.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from domain.entities import Contract, Payment, PaymentStatus, PaymentType
from domain.exceptions import InvalidAmountError, InvalidPaymentTypeError
from domain.services import money


class InstallmentScheduler:

    @staticmethod
    def build_schedule(contract: Contract, payment_method: Optional[str], today: date) -> list[Payment]:
        """
        Produce the payments to persist for ``contract``.

        Nothing is produced when the contract has no installments configured or
        no start date; that is a valid contract, not an error.

        Monthly due dates use calendar month arithmetic (Jan 31 + 1 month is
        Feb 28/29). An installment already due before ``today`` is created as
        overdue.

        Raises:
            InvalidAmountError: If value <= 0 or down payment is outside [0, value]
        """
        if not contract.number_of_payments or contract.number_of_payments <= 0 or contract.start_date is None:
            return []

        value = money.to_money(contract.value)
        down_payment = money.to_money(contract.down_payment or 0)
        if value <= money.ZERO:
            raise InvalidAmountError(f"Contract value must be positive: {value}")
        if down_payment < money.ZERO or down_payment > value:
            raise InvalidAmountError(
                f"Down payment must be between 0 and the contract value ({value}): {down_payment}"
            )

        remaining = money.subtract(value, down_payment)
        amounts = money.divide_into_installments(remaining, contract.number_of_payments)

        payments = []
        if down_payment > money.ZERO:
            payments.append(Payment.create(
                contract_id=contract.id,
                amount=down_payment,
                due_date=contract.start_date,
                payment_type=PaymentType.DOWN_PAYMENT.value,
                status=PaymentStatus.PENDING,
                payment_method=payment_method,
            ))

        for i, amount in enumerate(amounts, start=1):
            due_date = contract.start_date + relativedelta(months=i)
            payments.append(Payment.create(
                contract_id=contract.id,
                amount=amount,
                due_date=due_date,
                payment_type=PaymentType.NORMAL_PAYMENT.value,
                status=PaymentStatus.OVERDUE if due_date < today else PaymentStatus.PENDING,
                payment_method=payment_method,
                notes=f"{i}/{contract.number_of_payments}",
            ))
        return payments

    @staticmethod
    def build_complementary_payment(
        contract: Contract,
        amount: Decimal,
        due_date: date,
        payment_type: str,
        today: date,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        """
        Build one extra obligation outside the original schedule.

        Raises:
            InvalidAmountError: If amount <= 0
            InvalidPaymentTypeError: If payment_type is not a ``comp*`` type
        """
        amount = money.to_money(amount)
        if amount <= money.ZERO:
            raise InvalidAmountError(f"Payment amount must be positive: {amount}")
        if not PaymentType.is_complementary(payment_type):
            raise InvalidPaymentTypeError(f"Complementary payment type must start with 'comp': {payment_type}")

        return Payment.create(
            contract_id=contract.id,
            amount=amount,
            due_date=due_date,
            payment_type=payment_type,
            status=PaymentStatus.OVERDUE if due_date < today else PaymentStatus.PENDING,
            payment_method=payment_method,
            notes=notes or None,
        )
