from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4


class PaymentStatus(str, Enum):
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"
    FAILED = "failed"


class PaymentType(str, Enum):
    DOWN_PAYMENT = "downPayment"
    NORMAL_PAYMENT = "normalPayment"

    @staticmethod
    def is_complementary(payment_type: str) -> bool:
        """Complementary obligations are free-form types prefixed with ``comp``."""
        return bool(payment_type) and str(payment_type).startswith("comp")


@dataclass
class Payment:
    id: str
    contract_id: str
    amount: Decimal
    due_date: date
    status: PaymentStatus = PaymentStatus.PENDING
    payment_type: str = PaymentType.NORMAL_PAYMENT.value
    payment_method: Optional[str] = None
    paid_amount: Optional[Decimal] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    # False when settled with a shortfall that was pushed to contract debt
    paid_in_full: Optional[bool] = None
    # signed balance movement produced when this payment was settled
    positive_delta: Decimal = Decimal("0.00")
    negative_delta: Decimal = Decimal("0.00")
    created_at: datetime = field(default_factory=datetime.now)

    @staticmethod
    def create(
        contract_id: str,
        amount: Decimal,
        due_date: date,
        payment_type: str = PaymentType.NORMAL_PAYMENT.value,
        status: PaymentStatus = PaymentStatus.PENDING,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> 'Payment':
        return Payment(
            id=str(uuid4()),
            contract_id=contract_id,
            amount=amount,
            due_date=due_date,
            status=status,
            payment_type=payment_type,
            payment_method=payment_method,
            notes=notes,
        )

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID
