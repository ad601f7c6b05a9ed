from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, relationship
from domain.entities.payment import Payment, PaymentStatus
from infrastructure.db.models.base import Base


class PaymentModel(Base):
    __tablename__ = "erp_payment"

    id: Mapped[str] = Column(UUID(as_uuid=False), primary_key=True)
    contract_id: Mapped[str] = Column(UUID(as_uuid=False), ForeignKey("erp_contract.id"), nullable=False, index=True)
    amount: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date] = Column(Date, nullable=False)
    status: Mapped[str] = Column(String, nullable=False, index=True)
    payment_type: Mapped[str] = Column(String, nullable=False)
    payment_method: Mapped[Optional[str]] = Column(String, nullable=True)
    paid_amount: Mapped[Optional[Decimal]] = Column(Numeric(12, 2), nullable=True)
    paid_date: Mapped[Optional[date]] = Column(Date, nullable=True)
    notes: Mapped[Optional[str]] = Column(String, nullable=True)
    paid_in_full: Mapped[Optional[bool]] = Column(Boolean, nullable=True)
    positive_delta: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    negative_delta: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    created_at: Mapped[datetime] = Column(DateTime, nullable=False)

    # Relationship back to contract (many-to-one)
    contract_rel: Mapped["ContractModel"] = relationship(
        "ContractModel",
        back_populates="payments_rel"
    )

    def to_domain(self) -> Payment:
        """Convert database model to domain entity."""
        return Payment(
            id=self.id,
            contract_id=self.contract_id,
            amount=self.amount,
            due_date=self.due_date,
            status=PaymentStatus(self.status),
            payment_type=self.payment_type,
            payment_method=self.payment_method,
            paid_amount=self.paid_amount,
            paid_date=self.paid_date,
            notes=self.notes,
            paid_in_full=self.paid_in_full,
            positive_delta=self.positive_delta if self.positive_delta is not None else Decimal("0.00"),
            negative_delta=self.negative_delta if self.negative_delta is not None else Decimal("0.00"),
            created_at=self.created_at,
        )

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentModel":
        """Convert domain Payment entity to database model."""
        return cls(
            id=payment.id,
            contract_id=payment.contract_id,
            amount=payment.amount,
            due_date=payment.due_date,
            status=payment.status.value,
            payment_type=payment.payment_type,
            payment_method=payment.payment_method,
            paid_amount=payment.paid_amount,
            paid_date=payment.paid_date,
            notes=payment.notes,
            paid_in_full=payment.paid_in_full,
            positive_delta=payment.positive_delta,
            negative_delta=payment.negative_delta,
            created_at=payment.created_at,
        )
