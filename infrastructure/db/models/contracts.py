from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from sqlalchemy import Column, String, Integer, Date, DateTime, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, relationship
from domain.entities.contract import Contract, ContractStatus
from infrastructure.db.models.base import Base

if TYPE_CHECKING:
    from infrastructure.db.models.payments import PaymentModel


class ContractModel(Base):
    __tablename__ = "erp_contract"

    id: Mapped[str] = Column(UUID(as_uuid=False), primary_key=True)
    client_id: Mapped[str] = Column(UUID(as_uuid=False), nullable=False)
    contract_number: Mapped[Optional[str]] = Column(String, nullable=True)
    value: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False)
    down_payment: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    number_of_payments: Mapped[int] = Column(Integer, nullable=False, default=0)
    start_date: Mapped[Optional[date]] = Column(Date, nullable=True)
    positive_balance: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    negative_balance: Mapped[Decimal] = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    status: Mapped[str] = Column(String, nullable=False, default=ContractStatus.ATIVO.value)
    version: Mapped[int] = Column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = Column(DateTime, nullable=False)

    # installments must be removed before the contract
    payments_rel: Mapped[list["PaymentModel"]] = relationship(
        "PaymentModel",
        back_populates="contract_rel",
        cascade="all, delete-orphan",
    )

    def to_domain(self) -> Contract:
        """Convert database model to domain entity."""
        return Contract(
            id=self.id,
            client_id=self.client_id,
            contract_number=self.contract_number,
            value=self.value,
            down_payment=self.down_payment if self.down_payment is not None else Decimal("0.00"),
            number_of_payments=self.number_of_payments or 0,
            start_date=self.start_date,
            positive_balance=self.positive_balance if self.positive_balance is not None else Decimal("0.00"),
            negative_balance=self.negative_balance if self.negative_balance is not None else Decimal("0.00"),
            status=ContractStatus(self.status),
            version=self.version or 0,
            created_at=self.created_at,
        )

    @classmethod
    def from_domain(cls, contract: Contract) -> "ContractModel":
        """Convert domain Contract entity to database model."""
        return cls(
            id=contract.id,
            client_id=contract.client_id,
            contract_number=contract.contract_number,
            value=contract.value,
            down_payment=contract.down_payment,
            number_of_payments=contract.number_of_payments,
            start_date=contract.start_date,
            positive_balance=contract.positive_balance,
            negative_balance=contract.negative_balance,
            status=contract.status.value,
            version=contract.version,
            created_at=contract.created_at,
        )
