# app/schemas/ledger_schema.py
from datetime import date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field

from domain.entities import Contract, ContractStatus, Payment, PaymentApplicationResult, SweepReport


class ScheduleCreate(BaseModel):
    payment_method: Optional[str] = None


class ManualPaymentCreate(BaseModel):
    amount: Decimal
    use_positive_balance: Decimal = Field(default=Decimal("0.00"))
    payment_method: Optional[str] = None


class ComplementaryPaymentCreate(BaseModel):
    amount: Decimal
    due_date: date
    payment_type: str = "complementary"
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class ContractStatusUpdate(BaseModel):
    status: ContractStatus


class ContractResponse(BaseModel):
    id: str
    client_id: str
    value: Decimal
    positive_balance: Decimal
    negative_balance: Decimal
    status: str
    version: int

    @classmethod
    def from_domain(cls, contract: Contract) -> "ContractResponse":
        return cls(
            id=contract.id,
            client_id=contract.client_id,
            value=contract.value,
            positive_balance=contract.positive_balance,
            negative_balance=contract.negative_balance,
            status=contract.status.value,
            version=contract.version,
        )


class PaymentResponse(BaseModel):
    id: str
    contract_id: str
    amount: Decimal
    due_date: date
    status: str
    payment_type: str
    payment_method: Optional[str] = None
    paid_amount: Optional[Decimal] = None
    paid_date: Optional[date] = None
    paid_in_full: Optional[bool] = None
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentResponse":
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
            paid_in_full=payment.paid_in_full,
            notes=payment.notes,
        )


class PaymentApplicationResponse(BaseModel):
    payment: PaymentResponse
    contract_updated: bool
    message: str

    @classmethod
    def from_result(cls, result: PaymentApplicationResult) -> "PaymentApplicationResponse":
        return cls(
            payment=PaymentResponse.from_domain(result.payment),
            contract_updated=result.contract_updated,
            message=result.message,
        )


class ScheduleResponse(BaseModel):
    contract_id: str
    installments: List[PaymentResponse]


class SweepResponse(BaseModel):
    checked: int
    transitioned: List[str]
    failed: List[str]
    skipped: List[str] = []

    @classmethod
    def from_report(cls, report: SweepReport) -> "SweepResponse":
        return cls(
            checked=report.checked,
            transitioned=report.transitioned,
            failed=report.failed,
            skipped=report.skipped,
        )


class LiquidationResponse(BaseModel):
    contract_id: str
    liquidated: bool
