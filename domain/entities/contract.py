from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4


class ContractStatus(str, Enum):
    ATIVO = "ativo"
    LIQUIDADO = "liquidado"
    RENEGOCIADO = "renegociado"
    CANCELADO = "cancelado"
    JURIDICO = "jurídico"


@dataclass
class Contract:
    id: str
    client_id: str
    value: Decimal
    down_payment: Decimal = Decimal("0.00")
    number_of_payments: int = 0
    start_date: Optional[date] = None
    positive_balance: Decimal = Decimal("0.00")
    negative_balance: Decimal = Decimal("0.00")
    status: ContractStatus = ContractStatus.ATIVO
    # optimistic-concurrency token, bumped on every balance write
    version: int = 0
    contract_number: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @staticmethod
    def create(
        client_id: str,
        value: Decimal,
        down_payment: Decimal = Decimal("0.00"),
        number_of_payments: int = 0,
        start_date: Optional[date] = None,
        contract_number: Optional[str] = None,
    ) -> 'Contract':
        return Contract(
            id=str(uuid4()),
            client_id=client_id,
            value=value,
            down_payment=down_payment,
            number_of_payments=number_of_payments,
            start_date=start_date,
            contract_number=contract_number,
        )

    @property
    def is_liquidated(self) -> bool:
        return self.status == ContractStatus.LIQUIDADO
