# import
from .contract import Contract, ContractStatus
from .payment import Payment, PaymentStatus, PaymentType
from .result import PaymentApplicationResult, SweepReport

__all__ = [
    "Contract",
    "ContractStatus",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "PaymentApplicationResult",
    "SweepReport",
]
