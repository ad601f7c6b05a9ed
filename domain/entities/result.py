from dataclasses import dataclass, field

from .payment import Payment


@dataclass
class PaymentApplicationResult:
    """What the caller gets back from a payment application."""
    payment: Payment
    contract_updated: bool
    message: str


@dataclass
class SweepReport:
    """Outcome of one overdue sweep run."""
    checked: int
    transitioned: list[str]
    failed: list[str]
    # no longer pending when its turn came
    skipped: list[str] = field(default_factory=list)
