from .scheduler import InstallmentScheduler
from .balance_ledger import Balances, LedgerOutcome, SettlementKind
from .liquidation import should_liquidate
from .overdue import compute_overdue_transitions
from .business_days import current_or_last_business_day

__all__ = [
    "InstallmentScheduler",
    "Balances",
    "LedgerOutcome",
    "SettlementKind",
    "should_liquidate",
    "compute_overdue_transitions",
    "current_or_last_business_day",
]
