from .contract_repo import ContractRepository
from .payment_repo import PaymentRepository
from .unit_of_work import UnitOfWork
from .calendar_port import BusinessDayCalendar
from .metrics_port import MetricsPort
from .logging_port import LoggingPort, BoundLogger

__all__ = [
    "ContractRepository",
    "PaymentRepository",
    "UnitOfWork",
    "BusinessDayCalendar",
    "MetricsPort",
    "LoggingPort",
    "BoundLogger",
]
