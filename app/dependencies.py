"""Dependency injection for FastAPI endpoints"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from domain.interfaces import (
    BusinessDayCalendar,
    ContractRepository,
    LoggingPort,
    MetricsPort,
    PaymentRepository,
    UnitOfWork,
)
from infrastructure.calendar import SystemBusinessDayCalendar
from infrastructure.db.database import get_db_session
from infrastructure.db.repositories.contract_repo_sqlalchemy import ContractRepoSqlalchemy
from infrastructure.db.repositories.payment_repo_sqlalchemy import PaymentRepoSqlalchemy
from infrastructure.db.repositories.unit_of_work_sqlalchemy import SqlAlchemyUnitOfWork
from infrastructure.logging.logging_adapter import LoggingAdapter
from infrastructure.metrics.metrics_adapter import MetricsAdapter


@dataclass
class LedgerContext:
    """Ports for one request, all sharing the request's database session."""
    contract_repo: ContractRepository
    payment_repo: PaymentRepository
    unit_of_work: UnitOfWork
    calendar: BusinessDayCalendar
    metrics_port: MetricsPort
    logging_port: LoggingPort


def get_ledger_context(
    db: AsyncSession = Depends(get_db_session),
    x_request_id: Optional[str] = Header(None, alias="X-Request-ID"),
) -> LedgerContext:
    return LedgerContext(
        contract_repo=ContractRepoSqlalchemy(db),
        payment_repo=PaymentRepoSqlalchemy(db),
        unit_of_work=SqlAlchemyUnitOfWork(db),
        calendar=SystemBusinessDayCalendar(),
        metrics_port=MetricsAdapter(),
        logging_port=LoggingAdapter(request_id=x_request_id or "unknown"),
    )
