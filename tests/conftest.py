"""
In-memory ports shared by the service and router tests.

The store keeps a committed snapshot; ``rollback`` restores it, so tests can
check that a failed reconciliation leaves no trace.
"""
import copy
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from domain.entities import Contract, Payment, PaymentStatus
from domain.exceptions import NotFoundError, StaleContractError
from domain.services.business_days import current_or_last_business_day

# Wednesday
TODAY = date(2024, 5, 15)


class InMemoryStore:
    def __init__(self):
        self.contracts: dict[str, Contract] = {}
        self.payments: dict[str, Payment] = {}
        self._committed = ({}, {})
        self.commits = 0
        self.rollbacks = 0

    def seed(self, contract: Contract, payments: list[Payment] = ()) -> None:
        self.contracts[contract.id] = contract
        for p in payments:
            self.payments[p.id] = p
        self._snapshot()

    def _snapshot(self) -> None:
        self._committed = (copy.deepcopy(self.contracts), copy.deepcopy(self.payments))

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.contracts, self.payments = copy.deepcopy(self._committed[0]), copy.deepcopy(self._committed[1])


class InMemoryContractRepo:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_contract(self, contract_id):
        contract = self.store.contracts.get(contract_id)
        return replace(contract) if contract else None

    async def update_contract_balances(self, contract_id, positive_balance, negative_balance, expected_version):
        contract = self.store.contracts[contract_id]
        if contract.version != expected_version:
            raise StaleContractError(contract_id, expected_version)
        updated = replace(
            contract,
            positive_balance=positive_balance,
            negative_balance=negative_balance,
            version=contract.version + 1,
        )
        self.store.contracts[contract_id] = updated
        return replace(updated)

    async def bump_version(self, contract_id, expected_version):
        return await self.update_contract_balances(
            contract_id,
            self.store.contracts[contract_id].positive_balance,
            self.store.contracts[contract_id].negative_balance,
            expected_version,
        )

    async def update_contract_status(self, contract_id, status):
        self.store.contracts[contract_id] = replace(self.store.contracts[contract_id], status=status)


class InMemoryPaymentRepo:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_payment(self, payment_id):
        payment = self.store.payments.get(payment_id)
        return replace(payment) if payment else None

    async def list_payments_by_contract(self, contract_id):
        payments = [p for p in self.store.payments.values() if p.contract_id == contract_id]
        return [replace(p) for p in sorted(payments, key=lambda p: p.due_date)]

    async def list_payments_by_status(self, status):
        payments = [p for p in self.store.payments.values() if p.status == status]
        return [replace(p) for p in sorted(payments, key=lambda p: p.due_date)]

    async def update_payment(self, payment_id, fields):
        if payment_id not in self.store.payments:
            raise NotFoundError("payment", payment_id)
        updated = replace(self.store.payments[payment_id], **fields)
        self.store.payments[payment_id] = updated
        return replace(updated)

    async def insert_payments(self, contract_id, payments):
        for p in payments:
            self.store.payments[p.id] = replace(p)

    async def transition_status(self, payment_id, from_status, to_status):
        payment = self.store.payments.get(payment_id)
        if payment is None or payment.status != from_status:
            return False
        self.store.payments[payment_id] = replace(payment, status=to_status)
        return True

    async def delete_payments_by_contract(self, contract_id, payment_ids=None):
        doomed = [
            p.id for p in self.store.payments.values()
            if p.contract_id == contract_id and (payment_ids is None or p.id in payment_ids)
        ]
        for payment_id in doomed:
            del self.store.payments[payment_id]


class FixedCalendar:
    def __init__(self, today: date = TODAY):
        self._today = today

    def today(self) -> date:
        return self._today

    def current_or_last_business_day(self) -> date:
        return current_or_last_business_day(self._today)


class RecordingMetrics:
    def __init__(self):
        self.events = []

    def increment_payment_application(self, flow, outcome):
        self.events.append(("payment_application", flow, outcome))

    def increment_schedule_generation(self, outcome):
        self.events.append(("schedule_generation", outcome))

    def increment_overdue_transition(self, outcome):
        self.events.append(("overdue_transition", outcome))

    def increment_contract_liquidation(self):
        self.events.append(("contract_liquidation",))


def make_contract(positive="0.00", negative="0.00", **kwargs) -> Contract:
    defaults = dict(
        id="c-1",
        client_id="client-1",
        value=Decimal("300.00"),
        number_of_payments=3,
        start_date=date(2024, 1, 10),
    )
    defaults.update(kwargs)
    return Contract(positive_balance=Decimal(positive), negative_balance=Decimal(negative), **defaults)


def make_payment(payment_id="p-1", amount="100.00", status=PaymentStatus.PENDING, **kwargs) -> Payment:
    defaults = dict(contract_id="c-1", due_date=date(2024, 6, 10))
    defaults.update(kwargs)
    return Payment(id=payment_id, amount=Decimal(amount), status=status, **defaults)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def contract_repo(store):
    return InMemoryContractRepo(store)


@pytest.fixture
def payment_repo(store):
    return InMemoryPaymentRepo(store)


@pytest.fixture
def calendar():
    return FixedCalendar()


@pytest.fixture
def metrics():
    return RecordingMetrics()
