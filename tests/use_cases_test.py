# use cases test

from datetime import date
from decimal import Decimal

import pytest

from application.service.add_complementary_payment import AddComplementaryPaymentService
from application.service.apply_manual_payment import ApplyManualPaymentService
from application.service.liquidation import ContractLiquidationService
from application.service.mark_payment_paid import MarkPaymentPaidService
from application.service.reset_payment import ResetPaymentService
from application.service.update_contract_status import UpdateContractStatusService
from domain.config import LedgerConfig, UNPAY_KEEP_BALANCES, UNPAY_REVERSE
from domain.entities import ContractStatus, PaymentStatus
from domain.exceptions import (
    AlreadyPaidError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidContractStatusError,
    InvalidPaymentStateError,
    InvalidPaymentTypeError,
    NotFoundError,
    StaleContractError,
)
from tests.conftest import FixedCalendar, make_contract, make_payment


@pytest.fixture
def mark_paid(store, contract_repo, payment_repo, calendar, metrics):
    return MarkPaymentPaidService(contract_repo, payment_repo, store, calendar, metrics_port=metrics)


@pytest.fixture
def manual(store, contract_repo, payment_repo, calendar, metrics):
    return ApplyManualPaymentService(contract_repo, payment_repo, store, calendar, metrics_port=metrics)


@pytest.mark.asyncio
async def test_mark_paid_clears_debt_and_keeps_leftover(store, mark_paid, metrics):
    store.seed(make_contract(negative="50.00"), [make_payment("p-1"), make_payment("p-2")])

    result = await mark_paid.execute("p-1")

    assert result.payment.status == PaymentStatus.PAID
    assert result.payment.paid_amount == Decimal("100.00")
    assert result.payment.paid_in_full is True
    assert result.contract_updated is True
    contract = store.contracts["c-1"]
    assert contract.positive_balance == Decimal("50.00")
    assert contract.negative_balance == Decimal("0.00")
    assert contract.version == 1
    assert store.commits == 1
    assert ("payment_application", "mark_paid", "full") in metrics.events


@pytest.mark.asyncio
async def test_paid_date_is_last_business_day(store, contract_repo, payment_repo, metrics):
    store.seed(make_contract(), [make_payment("p-1"), make_payment("p-2")])
    sunday = FixedCalendar(date(2024, 5, 19))
    service = MarkPaymentPaidService(contract_repo, payment_repo, store, sunday)

    result = await service.execute("p-1")

    assert result.payment.paid_date == date(2024, 5, 17)


@pytest.mark.asyncio
async def test_mark_paid_rejects_already_paid(store, mark_paid, metrics):
    store.seed(make_contract(), [make_payment("p-1", status=PaymentStatus.PAID)])

    with pytest.raises(AlreadyPaidError):
        await mark_paid.execute("p-1")
    assert store.commits == 0
    assert ("payment_application", "mark_paid", "error") in metrics.events


@pytest.mark.asyncio
async def test_mark_paid_unknown_payment(store, mark_paid):
    with pytest.raises(NotFoundError):
        await mark_paid.execute("missing")


@pytest.mark.asyncio
async def test_overdue_payment_can_be_settled(store, mark_paid):
    store.seed(make_contract(), [make_payment("p-1", status=PaymentStatus.OVERDUE), make_payment("p-2")])

    result = await mark_paid.execute("p-1")

    assert result.payment.status == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_manual_partial_payment(store, manual, metrics):
    store.seed(make_contract(), [make_payment("p-1"), make_payment("p-2")])

    result = await manual.execute("p-1", amount=Decimal("60.00"), payment_method="cash")

    assert result.payment.status == PaymentStatus.PAID
    assert result.payment.paid_amount == Decimal("60.00")
    assert result.payment.paid_in_full is False
    assert result.payment.payment_method == "cash"
    assert result.payment.negative_delta == Decimal("40.00")
    assert store.contracts["c-1"].negative_balance == Decimal("40.00")
    assert ("payment_application", "manual", "partial") in metrics.events


@pytest.mark.asyncio
async def test_manual_exact_payment_keeps_balances_but_bumps_version(store, manual):
    store.seed(make_contract(), [make_payment("p-1", amount="150.00"), make_payment("p-2")])

    result = await manual.execute("p-1", amount=Decimal("150.00"))

    assert result.contract_updated is False
    assert result.message == "Payment completed successfully."
    contract = store.contracts["c-1"]
    assert (contract.positive_balance, contract.negative_balance) == (Decimal("0.00"), Decimal("0.00"))
    assert contract.version == 1


@pytest.mark.asyncio
async def test_exact_payment_still_loses_to_a_concurrent_write(store, contract_repo, payment_repo, calendar, mocker):
    store.seed(make_contract(), [make_payment("p-1", amount="150.00"), make_payment("p-2")])
    service = ApplyManualPaymentService(contract_repo, payment_repo, store, calendar)
    original_get = contract_repo.get_contract

    async def get_then_concurrent_write(contract_id):
        contract = await original_get(contract_id)
        await contract_repo.update_contract_balances(contract_id, Decimal("0.00"), Decimal("25.00"), contract.version)
        await store.commit()
        return contract

    mocker.patch.object(contract_repo, "get_contract", side_effect=get_then_concurrent_write)

    with pytest.raises(StaleContractError):
        await service.execute("p-1", amount=Decimal("150.00"))

    assert store.payments["p-1"].status == PaymentStatus.PENDING
    assert store.contracts["c-1"].negative_balance == Decimal("25.00")


@pytest.mark.asyncio
async def test_manual_credit_consumption_then_partial(store, manual):
    store.seed(make_contract(positive="30.00"), [make_payment("p-1"), make_payment("p-2")])

    result = await manual.execute("p-1", amount=Decimal("50.00"), use_positive_balance=Decimal("30.00"))

    contract = store.contracts["c-1"]
    assert (contract.positive_balance, contract.negative_balance) == (Decimal("0.00"), Decimal("20.00"))
    assert result.payment.paid_amount == Decimal("80.00")


@pytest.mark.asyncio
async def test_manual_insufficient_balance_changes_nothing(store, manual):
    store.seed(make_contract(positive="10.00"), [make_payment("p-1")])

    with pytest.raises(InsufficientBalanceError):
        await manual.execute("p-1", amount=Decimal("50.00"), use_positive_balance=Decimal("20.00"))

    assert store.payments["p-1"].status == PaymentStatus.PENDING
    assert store.contracts["c-1"].positive_balance == Decimal("10.00")


@pytest.mark.asyncio
async def test_manual_rejects_zero_amount(store, manual):
    store.seed(make_contract(), [make_payment("p-1")])

    with pytest.raises(InvalidAmountError):
        await manual.execute("p-1", amount=Decimal("0"))


@pytest.mark.asyncio
async def test_last_payment_liquidates_contract(store, mark_paid, metrics):
    store.seed(make_contract(), [
        make_payment("p-1", status=PaymentStatus.PAID),
        make_payment("p-2"),
    ])

    await mark_paid.execute("p-2")

    assert store.contracts["c-1"].status == ContractStatus.LIQUIDADO
    assert ("contract_liquidation",) in metrics.events
    assert store.commits == 1


@pytest.mark.asyncio
async def test_partial_last_payment_still_liquidates(store, manual):
    store.seed(make_contract(), [make_payment("p-1")])

    await manual.execute("p-1", amount=Decimal("10.00"))

    contract = store.contracts["c-1"]
    assert contract.status == ContractStatus.LIQUIDADO
    assert contract.negative_balance == Decimal("90.00")


@pytest.mark.asyncio
async def test_stale_contract_rolls_back_everything(store, contract_repo, payment_repo, calendar, mocker):
    store.seed(make_contract(negative="50.00"), [make_payment("p-1"), make_payment("p-2")])
    service = MarkPaymentPaidService(contract_repo, payment_repo, store, calendar)

    original_get = contract_repo.get_contract

    async def get_then_concurrent_write(contract_id):
        contract = await original_get(contract_id)
        # another reconciliation lands between our read and our write
        await contract_repo.update_contract_balances(contract_id, Decimal("0.00"), Decimal("0.00"), contract.version)
        await store.commit()
        return contract

    mocker.patch.object(contract_repo, "get_contract", side_effect=get_then_concurrent_write)

    with pytest.raises(StaleContractError):
        await service.execute("p-1")

    assert store.rollbacks == 1
    assert store.payments["p-1"].status == PaymentStatus.PENDING
    assert store.contracts["c-1"].version == 1


@pytest.mark.asyncio
async def test_payment_write_failure_rolls_back_balances(store, contract_repo, payment_repo, calendar, mocker):
    store.seed(make_contract(negative="50.00"), [make_payment("p-1"), make_payment("p-2")])
    mocker.patch.object(payment_repo, "update_payment", side_effect=RuntimeError("db down"))
    service = MarkPaymentPaidService(contract_repo, payment_repo, store, calendar)

    with pytest.raises(RuntimeError):
        await service.execute("p-1")

    assert store.contracts["c-1"].negative_balance == Decimal("50.00")
    assert store.contracts["c-1"].version == 0


class TestResetPayment:

    @pytest.mark.asyncio
    async def test_keep_balances_policy(self, store, contract_repo, payment_repo, manual):
        store.seed(make_contract(), [make_payment("p-1"), make_payment("p-2")])
        await manual.execute("p-1", amount=Decimal("60.00"))
        service = ResetPaymentService(
            contract_repo, payment_repo, store, ledger_config=LedgerConfig(unpay_policy=UNPAY_KEEP_BALANCES)
        )

        result = await service.execute("p-1")

        payment = store.payments["p-1"]
        assert payment.status == PaymentStatus.PENDING
        assert payment.paid_date is None
        assert payment.paid_amount is None
        assert payment.paid_in_full is None
        assert result.contract_updated is False
        assert store.contracts["c-1"].negative_balance == Decimal("40.00")

    @pytest.mark.asyncio
    async def test_reverse_policy_undoes_balance_movement(self, store, contract_repo, payment_repo, manual):
        store.seed(make_contract(), [make_payment("p-1"), make_payment("p-2")])
        await manual.execute("p-1", amount=Decimal("60.00"))
        service = ResetPaymentService(
            contract_repo, payment_repo, store, ledger_config=LedgerConfig(unpay_policy=UNPAY_REVERSE)
        )

        result = await service.execute("p-1")

        contract = store.contracts["c-1"]
        assert result.contract_updated is True
        assert (contract.positive_balance, contract.negative_balance) == (Decimal("0.00"), Decimal("0.00"))
        assert store.payments["p-1"].negative_delta == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_reopens_liquidated_contract(self, store, contract_repo, payment_repo, mark_paid):
        store.seed(make_contract(), [make_payment("p-1")])
        await mark_paid.execute("p-1")
        assert store.contracts["c-1"].status == ContractStatus.LIQUIDADO

        await ResetPaymentService(contract_repo, payment_repo, store).execute("p-1")

        assert store.contracts["c-1"].status == ContractStatus.ATIVO

    @pytest.mark.asyncio
    async def test_only_paid_payments_can_be_reset(self, store, contract_repo, payment_repo):
        store.seed(make_contract(), [make_payment("p-1")])

        with pytest.raises(InvalidPaymentStateError):
            await ResetPaymentService(contract_repo, payment_repo, store).execute("p-1")

    def test_unknown_policy_is_rejected(self):
        with pytest.raises(ValueError):
            LedgerConfig(unpay_policy="undo_everything")


class TestLiquidation:

    @pytest.mark.asyncio
    async def test_is_idempotent(self, store, contract_repo, payment_repo, metrics):
        store.seed(make_contract(), [make_payment("p-1", status=PaymentStatus.PAID)])
        service = ContractLiquidationService(contract_repo, payment_repo, unit_of_work=store, metrics_port=metrics)

        assert await service.execute("c-1") is True
        assert await service.execute("c-1") is False
        assert store.contracts["c-1"].status == ContractStatus.LIQUIDADO
        assert metrics.events.count(("contract_liquidation",)) == 1

    @pytest.mark.asyncio
    async def test_open_payment_keeps_contract_active(self, store, contract_repo, payment_repo):
        store.seed(make_contract(), [
            make_payment("p-1", status=PaymentStatus.PAID),
            make_payment("p-2", status=PaymentStatus.OVERDUE),
        ])
        service = ContractLiquidationService(contract_repo, payment_repo, unit_of_work=store)

        assert await service.execute("c-1") is False
        assert store.contracts["c-1"].status == ContractStatus.ATIVO

    @pytest.mark.asyncio
    async def test_contract_without_payments_is_not_liquidated(self, store, contract_repo, payment_repo):
        store.seed(make_contract())
        service = ContractLiquidationService(contract_repo, payment_repo, unit_of_work=store)

        assert await service.execute("c-1") is False

    @pytest.mark.asyncio
    async def test_unknown_contract(self, store, contract_repo, payment_repo):
        service = ContractLiquidationService(contract_repo, payment_repo, unit_of_work=store)

        with pytest.raises(NotFoundError):
            await service.execute("missing")


class TestComplementaryPayment:

    @pytest.mark.asyncio
    async def test_adds_payment_and_reopens_liquidated_contract(self, store, contract_repo, payment_repo, calendar):
        store.seed(make_contract(status=ContractStatus.LIQUIDADO), [make_payment("p-1", status=PaymentStatus.PAID)])
        service = AddComplementaryPaymentService(contract_repo, payment_repo, store, calendar)

        payment = await service.execute("c-1", Decimal("20.00"), date(2024, 6, 1), "compFee", notes="fee")

        assert payment.id in store.payments
        assert payment.status == PaymentStatus.PENDING
        assert store.contracts["c-1"].status == ContractStatus.ATIVO
        assert store.commits == 1

    @pytest.mark.asyncio
    async def test_rejects_regular_payment_type(self, store, contract_repo, payment_repo, calendar):
        store.seed(make_contract())
        service = AddComplementaryPaymentService(contract_repo, payment_repo, store, calendar)

        with pytest.raises(InvalidPaymentTypeError):
            await service.execute("c-1", Decimal("20.00"), date(2024, 6, 1), "downPayment")


class TestUpdateContractStatus:

    @pytest.mark.asyncio
    async def test_renegotiation(self, store, contract_repo):
        store.seed(make_contract(negative="40.00"))
        service = UpdateContractStatusService(contract_repo, store)

        contract = await service.execute("c-1", ContractStatus.RENEGOCIADO)

        assert contract.status == ContractStatus.RENEGOCIADO
        assert contract.negative_balance == Decimal("40.00")
        assert contract.version == 1
        assert store.commits == 1

    @pytest.mark.asyncio
    async def test_same_status_is_a_no_op(self, store, contract_repo):
        store.seed(make_contract(status=ContractStatus.JURIDICO))
        service = UpdateContractStatusService(contract_repo, store)

        contract = await service.execute("c-1", ContractStatus.JURIDICO)

        assert contract.version == 0
        assert store.commits == 0

    @pytest.mark.asyncio
    async def test_liquidado_cannot_be_set_by_hand(self, store, contract_repo):
        store.seed(make_contract(), [make_payment("p-1")])
        service = UpdateContractStatusService(contract_repo, store)

        with pytest.raises(InvalidContractStatusError):
            await service.execute("c-1", ContractStatus.LIQUIDADO)
        assert store.contracts["c-1"].status == ContractStatus.ATIVO

    @pytest.mark.asyncio
    async def test_unknown_contract(self, store, contract_repo):
        service = UpdateContractStatusService(contract_repo, store)

        with pytest.raises(NotFoundError):
            await service.execute("missing", ContractStatus.CANCELADO)
