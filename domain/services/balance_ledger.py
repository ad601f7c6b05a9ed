"""
Balance Ledger Module

Pure functions that reconcile an installment payment against a contract's
running balances:

    positive_balance: credit owed to the client (overpayments)
    negative_balance: debt owed by the client (underpayments)

Nothing here touches persistence. Callers read the current balances, compute
an outcome and commit the whole outcome at once, which is what lets the
persistence layer wrap the read-compute-write in one transaction.

Invariant kept by every function: both balances are >= 0 and at most one of
them is > 0 after a reconciliation.
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from domain.config import get_money_config
from domain.exceptions import InsufficientBalanceError, InvalidAmountError
from domain.services import money
from domain.services.money import MoneyLike, ZERO


class SettlementKind(str, Enum):
    FULL = "full"          # one-click payment at the scheduled amount
    PARTIAL = "partial"    # paid less than owed; shortfall becomes debt
    EXACT = "exact"
    EXCESS = "excess"      # paid more than owed; surplus clears debt, then credit


@dataclass(frozen=True)
class Balances:
    positive: Decimal
    negative: Decimal

    @staticmethod
    def of(positive: MoneyLike, negative: MoneyLike) -> 'Balances':
        positive = money.to_money(positive or 0)
        negative = money.to_money(negative or 0)
        if positive < ZERO or negative < ZERO:
            raise InvalidAmountError(f"Balances cannot be negative: positive={positive}, negative={negative}")
        return Balances(positive=positive, negative=negative)

    @property
    def net(self) -> Decimal:
        """Credit minus debt."""
        return self.positive - self.negative

    def normalized(self) -> 'Balances':
        """Offset credit against debt so that at most one side is positive."""
        return Balances.from_net(self.net)

    @staticmethod
    def from_net(net: Decimal) -> 'Balances':
        if net >= ZERO:
            return Balances(positive=abs(net), negative=ZERO)
        return Balances(positive=ZERO, negative=abs(net))


@dataclass(frozen=True)
class LedgerOutcome:
    kind: SettlementKind
    previous: Balances
    balances: Balances
    paid_amount: Decimal
    paid_in_full: bool
    message: str

    @property
    def contract_updated(self) -> bool:
        return self.balances != self.previous

    @property
    def positive_delta(self) -> Decimal:
        return self.balances.positive - self.previous.positive

    @property
    def negative_delta(self) -> Decimal:
        return self.balances.negative - self.previous.negative


def _fmt(value: Decimal) -> str:
    return money.format_money(value, get_money_config().currency_symbol)


def apply_credit(amount: Decimal, balances: Balances) -> Balances:
    """
    Apply an incoming amount: debt is paid off first, whatever is left
    becomes credit.
    """
    if balances.negative > ZERO:
        offset = min(amount, balances.negative)
        new_negative = balances.negative - offset
        leftover = amount - offset
        new_positive = balances.positive + leftover if leftover > ZERO else balances.positive
        return Balances(positive=new_positive, negative=new_negative)
    return Balances(positive=balances.positive + amount, negative=balances.negative)


def compute_full_payment(installment_amount: MoneyLike, balances: Balances) -> LedgerOutcome:
    """
    Settle an installment at its scheduled amount ("mark as paid").

    Example:
        installment 100.00, balances (0, 50.00) -> 50.00 clears the debt,
        50.00 goes to credit -> balances (50.00, 0)
    """
    original = money.to_money(installment_amount)
    new_balances = apply_credit(original, balances).normalized()

    if balances.negative > ZERO:
        cleared = balances.negative - new_balances.negative
        if new_balances.negative == ZERO:
            message = f"Payment processed. Debt of {_fmt(cleared)} cleared."
            if new_balances.positive > balances.positive:
                message += f" Remaining {_fmt(new_balances.positive - balances.positive)} added to positive balance."
        else:
            message = f"Payment applied to debt. Remaining debt: {_fmt(new_balances.negative)}"
    else:
        message = (
            f"Payment processed. {_fmt(original)} added to positive balance. "
            f"New balance: {_fmt(new_balances.positive)}"
        )

    return LedgerOutcome(
        kind=SettlementKind.FULL,
        previous=balances,
        balances=new_balances,
        paid_amount=original,
        paid_in_full=True,
        message=message,
    )


def validate_manual_payment(
    balances: Balances,
    amount: Decimal,
    use_positive_balance: Decimal,
) -> None:
    """
    Raises:
        InvalidAmountError: amount <= 0 or negative credit usage
        InsufficientBalanceError: credit usage above the available positive balance
    """
    if amount <= ZERO:
        raise InvalidAmountError("Payment amount must be greater than zero")
    if use_positive_balance < ZERO:
        raise InvalidAmountError("Positive balance usage cannot be negative")
    if use_positive_balance > balances.positive:
        raise InsufficientBalanceError(
            f"Cannot use {_fmt(use_positive_balance)} from positive balance. "
            f"Available: {_fmt(balances.positive)}"
        )


def compute_manual_payment(
    installment_amount: MoneyLike,
    balances: Balances,
    amount: MoneyLike,
    use_positive_balance: MoneyLike = 0,
) -> LedgerOutcome:
    """
    Settle an installment with an explicit amount, optionally consuming part
    of the contract's credit first.

    A partial payment still settles the installment; the shortfall is recorded
    as contract debt and the outcome is tagged ``paid_in_full=False``.

    Example:
        installment 100.00, balances (30.00, 0), amount 50.00, use 30.00
        -> owed 70.00, paid 50.00, shortfall 20.00 -> balances (0, 20.00),
        paid_amount 80.00

    Credit usage is only bounded by the available credit. Using more than the
    installment leaves nothing owed, so the whole amount is excess; the credit
    used above the installment is consumed.
    """
    original = money.to_money(installment_amount)
    amount = money.to_money(amount)
    use_positive_balance = money.to_money(use_positive_balance or 0)
    validate_manual_payment(balances, amount, use_positive_balance)

    final_installment_value = max(ZERO, original - use_positive_balance)
    balance_after_use = balances.positive - use_positive_balance
    used_suffix = (
        f" Used {_fmt(use_positive_balance)} from positive balance." if use_positive_balance > ZERO else ""
    )

    if amount < final_installment_value:
        remaining_debt = final_installment_value - amount
        new_balances = Balances(
            positive=balance_after_use,
            negative=balances.negative + remaining_debt,
        ).normalized()
        message = (
            f"Partial payment processed. {_fmt(amount)} paid.{used_suffix} "
            f"Remaining debt of {_fmt(remaining_debt)} added to contract balance. "
            f"Total debt: {_fmt(new_balances.negative)}"
        )
        return LedgerOutcome(
            kind=SettlementKind.PARTIAL,
            previous=balances,
            balances=new_balances,
            paid_amount=amount + use_positive_balance,
            paid_in_full=False,
            message=message,
        )

    if amount == final_installment_value:
        new_balances = Balances(positive=balance_after_use, negative=balances.negative).normalized()
        message = "Payment completed successfully."
        if use_positive_balance > ZERO:
            message = (
                f"Payment completed. Used {_fmt(use_positive_balance)} from positive balance. "
                f"New balance: {_fmt(new_balances.positive)}"
            )
        return LedgerOutcome(
            kind=SettlementKind.EXACT,
            previous=balances,
            balances=new_balances,
            paid_amount=original,
            paid_in_full=True,
            message=message,
        )

    excess = amount - final_installment_value
    base = Balances(positive=balance_after_use, negative=balances.negative)
    new_balances = apply_credit(excess, base).normalized()
    if balances.negative > ZERO and new_balances.negative > ZERO:
        message = f"Payment completed with excess applied to debt. Remaining debt: {_fmt(new_balances.negative)}."
    elif balances.negative > ZERO:
        message = f"Payment completed with excess. Debt of {_fmt(balances.negative)} cleared."
        leftover = excess - balances.negative
        if leftover > ZERO:
            message += f" Remaining {_fmt(leftover)} added to positive balance."
    else:
        message = (
            f"Payment completed with excess. {_fmt(excess)} added to positive balance. "
            f"New balance: {_fmt(new_balances.positive)}."
        )
    return LedgerOutcome(
        kind=SettlementKind.EXCESS,
        previous=balances,
        balances=new_balances,
        paid_amount=original,
        paid_in_full=True,
        message=message + used_suffix,
    )


def reverse_settlement(balances: Balances, positive_delta: MoneyLike, negative_delta: MoneyLike) -> Balances:
    """
    Undo the balance movement recorded when a payment was settled.

    The reversal is applied to the net position (credit minus debt) because
    later payments may already have moved value between the two sides.
    """
    recorded_net = money.to_money(positive_delta or 0) - money.to_money(negative_delta or 0)
    return Balances.from_net(balances.net - recorded_net)
