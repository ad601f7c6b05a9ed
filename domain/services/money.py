"""
Money Module

Exact decimal arithmetic over monetary amounts. Every value is a Decimal
quantized to cents; binary floating point is never used for money.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from domain.exceptions import InvalidAmountError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, str, float]


def to_money(value: MoneyLike) -> Decimal:
    """
    Normalize a value to a Decimal with two places.

    Floats go through their string form so 0.1 stays 0.10 instead of
    0.1000000000000000055511151231257827.

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid money value: {value!r}")
    try:
        if isinstance(value, float):
            value = str(value)
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Invalid money value: {value!r}")
    if not amount.is_finite():
        raise InvalidAmountError(f"Money value must be finite: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: MoneyLike) -> int:
    """Convert a money value to integer cents."""
    return int(to_money(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a money value."""
    return (Decimal(cents) / 100).quantize(CENT)


def _non_negative(value: MoneyLike, name: str) -> Decimal:
    amount = to_money(value)
    if amount < ZERO:
        raise InvalidAmountError(f"{name} cannot be negative: {amount}")
    return amount


def add(*values: MoneyLike) -> Decimal:
    """Sum money values exactly."""
    return sum((to_money(v) for v in values), ZERO)


def subtract(minuend: MoneyLike, subtrahend: MoneyLike) -> Decimal:
    """
    Exact subtraction of two non-negative amounts.

    The result may be negative; callers that need ``subtrahend <= minuend``
    validate it themselves.
    """
    return _non_negative(minuend, "Minuend") - _non_negative(subtrahend, "Subtrahend")


def divide_into_installments(total: MoneyLike, number_of_installments: int) -> list[Decimal]:
    """
    Split ``total`` into ``number_of_installments`` cent-exact parts.

    Every part is floor(total / n); the first ``total mod n`` parts receive one
    extra cent, so the sum is always exactly ``total``.

    Example:
        100.00 / 3 -> [33.34, 33.33, 33.33]

    Raises:
        InvalidAmountError: If n <= 0 or total is negative
    """
    if number_of_installments <= 0:
        raise InvalidAmountError("Number of installments must be greater than zero")

    total_cents = to_cents(_non_negative(total, "Total value"))
    base_cents, remainder_cents = divmod(total_cents, number_of_installments)

    return [
        from_cents(base_cents + 1 if i < remainder_cents else base_cents)
        for i in range(number_of_installments)
    ]


def format_money(value: MoneyLike, currency: str = "€") -> str:
    """Format for display, e.g. ``€ 1.234,56``."""
    amount = to_money(value)
    sign = "-" if amount < ZERO else ""
    integer_part, decimal_part = f"{abs(amount):.2f}".split(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    return f"{currency} {sign}{grouped},{decimal_part}"
