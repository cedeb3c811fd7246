from __future__ import annotations

"""Currency helpers with precise ₹0.01 rounding.

All amounts are :class:`~decimal.Decimal`. Values coming from JSON or UI
forms are converted through ``str`` so floats such as ``0.1`` do not carry
binary noise into the tax arithmetic.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from fractions import Fraction

ROUND = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Largest accepted price, rate, quantity or discount (₹1 lakh crore)
MAX_AMOUNT = Decimal("1e12")
# Working precision for rounding; covers products and sums of capped values
MONEY_PREC = 60


class InvalidAmountError(ValueError):
    """Raised when an amount, rate or quantity is not a non-negative number."""

    def __init__(self, field: str, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.code = "INVALID_AMOUNT"
        self.field = field
        self.hint = hint


def round2(value: Decimal) -> Decimal:
    """Round ``value`` to paise using half-up rounding."""

    with localcontext() as ctx:
        ctx.prec = MONEY_PREC
        return value.quantize(ROUND, rounding=ROUND_HALF_UP)


def round2_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Round ``numerator / denominator`` to paise, half-up, in one step.

    The quotient is kept exact until the final rounding, so a result that
    lands on half a paisa always rounds up even when the division does not
    terminate in decimal. Both operands must be non-negative.
    """

    exact = Fraction(numerator) * 100 / Fraction(denominator)
    paise = math.floor(exact + Fraction(1, 2))
    with localcontext() as ctx:
        ctx.prec = MONEY_PREC
        return Decimal(paise).scaleb(-2).quantize(ROUND)


def to_decimal(value: object) -> Decimal:
    """Convert ``value`` to :class:`Decimal` without float artefacts."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def non_negative(value: object, field: str = "amount") -> Decimal:
    """Return ``value`` as a finite :class:`Decimal` in ``[0, MAX_AMOUNT]``.

    Raises :class:`InvalidAmountError` for negative, oversized, non-finite or
    unparsable input.
    """

    if isinstance(value, bool):
        raise InvalidAmountError(field, f"{field} must be a number")
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(field, f"{field} must be a number") from exc
    if not amount.is_finite():
        raise InvalidAmountError(field, f"{field} must be finite")
    if amount < 0:
        raise InvalidAmountError(
            field, f"{field} cannot be negative", hint=f"got {amount}"
        )
    if amount > MAX_AMOUNT:
        raise InvalidAmountError(
            field, f"{field} is too large", hint=f"maximum is {MAX_AMOUNT:f}"
        )
    return amount


def non_negative_int(value: object, field: str = "quantity") -> int:
    """Return ``value`` as a non-negative whole number."""

    amount = non_negative(value, field)
    if amount != amount.to_integral_value():
        raise InvalidAmountError(
            field, f"{field} must be a whole number", hint=f"got {amount}"
        )
    return int(amount)
