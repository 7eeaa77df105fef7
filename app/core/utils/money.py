from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Amount = Union[Decimal, float, int, str]

CENTS = Decimal(100)

# Largest unit_amount Stripe accepts
MAX_UNIT_AMOUNT = 99999999


def to_minor_units(amount: Amount) -> int:
    """Convert a major-unit amount to integer cents.

    Rounds half up on the exact decimal value, so ``29.99`` becomes ``2999``
    and ``0.005`` becomes ``1``. Floats are read through ``str`` to avoid
    binary representation error. Raises ``ValueError`` for anything that is
    not a finite number or does not fit in a Stripe ``unit_amount``.
    """
    if isinstance(amount, bool):
        raise ValueError("Amount must be numeric")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Amount must be numeric, got {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Amount must be finite, got {amount!r}")
    try:
        cents = int((value * CENTS).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValueError(f"Amount is too large, got {amount!r}")
    if abs(cents) > MAX_UNIT_AMOUNT:
        raise ValueError(f"Amount exceeds the maximum of {from_minor_units(MAX_UNIT_AMOUNT)}")
    return cents


def from_minor_units(unit_amount: int) -> Decimal:
    return (Decimal(unit_amount) / CENTS).quantize(Decimal("0.01"))
