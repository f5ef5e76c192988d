"""Integer-cents money helpers.

Amounts are kept as exact Decimals while computing and rounded to cents only
when they are sent or stored. ROUND_HALF_UP rounds halves away from zero.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: object) -> Decimal | None:
    """Coerce a number-like value to Decimal. None for non-finite or junk input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    return result


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: object) -> int | None:
    """Whole cents, or None for junk and for amounts too large to hold to the cent."""
    amount = to_decimal(value)
    if amount is None:
        return None
    try:
        return int(round_money(amount) * 100)
    except InvalidOperation:
        return None


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def is_valid_total(value: object) -> bool:
    cents = to_cents(value)
    return cents is not None and cents >= 1


def money_to_json(value: Decimal | None) -> float | str:
    """Wire format for the lead webhook: a number, or "" when unknown."""
    if value is None:
        return ""
    return float(round_money(value))
