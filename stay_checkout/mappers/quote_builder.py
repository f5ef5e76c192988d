"""Pure quote math for a stay. No I/O.

Totals are summed as exact Decimals; only the fields of the returned Quote are
rounded to cents.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from stay_checkout.exceptions.custom import InvalidStayError
from stay_checkout.mappers.money import ZERO, round_money
from stay_checkout.mappers.rates import (
    PEAK_WINDOW,
    MonthDayWindow,
    is_weekend,
    price_for_night,
    rule_for_night,
)
from stay_checkout.schemas.quote import DateRange, NightlyRate, Quote

CLEANING_FEE = Decimal("150")
TAX_RATE = Decimal("0.07")
MIN_GUESTS = 1
MAX_GUESTS = 9
MAX_NIGHTS = 365

DISCOUNT_LABEL = "Direct Booking Discount Applied"
STANDARD_LABEL = "Standard Rate"


@dataclass(frozen=True)
class DiscountConfig:
    enabled: bool = True
    rate: Decimal = Decimal("0.10")
    min_nights: int = 3
    window: MonthDayWindow = PEAK_WINDOW
    ends_on: date | None = None  # last day the promotion can be quoted


DEFAULT_DISCOUNT = DiscountConfig()


def stay_dates(stay: DateRange) -> list[date]:
    """Every night of the stay: checkin inclusive, checkout exclusive."""
    return [stay.checkin + timedelta(days=i) for i in range(stay.nights)]


def discount_eligible(
    nights: list[date], discount: DiscountConfig, as_of: date
) -> bool:
    if not discount.enabled:
        return False
    if discount.ends_on is not None and as_of > discount.ends_on:
        return False
    if len(nights) < discount.min_nights:
        return False
    return any(discount.window.contains(night) for night in nights)


def build_quote(
    stay: DateRange,
    guests: int,
    discount: DiscountConfig = DEFAULT_DISCOUNT,
    *,
    as_of: date | None = None,
) -> Quote:
    """Price a stay.

    Raises InvalidStayError when the stay is not 1 to 365 nights long or the
    guest count is outside [1, 9].
    """
    if stay.nights < 1:
        raise InvalidStayError("Stay must be at least one night.")
    if stay.nights > MAX_NIGHTS:
        raise InvalidStayError(f"Stay cannot be longer than {MAX_NIGHTS} nights.")
    if not MIN_GUESTS <= guests <= MAX_GUESTS:
        raise InvalidStayError(f"Guests must be between {MIN_GUESTS} and {MAX_GUESTS}.")

    nights = stay_dates(stay)
    nightly: list[NightlyRate] = []
    lodging = ZERO
    for night in nights:
        price = price_for_night(night)
        nightly.append(
            NightlyRate(
                night=night,
                season=rule_for_night(night).name,
                weekend=is_weekend(night),
                price=price,
            )
        )
        lodging += price

    subtotal = lodging + CLEANING_FEE
    applied = discount_eligible(nights, discount, as_of or date.today())
    discount_amount = subtotal * discount.rate if applied else ZERO
    pre_tax = subtotal - discount_amount
    tax = pre_tax * TAX_RATE

    pre_tax_total = round_money(pre_tax)
    tax_amount = round_money(tax)

    return Quote(
        checkin=stay.checkin,
        checkout=stay.checkout,
        guests=guests,
        nights=len(nights),
        nightly=nightly,
        lodging_total=round_money(lodging),
        cleaning_fee=round_money(CLEANING_FEE),
        discount_applied=applied,
        discount_amount=round_money(discount_amount),
        pre_tax_total=pre_tax_total,
        tax_amount=tax_amount,
        grand_total=pre_tax_total + tax_amount,
        rate_mode_label=DISCOUNT_LABEL if applied else STANDARD_LABEL,
    )
