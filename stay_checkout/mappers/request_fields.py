"""Sanity checks for the pricing fields the widget sends.

The server does not re-price a stay; it only rejects missing, malformed or
negative values before anything is charged or logged.
"""

from dataclasses import dataclass
from decimal import Decimal

from stay_checkout.exceptions.custom import (
    InvalidAmountError,
    InvalidStayError,
    InvalidTotalError,
    MissingStayDetailsError,
)
from stay_checkout.mappers.money import from_cents, is_valid_total, to_cents, to_decimal
from stay_checkout.mappers.quote_builder import MAX_GUESTS, MIN_GUESTS
from stay_checkout.schemas.quote import DateRange


@dataclass(frozen=True)
class StayFields:
    stay: DateRange
    guests: int
    nights: int

    @property
    def checkin(self) -> str:
        return self.stay.checkin.isoformat()

    @property
    def checkout(self) -> str:
        return self.stay.checkout.isoformat()


def clean_text(value: str | None) -> str:
    return (value or "").strip()


def parse_total(value: object) -> tuple[Decimal, int]:
    """Return (total, cents). Raises InvalidTotalError below one cent or non-finite."""
    if not is_valid_total(value):
        raise InvalidTotalError("Invalid total.")
    cents = to_cents(value)
    return from_cents(cents), cents


def parse_amount(name: str, value: object) -> Decimal | None:
    """Optional breakdown amount: None when absent, error when junk or negative."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    amount = to_decimal(value)
    if amount is None or to_cents(amount) is None:
        raise InvalidAmountError(f"Invalid {name}.")
    if amount < 0:
        raise InvalidAmountError(f"{name} cannot be negative.")
    return amount


def parse_stay_fields(
    checkin: str | None,
    checkout: str | None,
    guests: int | None,
    nights: int | None,
) -> StayFields:
    if not clean_text(checkin) or not clean_text(checkout) or guests is None or nights is None:
        raise MissingStayDetailsError("Missing stay details (checkin, checkout, guests, nights).")

    stay = DateRange.parse(clean_text(checkin), clean_text(checkout))
    if nights < 1:
        raise InvalidStayError("Stay must be at least one night.")
    if not MIN_GUESTS <= guests <= MAX_GUESTS:
        raise InvalidStayError(f"Guests must be between {MIN_GUESTS} and {MAX_GUESTS}.")
    return StayFields(stay=stay, guests=guests, nights=nights)
