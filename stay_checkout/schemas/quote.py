from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from stay_checkout.exceptions.custom import InvalidStayError

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    checkin: date
    checkout: date

    @property
    def nights(self) -> int:
        return (self.checkout - self.checkin).days

    @classmethod
    def parse(cls, checkin: str, checkout: str) -> DateRange:
        try:
            start = date.fromisoformat(checkin.strip())
            end = date.fromisoformat(checkout.strip())
        except ValueError:
            raise InvalidStayError("Dates must be YYYY-MM-DD.")
        if end <= start:
            raise InvalidStayError("Checkout must be after checkin.")
        return cls(checkin=start, checkout=end)


class QuoteRequest(BaseModel):
    checkin: date
    checkout: date
    guests: int


class NightlyRate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    night: date
    season: str
    weekend: bool
    price: Money


class Quote(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    checkin: date
    checkout: date
    guests: int
    nights: int
    nightly: list[NightlyRate] = []
    lodging_total: Money
    cleaning_fee: Money
    discount_applied: bool
    discount_amount: Money
    pre_tax_total: Money
    tax_amount: Money
    grand_total: Money
    rate_mode_label: str
