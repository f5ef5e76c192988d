import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from stay_checkout.exceptions.custom import InvalidStayError
from stay_checkout.mappers.quote_builder import (
    DISCOUNT_LABEL,
    STANDARD_LABEL,
    DiscountConfig,
    build_quote,
)
from stay_checkout.schemas.quote import DateRange

AS_OF = date(2026, 1, 1)


def _stay(checkin: str, checkout: str) -> DateRange:
    return DateRange.parse(checkin, checkout)


def test_off_season_weekdays():
    quote = build_quote(_stay("2026-01-20", "2026-01-23"), 4, as_of=AS_OF)

    assert quote.nights == 3
    assert quote.lodging_total == Decimal("675.00")
    assert quote.cleaning_fee == Decimal("150.00")
    assert quote.discount_applied is False
    assert quote.discount_amount == Decimal("0.00")
    assert quote.pre_tax_total == Decimal("825.00")
    assert quote.tax_amount == Decimal("57.75")
    assert quote.grand_total == Decimal("882.75")
    assert quote.rate_mode_label == STANDARD_LABEL


def test_peak_weekend_with_discount():
    quote = build_quote(_stay("2026-07-03", "2026-07-06"), 2, as_of=AS_OF)

    assert [n.price for n in quote.nightly] == [Decimal("325"), Decimal("325"), Decimal("300")]
    assert [n.weekend for n in quote.nightly] == [True, True, False]
    assert quote.lodging_total == Decimal("950.00")
    assert quote.discount_applied is True
    assert quote.discount_amount == Decimal("110.00")
    assert quote.pre_tax_total == Decimal("990.00")
    assert quote.tax_amount == Decimal("69.30")
    assert quote.grand_total == Decimal("1059.30")
    assert quote.rate_mode_label == DISCOUNT_LABEL


def test_two_nights_in_july_no_discount():
    quote = build_quote(_stay("2026-07-13", "2026-07-15"), 2, as_of=AS_OF)

    assert quote.nights == 2
    assert quote.discount_applied is False
    assert quote.discount_amount == Decimal("0.00")


def test_four_nights_in_november_no_discount():
    quote = build_quote(_stay("2026-11-09", "2026-11-13"), 2, as_of=AS_OF)

    assert quote.nights == 4
    assert quote.discount_applied is False


def test_one_peak_night_is_enough():
    # Mar 29 - Apr 1 checkout: no peak night; Mar 30 - Apr 2 includes Apr 1
    assert build_quote(_stay("2026-03-29", "2026-04-01"), 2, as_of=AS_OF).discount_applied is False
    assert build_quote(_stay("2026-03-30", "2026-04-02"), 2, as_of=AS_OF).discount_applied is True


def test_discount_disabled():
    quote = build_quote(
        _stay("2026-07-03", "2026-07-06"), 2, DiscountConfig(enabled=False), as_of=AS_OF
    )
    assert quote.discount_applied is False
    assert quote.grand_total == Decimal("1177.00")


def test_discount_time_box():
    promo = DiscountConfig(ends_on=date(2026, 5, 31))
    stay = _stay("2026-07-03", "2026-07-06")

    assert build_quote(stay, 2, promo, as_of=date(2026, 5, 31)).discount_applied is True
    assert build_quote(stay, 2, promo, as_of=date(2026, 6, 1)).discount_applied is False


def test_tax_rounded_to_cents():
    promo = DiscountConfig(rate=Decimal("0.125"), min_nights=1)
    quote = build_quote(_stay("2026-07-07", "2026-07-08"), 1, promo, as_of=AS_OF)

    # (300 + 150) * 0.875 = 393.75; tax 27.5625 -> 27.56
    assert quote.discount_amount == Decimal("56.25")
    assert quote.pre_tax_total == Decimal("393.75")
    assert quote.tax_amount == Decimal("27.56")
    assert quote.grand_total == Decimal("421.31")


@pytest.mark.parametrize("guests", [0, 10, -1])
def test_guest_count_out_of_range(guests):
    with pytest.raises(InvalidStayError):
        build_quote(_stay("2026-01-20", "2026-01-23"), guests, as_of=AS_OF)


@pytest.mark.parametrize("guests", [1, 9])
def test_guest_count_bounds_accepted(guests):
    assert build_quote(_stay("2026-01-20", "2026-01-23"), guests, as_of=AS_OF).guests == guests


def test_zero_nights_rejected():
    same_day = DateRange(checkin=date(2026, 1, 20), checkout=date(2026, 1, 20))
    with pytest.raises(InvalidStayError):
        build_quote(same_day, 2, as_of=AS_OF)


def test_stay_length_capped_at_a_year():
    year = _stay("2026-01-01", "2027-01-01")
    assert build_quote(year, 2, as_of=AS_OF).nights == 365

    too_long = DateRange(checkin=date(1, 1, 1), checkout=date(9999, 12, 31))
    with pytest.raises(InvalidStayError):
        build_quote(too_long, 2, as_of=AS_OF)
    with pytest.raises(InvalidStayError):
        build_quote(_stay("2026-01-01", "2027-01-02"), 2, as_of=AS_OF)


def test_date_range_parse_errors():
    with pytest.raises(InvalidStayError):
        DateRange.parse("2026-01-23", "2026-01-20")
    with pytest.raises(InvalidStayError):
        DateRange.parse("2026-01-20", "2026-01-20")
    with pytest.raises(InvalidStayError):
        DateRange.parse("01/20/2026", "2026-01-23")


def test_quote_serializes_camel_case_numbers():
    quote = build_quote(_stay("2026-07-03", "2026-07-06"), 2, as_of=AS_OF)
    data = quote.model_dump(mode="json", by_alias=True)

    assert data["grandTotal"] == 1059.3
    assert data["rateModeLabel"] == DISCOUNT_LABEL
    assert data["nightly"][0] == {"night": "2026-07-03", "season": "peak", "weekend": True, "price": 325.0}


@pytest.mark.parametrize("seed", range(10))
def test_totals_invariants_hold(seed):
    rng = random.Random(seed)
    for _ in range(50):
        checkin = date(2026, 1, 1) + timedelta(days=rng.randint(0, 730))
        nights = rng.randint(1, 21)
        stay = DateRange(checkin=checkin, checkout=checkin + timedelta(days=nights))
        quote = build_quote(stay, rng.randint(1, 9), as_of=AS_OF)

        assert quote.nights == nights
        assert quote.grand_total == quote.pre_tax_total + quote.tax_amount
        assert quote.pre_tax_total == (
            quote.lodging_total + quote.cleaning_fee - quote.discount_amount
        )
        assert sum(n.price for n in quote.nightly) == quote.lodging_total
        if not quote.discount_applied:
            assert quote.discount_amount == 0
        else:
            assert nights >= 3
