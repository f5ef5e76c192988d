"""Nightly rate lookup for the property.

No I/O. Rules are matched on month/day only so that a season window can wrap
the year boundary (e.g. Nov 15 - Feb 15).
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

MonthDay = tuple[int, int]

# Friday, Saturday (date.weekday(): Monday == 0)
WEEKEND_DAYS = frozenset({4, 5})


@dataclass(frozen=True)
class MonthDayWindow:
    start: MonthDay
    end: MonthDay

    def contains(self, day: date) -> bool:
        md = (day.month, day.day)
        if self.start <= self.end:
            return self.start <= md <= self.end
        # Wraps the year boundary
        return md >= self.start or md <= self.end


@dataclass(frozen=True)
class RateRule:
    name: str
    window: MonthDayWindow
    weekday_price: Decimal
    weekend_price: Decimal


PEAK_WINDOW = MonthDayWindow((4, 1), (8, 31))

RATE_TABLE: tuple[RateRule, ...] = (
    RateRule("peak", PEAK_WINDOW, Decimal("300"), Decimal("325")),
    RateRule("shoulder", MonthDayWindow((3, 1), (3, 31)), Decimal("250"), Decimal("275")),
    RateRule("shoulder", MonthDayWindow((9, 1), (10, 31)), Decimal("250"), Decimal("275")),
    # Fallback: covers the whole calendar
    RateRule("off-season", MonthDayWindow((1, 1), (12, 31)), Decimal("225"), Decimal("250")),
)


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND_DAYS


def rule_for_night(day: date, table: tuple[RateRule, ...] = RATE_TABLE) -> RateRule:
    for rule in table:
        if rule.window.contains(day):
            return rule
    raise LookupError(f"No rate rule covers {day.isoformat()}")


def price_for_night(day: date, table: tuple[RateRule, ...] = RATE_TABLE) -> Decimal:
    rule = rule_for_night(day, table)
    return rule.weekend_price if is_weekend(day) else rule.weekday_price
