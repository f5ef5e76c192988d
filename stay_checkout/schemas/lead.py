from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class LeadSource(StrEnum):
    website_widget = "website-widget"
    diagnostic = "diagnostic"


class LeadEventType(StrEnum):
    QUOTE_VIEWED = "QUOTE_VIEWED"
    CHECKOUT_CLICKED = "CHECKOUT_CLICKED"
    TEST = "TEST"


class BookingLead(BaseModel):
    """One funnel event. Built once, never mutated."""

    model_config = ConfigDict(frozen=True)

    booking_ref: str
    created_at: datetime
    source: LeadSource
    event_type: LeadEventType
    session_id: str = ""

    guest_name: str = ""
    guest_email: str = ""
    guest_phone: str = ""

    checkin: str = ""
    checkout: str = ""
    guests: int | None = None
    nights: int | None = None
    lodging: Decimal | None = None
    cleaning: Decimal | None = None
    total: Decimal | None = None
    discount_applied: bool = False
    discount_amount: Decimal | None = None
    pre_tax_total: Decimal | None = None
    tax_amount: Decimal | None = None
    rate_mode: str = ""

    square_checkout_url: str = ""


class DeliveryResult(BaseModel):
    ok: bool
    status: int = 0
    attempts: int = 0
    json_body: Any = None
    raw: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.ok

    def to_report(self) -> dict:
        report: dict = {"ok": self.ok, "status": self.status, "attempts": self.attempts}
        if self.error:
            report["error"] = self.error
        else:
            report["json"] = self.json_body
            report["raw"] = None if self.json_body is not None else self.raw
        return report
