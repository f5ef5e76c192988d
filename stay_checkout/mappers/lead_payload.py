import base64
import json
import secrets
import time

from stay_checkout.mappers.money import money_to_json
from stay_checkout.schemas.lead import BookingLead


def new_booking_ref(prefix: str = "CTE") -> str:
    """Human-traceable unique ref, e.g. CTE-1768900000000-a1b2c3."""
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def _count(value: int | None) -> int | str:
    return "" if value is None else value


def build_lead_payload(lead: BookingLead, *, action: str, secret: str) -> dict:
    """Webhook body for the Apps Script lead log. The secret travels in the body."""
    return {
        "action": action,
        "secret": secret,
        "bookingRef": lead.booking_ref,
        "createdAt": lead.created_at.isoformat(),
        "source": lead.source.value,
        "eventType": lead.event_type.value,
        "sessionId": lead.session_id,
        "guestName": lead.guest_name,
        "guestEmail": lead.guest_email,
        "guestPhone": lead.guest_phone,
        "checkin": lead.checkin,
        "checkout": lead.checkout,
        "guests": _count(lead.guests),
        "nights": _count(lead.nights),
        "lodging": money_to_json(lead.lodging),
        "cleaning": money_to_json(lead.cleaning),
        "total": money_to_json(lead.total),
        "discountApplied": lead.discount_applied,
        "discountAmount": money_to_json(lead.discount_amount),
        "preTaxTotal": money_to_json(lead.pre_tax_total),
        "taxAmount": money_to_json(lead.tax_amount),
        "rateMode": lead.rate_mode,
        "squareCheckoutUrl": lead.square_checkout_url,
    }


def encode_payload(payload: dict) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def encode_query_payload(body: bytes) -> str:
    """base64url form of the JSON body for the GET transport."""
    return base64.urlsafe_b64encode(body).decode("ascii")
