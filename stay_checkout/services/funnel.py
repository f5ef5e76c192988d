import logging
from datetime import datetime, timezone

from stay_checkout.config import Settings
from stay_checkout.exceptions.custom import (
    BookingValidationError,
    ConfigurationError,
    MissingStayDetailsError,
    UpstreamDeliveryError,
)
from stay_checkout.mappers.lead_payload import new_booking_ref
from stay_checkout.mappers.money import ZERO
from stay_checkout.mappers.phone import to_e164
from stay_checkout.mappers.request_fields import clean_text, parse_amount, parse_stay_fields
from stay_checkout.schemas.checkout import TrackEventRequest, TrackEventResponse
from stay_checkout.schemas.lead import BookingLead, LeadEventType, LeadSource
from stay_checkout.services.sheets import SheetsWebhookService

logger = logging.getLogger(__name__)

# TEST events are written by /test-sheets only
TRACKABLE_EVENTS = {LeadEventType.QUOTE_VIEWED, LeadEventType.CHECKOUT_CLICKED}


def parse_event_type(value: str | None) -> LeadEventType:
    raw = clean_text(value).upper()
    if not raw:
        raise MissingStayDetailsError("Missing eventType.")
    try:
        event_type = LeadEventType(raw)
    except ValueError:
        raise BookingValidationError(f"Unknown eventType: {raw}")
    if event_type not in TRACKABLE_EVENTS:
        raise BookingValidationError(f"Unknown eventType: {raw}")
    return event_type


class FunnelService:
    def __init__(self, sheets: SheetsWebhookService, settings: Settings):
        self._sheets = sheets
        self._settings = settings

    async def track_event(self, request: TrackEventRequest) -> TrackEventResponse:
        """Record a funnel event. Unlike checkout, a delivery failure is an error here."""
        event_type = parse_event_type(request.eventType)
        session_id = clean_text(request.sessionId)
        if not session_id:
            raise MissingStayDetailsError("Missing sessionId.")
        fields = parse_stay_fields(
            request.checkin, request.checkout, request.guests, request.nights
        )

        if not self._sheets.configured:
            raise ConfigurationError("Missing CTE_SHEETS_WEBHOOK_URL or CTE_SHEETS_WEBHOOK_SECRET")

        discount_amount = parse_amount("discountAmount", request.discountAmount)
        lead = BookingLead(
            booking_ref=new_booking_ref(self._settings.booking_ref_prefix),
            created_at=datetime.now(timezone.utc),
            source=LeadSource.website_widget,
            event_type=event_type,
            session_id=session_id,
            guest_name=clean_text(request.guestName),
            guest_email=clean_text(request.guestEmail),
            guest_phone=to_e164(request.guestPhone),
            checkin=fields.checkin,
            checkout=fields.checkout,
            guests=fields.guests,
            nights=fields.nights,
            lodging=parse_amount("lodging", request.lodging),
            cleaning=parse_amount("cleaning", request.cleaning),
            total=parse_amount("total", request.total),
            discount_applied=request.discountApplied,
            discount_amount=discount_amount if request.discountApplied else ZERO,
            pre_tax_total=parse_amount("preTaxTotal", request.preTaxTotal),
            tax_amount=parse_amount("taxAmount", request.taxAmount),
            rate_mode=clean_text(request.rateMode),
        )

        result = await self._sheets.record_event(lead)
        if not result.succeeded:
            raise UpstreamDeliveryError(
                f"Failed to record {event_type.value}: {result.error or result.raw or 'non-success response'}",
                status_code=result.status or None,
            )

        logger.info("Tracked %s for session %s as %s", event_type.value, session_id, lead.booking_ref)
        return TrackEventResponse(bookingRef=lead.booking_ref)
