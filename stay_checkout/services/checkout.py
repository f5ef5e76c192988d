import logging
from datetime import datetime, timezone

from stay_checkout.config import Settings
from stay_checkout.jobs import DeliveryJobs
from stay_checkout.mappers.lead_payload import new_booking_ref
from stay_checkout.mappers.money import ZERO
from stay_checkout.mappers.phone import to_e164
from stay_checkout.mappers.request_fields import (
    clean_text,
    parse_amount,
    parse_stay_fields,
    parse_total,
)
from stay_checkout.schemas.checkout import CheckoutResult, CreateCheckoutRequest
from stay_checkout.schemas.lead import BookingLead, LeadEventType, LeadSource
from stay_checkout.services.sheets import SheetsWebhookService
from stay_checkout.services.square import SquareService

logger = logging.getLogger(__name__)


class CheckoutService:
    """Creates the Square payment link, then logs the lead.

    Lead logging is best-effort: once a payment link exists, a webhook failure
    is reported in the response but never turns the checkout into an error.
    """

    def __init__(
        self,
        square: SquareService,
        sheets: SheetsWebhookService,
        jobs: DeliveryJobs,
        settings: Settings,
    ):
        self._square = square
        self._sheets = sheets
        self._jobs = jobs
        self._settings = settings

    async def create_checkout(self, request: CreateCheckoutRequest) -> CheckoutResult:
        total, cents = parse_total(request.total)
        fields = parse_stay_fields(
            request.checkin, request.checkout, request.guests, request.nights
        )
        lodging = parse_amount("lodging", request.lodging)
        cleaning = parse_amount("cleaning", request.cleaning)
        discount_amount = parse_amount("discountAmount", request.discountAmount)
        pre_tax_total = parse_amount("preTaxTotal", request.preTaxTotal)
        tax_amount = parse_amount("taxAmount", request.taxAmount)

        guest_email = clean_text(request.guestEmail)
        guest_phone = clean_text(request.guestPhone)

        booking_ref = new_booking_ref(self._settings.booking_ref_prefix)
        checkout_url = await self._square.create_payment_link(
            booking_ref,
            cents,
            buyer_email=guest_email or None,
            buyer_phone=guest_phone or None,
            redirect_url=clean_text(request.redirectUrl) or None,
        )

        lead = BookingLead(
            booking_ref=booking_ref,
            created_at=datetime.now(timezone.utc),
            source=LeadSource.website_widget,
            event_type=LeadEventType.CHECKOUT_CLICKED,
            session_id=clean_text(request.sessionId),
            guest_name=clean_text(request.guestName),
            guest_email=guest_email,
            guest_phone=to_e164(guest_phone),
            checkin=fields.checkin,
            checkout=fields.checkout,
            guests=fields.guests,
            nights=fields.nights,
            lodging=lodging,
            cleaning=cleaning,
            total=total,
            discount_applied=request.discountApplied,
            discount_amount=discount_amount if request.discountApplied else ZERO,
            pre_tax_total=pre_tax_total,
            tax_amount=tax_amount,
            rate_mode=clean_text(request.rateMode),
            square_checkout_url=checkout_url,
        )

        return CheckoutResult(
            bookingRef=booking_ref,
            url=checkout_url,
            squareCheckoutUrl=checkout_url,
            sheets=await self._log_lead(lead),
        )

    async def _log_lead(self, lead: BookingLead) -> dict:
        if not self._sheets.configured:
            logger.warning("Sheets webhook not configured; lead %s not logged", lead.booking_ref)
            return {"ok": False, "status": 0, "error": "Sheets webhook env vars not set."}

        if self._settings.sheets_delivery_mode == "background":
            self._jobs.schedule(lead.booking_ref, self._sheets.record_event(lead))
            return {"ok": None, "status": "scheduled"}

        try:
            result = await self._sheets.record_event(lead)
        except Exception as exc:
            # The payment link already exists; the user must still get it
            logger.exception("Lead logging crashed for %s", lead.booking_ref)
            return {"ok": False, "status": 0, "error": str(exc) or type(exc).__name__}

        if not result.succeeded:
            logger.warning(
                "Lead %s not logged (status=%d): %s",
                lead.booking_ref, result.status, result.error or result.raw,
            )
        return result.to_report()
