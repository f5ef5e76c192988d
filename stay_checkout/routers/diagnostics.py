import logging
import re
from datetime import datetime, timezone
from decimal import Decimal

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from stay_checkout.config import Settings
from stay_checkout.dependencies import SettingsDep, SheetsDep
from stay_checkout.mappers.lead_payload import new_booking_ref
from stay_checkout.schemas.lead import BookingLead, LeadEventType, LeadSource

logger = logging.getLogger(__name__)

router = APIRouter()

_APPS_SCRIPT_EXEC_RE = re.compile(r"^https://script\.google\.com/macros/s/[^/]+/exec/?$")
_GOOGLE_USER_CONTENT_RE = re.compile(r"^https://script\.googleusercontent\.com/")
_SHEETS_EDIT_LINK_RE = re.compile(r"docs\.google\.com/spreadsheets")


def env_report(settings: Settings) -> dict:
    """Which settings are present. Never includes secret values."""
    url = settings.cte_sheets_webhook_url
    return {
        "ok": True,
        "square": {
            "accessTokenSet": bool(settings.square_access_token),
            "locationIdSet": bool(settings.square_location_id),
            "env": settings.square_env,
            "version": settings.square_version,
        },
        "sheets": {
            "webhookUrlSet": bool(url),
            "webhookSecretSet": bool(settings.cte_sheets_webhook_secret),
            "webhookUrlLooksLikeAppsScriptExec": bool(_APPS_SCRIPT_EXEC_RE.match(url)),
            "webhookUrlLooksLikeGoogleUserContent": bool(_GOOGLE_USER_CONTENT_RE.match(url)),
            "webhookUrlLooksLikeSheetsEditLink": bool(_SHEETS_EDIT_LINK_RE.search(url)),
            "transport": settings.sheets_transport,
            "action": settings.sheets_lead_action,
            "deliveryMode": settings.sheets_delivery_mode,
        },
    }


def diagnostic_lead() -> BookingLead:
    return BookingLead(
        booking_ref=new_booking_ref("TEST"),
        created_at=datetime.now(timezone.utc),
        source=LeadSource.diagnostic,
        event_type=LeadEventType.TEST,
        guest_name="Test Guest",
        guest_email="test@example.com",
        guest_phone="555-555-5555",
        checkin="2026-01-20",
        checkout="2026-01-23",
        guests=4,
        nights=3,
        lodging=Decimal("675"),
        cleaning=Decimal("150"),
        total=Decimal("882.75"),
        discount_applied=False,
        discount_amount=Decimal("0"),
        pre_tax_total=Decimal("825"),
        tax_amount=Decimal("57.75"),
        rate_mode="test-sheets",
        square_checkout_url="https://example.com/test-checkout-link",
    )


@router.get("/")
async def health(settings: SettingsDep) -> dict:
    return {"ok": True, "service": f"{settings.business_name} backend"}


@router.get("/env-check")
async def env_check(settings: SettingsDep) -> dict:
    return env_report(settings)


@router.get("/test-sheets")
async def test_sheets(sheets: SheetsDep):
    if not sheets.configured:
        return JSONResponse(
            status_code=400,
            content={
                "ok": False,
                "error": "Missing CTE_SHEETS_WEBHOOK_URL or CTE_SHEETS_WEBHOOK_SECRET",
            },
        )

    lead = diagnostic_lead()
    result = await sheets.record_event(lead)
    logger.info("Test lead %s delivered: %s (status=%d)", lead.booking_ref, result.ok, result.status)
    return {
        "ok": result.ok,
        "bookingRef": lead.booking_ref,
        "sheetsResponse": result.to_report(),
    }
