import json

import httpx
import pytest
import respx
from httpx import Response

from stay_checkout.config import Settings
from stay_checkout.exceptions.custom import (
    BookingValidationError,
    ConfigurationError,
    MissingStayDetailsError,
    UpstreamDeliveryError,
)
from stay_checkout.schemas.checkout import TrackEventRequest
from stay_checkout.services.funnel import FunnelService, parse_event_type
from stay_checkout.services.sheets import SheetsWebhookService

EXEC_URL = "https://script.google.com/macros/s/deploy-1/exec"


def _settings(**overrides) -> Settings:
    fields = dict(cte_sheets_webhook_url=EXEC_URL, cte_sheets_webhook_secret="hook-secret")
    fields.update(overrides)
    return Settings(**fields)


def _request(**overrides) -> TrackEventRequest:
    fields = dict(
        eventType="QUOTE_VIEWED",
        sessionId="sess-42",
        checkin="2026-01-20",
        checkout="2026-01-23",
        guests=4,
        nights=3,
        lodging=675,
        cleaning=150,
        total=882.75,
        preTaxTotal=825,
        taxAmount=57.75,
        rateMode="Standard Rate",
    )
    fields.update(overrides)
    return TrackEventRequest(**fields)


def _service(client: httpx.AsyncClient, settings: Settings) -> FunnelService:
    return FunnelService(SheetsWebhookService(client, settings), settings)


def test_parse_event_type():
    assert parse_event_type("quote_viewed").value == "QUOTE_VIEWED"
    assert parse_event_type(" CHECKOUT_CLICKED ").value == "CHECKOUT_CLICKED"
    with pytest.raises(MissingStayDetailsError):
        parse_event_type(None)
    with pytest.raises(BookingValidationError):
        parse_event_type("PAGE_SCROLLED")
    with pytest.raises(BookingValidationError):
        parse_event_type("TEST")


@respx.mock
async def test_track_event_records_lead():
    route = respx.post(EXEC_URL).mock(return_value=Response(200, json={"ok": True}))

    async with httpx.AsyncClient() as client:
        response = await _service(client, _settings()).track_event(_request())

    assert response.ok is True
    assert response.bookingRef.startswith("CTE-")

    body = json.loads(route.calls.last.request.content)
    assert body["bookingRef"] == response.bookingRef
    assert body["eventType"] == "QUOTE_VIEWED"
    assert body["sessionId"] == "sess-42"
    assert body["squareCheckoutUrl"] == ""
    assert body["total"] == 882.75
    assert body["discountAmount"] == 0.0


@respx.mock
async def test_delivery_failure_is_surfaced():
    respx.post(EXEC_URL).mock(return_value=Response(403, text="bad secret"))

    async with httpx.AsyncClient() as client:
        with pytest.raises(UpstreamDeliveryError) as exc_info:
            await _service(client, _settings()).track_event(_request())

    assert exc_info.value.status_code == 403
    assert "bad secret" in exc_info.value.message


@pytest.mark.parametrize(
    "overrides",
    [{"eventType": None}, {"sessionId": ""}, {"checkin": None}, {"nights": None}],
)
@respx.mock
async def test_missing_fields(overrides):
    route = respx.post(EXEC_URL).mock(return_value=Response(200, json={"ok": True}))

    async with httpx.AsyncClient() as client:
        with pytest.raises(MissingStayDetailsError):
            await _service(client, _settings()).track_event(_request(**overrides))

    assert not route.called


async def test_not_configured():
    async with httpx.AsyncClient() as client:
        with pytest.raises(ConfigurationError):
            await _service(client, _settings(cte_sheets_webhook_url="")).track_event(_request())
