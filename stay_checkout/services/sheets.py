import asyncio
import json
import logging

import httpx

from stay_checkout.config import Settings
from stay_checkout.exceptions.custom import RedirectProtocolError, UpstreamDeliveryError
from stay_checkout.mappers.lead_payload import (
    build_lead_payload,
    encode_payload,
    encode_query_payload,
)
from stay_checkout.schemas.lead import BookingLead, DeliveryResult

logger = logging.getLogger(__name__)

# Apps Script answers /exec with one cross-host redirect
MAX_REDIRECT_HOPS = 1
MAX_ATTEMPTS = 2
RETRY_BACKOFF = 0.5
REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})

_JSON_HEADERS = {"Content-Type": "application/json"}


def _parse_body(resp: httpx.Response) -> tuple[object | None, str]:
    text = resp.text
    try:
        return json.loads(text), text
    except (json.JSONDecodeError, ValueError):
        return None, text


class SheetsWebhookService:
    """Writes funnel events to the spreadsheet webhook.

    Redirects are followed by hand so the write keeps its method and body:
    httpx (like most clients) turns a POST into a GET on 301/302/303.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self._url = settings.cte_sheets_webhook_url
        self._secret = settings.cte_sheets_webhook_secret
        self._action = settings.sheets_lead_action
        self._transport = settings.sheets_transport
        self._timeout = settings.sheets_timeout_seconds
        self._configured = settings.sheets_configured

    @property
    def configured(self) -> bool:
        return self._configured

    async def record_event(self, lead: BookingLead) -> DeliveryResult:
        """Deliver one lead. Reports failures in the result instead of raising."""
        if not self._configured:
            return DeliveryResult(ok=False, status=0, error="Sheets webhook env vars not set.")

        payload = build_lead_payload(lead, action=self._action, secret=self._secret)
        body = encode_payload(payload)

        result = DeliveryResult(ok=False)
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                resp = await self._send(body)
            except httpx.TimeoutException as exc:
                logger.warning(
                    "Sheets webhook timed out for %s after %.0fs",
                    lead.booking_ref, self._timeout,
                )
                return DeliveryResult(
                    ok=False, status=0, attempts=attempt,
                    error=f"Timed out ({type(exc).__name__})",
                )
            except UpstreamDeliveryError as exc:
                logger.warning(
                    "Sheets webhook redirect failed for %s: %s", lead.booking_ref, exc.message
                )
                result = DeliveryResult(
                    ok=False, status=exc.status_code or 0, attempts=attempt, error=exc.message
                )
            except httpx.HTTPError as exc:
                logger.warning(
                    "Sheets webhook request failed for %s: %s: %s",
                    lead.booking_ref, type(exc).__name__, exc,
                )
                result = DeliveryResult(
                    ok=False, status=0, attempts=attempt, error=str(exc) or type(exc).__name__
                )
            else:
                data, text = _parse_body(resp)
                ok = resp.is_success
                result = DeliveryResult(
                    ok=ok,
                    status=resp.status_code,
                    attempts=attempt,
                    json_body=data,
                    raw=None if data is not None else text,
                )
                if ok:
                    logger.info(
                        "Recorded %s lead %s (attempt %d)",
                        lead.event_type.value, lead.booking_ref, attempt,
                    )
                    return result
                logger.warning(
                    "Sheets webhook returned %d for %s: %s",
                    resp.status_code, lead.booking_ref, text[:500],
                )

            if attempt < MAX_ATTEMPTS:
                await asyncio.sleep(RETRY_BACKOFF)

        return result

    async def _send(self, body: bytes) -> httpx.Response:
        """Issue the write, re-sending it as-is to at most one redirect target."""
        url = httpx.URL(self._url)
        if self._transport == "get":
            url = url.copy_merge_params({"payload": encode_query_payload(body)})

        hops = 0
        while True:
            resp = await self._request(url, body)
            if resp.status_code not in REDIRECT_CODES:
                return resp

            location = resp.headers.get("location")
            if not location:
                raise RedirectProtocolError(
                    "Redirect without Location header", status_code=resp.status_code
                )
            if hops >= MAX_REDIRECT_HOPS:
                raise RedirectProtocolError(
                    f"Too many redirects (>{MAX_REDIRECT_HOPS})", status_code=resp.status_code
                )
            hops += 1
            url = resp.url.join(location)
            logger.debug("Sheets webhook redirected (%d) to %s", resp.status_code, url.host)

    async def _request(self, url: httpx.URL, body: bytes) -> httpx.Response:
        if self._transport == "get":
            return await self._client.get(
                url, follow_redirects=False, timeout=self._timeout
            )
        return await self._client.post(
            url,
            content=body,
            headers=_JSON_HEADERS,
            follow_redirects=False,
            timeout=self._timeout,
        )
