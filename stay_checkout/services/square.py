import json
import logging
import uuid

import httpx
from pydantic import ValidationError

from stay_checkout.config import Settings
from stay_checkout.exceptions.custom import ConfigurationError, UpstreamPaymentError
from stay_checkout.mappers.phone import to_e164
from stay_checkout.schemas.square import CreatePaymentLinkResponse

logger = logging.getLogger(__name__)

PAYMENT_LINKS_PATH = "/v2/online-checkout/payment-links"


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


def _parse_body(resp: httpx.Response) -> tuple[dict | None, str]:
    text = resp.text
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None, text
    return (data if isinstance(data, dict) else None), text


class SquareService:
    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self._settings = settings
        self._url = f"{settings.square_base_url}{PAYMENT_LINKS_PATH}"
        self._headers = {
            "Authorization": f"Bearer {settings.square_access_token}",
            "Content-Type": "application/json",
            "Square-Version": settings.square_version,
        }

    def build_payment_link_request(
        self,
        booking_ref: str,
        amount_cents: int,
        idempotency_key: str,
        buyer_email: str | None = None,
        buyer_phone: str | None = None,
        redirect_url: str | None = None,
    ) -> dict:
        payload: dict = {
            "idempotency_key": idempotency_key,
            "quick_pay": {
                "name": f"{self._settings.business_name} Booking ({booking_ref})",
                "price_money": {
                    "amount": amount_cents,
                    "currency": self._settings.currency,
                },
                "location_id": self._settings.square_location_id,
            },
            "checkout_options": {"ask_for_shipping_address": False},
        }
        if redirect_url:
            payload["checkout_options"]["redirect_url"] = redirect_url

        prefill: dict[str, str] = {}
        if buyer_email:
            prefill["buyer_email"] = buyer_email
        phone = to_e164(buyer_phone)
        if phone:
            prefill["buyer_phone_number"] = phone
        if prefill:
            payload["pre_populated_data"] = prefill
        return payload

    async def create_payment_link(
        self,
        booking_ref: str,
        amount_cents: int,
        buyer_email: str | None = None,
        buyer_phone: str | None = None,
        redirect_url: str | None = None,
    ) -> str:
        """Create a quick-pay payment link and return its URL.

        Every call sends a fresh idempotency key, so a retried HTTP call is a new
        attempt for Square. Failures are raised, never retried here.
        """
        if not self._settings.square_configured:
            raise ConfigurationError("Missing Square env vars on backend.")

        payload = self.build_payment_link_request(
            booking_ref,
            amount_cents,
            new_idempotency_key(),
            buyer_email=buyer_email,
            buyer_phone=buyer_phone,
            redirect_url=redirect_url,
        )

        logger.info("Creating Square payment link for %s (%d cents)", booking_ref, amount_cents)
        try:
            resp = await self._client.post(
                self._url,
                json=payload,
                headers=self._headers,
                timeout=self._settings.square_timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamPaymentError(
                "Square payment link request timed out.", details=type(exc).__name__
            )
        except httpx.HTTPError as exc:
            raise UpstreamPaymentError(
                "Square payment link request failed.", details=str(exc) or type(exc).__name__
            )

        data, text = _parse_body(resp)
        if resp.status_code >= 400:
            raise UpstreamPaymentError(
                "Square payment link creation failed.",
                status_code=resp.status_code,
                details=data if data is not None else text,
            )

        try:
            link = CreatePaymentLinkResponse(**data).payment_link if data else None
        except ValidationError:
            link = None
        if link is None or not link.url:
            raise UpstreamPaymentError(
                "Square did not return payment_link.url",
                status_code=resp.status_code,
                details=data if data is not None else text,
            )

        logger.info("Square payment link created for %s: %s", booking_ref, link.id)
        return link.url
