from fastapi import APIRouter

from stay_checkout.dependencies import CheckoutDep, FunnelDep, SettingsDep
from stay_checkout.mappers.quote_builder import DiscountConfig, build_quote
from stay_checkout.schemas.checkout import (
    CheckoutResult,
    CreateCheckoutRequest,
    TrackEventRequest,
    TrackEventResponse,
)
from stay_checkout.schemas.quote import DateRange, Quote, QuoteRequest

router = APIRouter()


@router.post("/quote", response_model=Quote)
async def quote(request: QuoteRequest, settings: SettingsDep) -> Quote:
    discount = DiscountConfig(
        enabled=settings.discount_enabled, ends_on=settings.discount_ends_on
    )
    stay = DateRange(checkin=request.checkin, checkout=request.checkout)
    return build_quote(stay, request.guests, discount)


@router.post("/create-checkout", response_model=CheckoutResult)
async def create_checkout(
    request: CreateCheckoutRequest, service: CheckoutDep
) -> CheckoutResult:
    return await service.create_checkout(request)


@router.post("/track-event", response_model=TrackEventResponse)
async def track_event(
    request: TrackEventRequest, service: FunnelDep
) -> TrackEventResponse:
    return await service.track_event(request)
