from typing import Annotated

from fastapi import Depends, Request

from stay_checkout.config import Settings
from stay_checkout.services.checkout import CheckoutService
from stay_checkout.services.funnel import FunnelService
from stay_checkout.services.sheets import SheetsWebhookService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service


def get_funnel_service(request: Request) -> FunnelService:
    return request.app.state.funnel_service


def get_sheets_service(request: Request) -> SheetsWebhookService:
    return request.app.state.sheets_service


SettingsDep = Annotated[Settings, Depends(get_settings)]
CheckoutDep = Annotated[CheckoutService, Depends(get_checkout_service)]
FunnelDep = Annotated[FunnelService, Depends(get_funnel_service)]
SheetsDep = Annotated[SheetsWebhookService, Depends(get_sheets_service)]
