import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from stay_checkout.config import Settings
from stay_checkout.exceptions.custom import (
    BookingValidationError,
    ConfigurationError,
    UpstreamDeliveryError,
    UpstreamPaymentError,
)
from stay_checkout.exceptions.handlers import (
    booking_validation_error_handler,
    configuration_error_handler,
    request_validation_error_handler,
    upstream_delivery_error_handler,
    upstream_payment_error_handler,
)
from stay_checkout.jobs import DeliveryJobs
from stay_checkout.routers.checkout import router as checkout_router
from stay_checkout.routers.diagnostics import router as diagnostics_router
from stay_checkout.services.checkout import CheckoutService
from stay_checkout.services.funnel import FunnelService
from stay_checkout.services.sheets import SheetsWebhookService
from stay_checkout.services.square import SquareService

logger = logging.getLogger(__name__)

SHUTDOWN_DRAIN_TIMEOUT = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if not settings.square_configured:
        logger.warning("Square credentials not set; /create-checkout will return 500")
    if not settings.sheets_configured:
        logger.warning("Sheets webhook not set; leads will not be logged")

    jobs = DeliveryJobs()
    async with httpx.AsyncClient(timeout=30.0) as client:
        square = SquareService(client, settings)
        sheets = SheetsWebhookService(client, settings)

        app.state.settings = settings
        app.state.sheets_service = sheets
        app.state.delivery_jobs = jobs
        app.state.checkout_service = CheckoutService(square, sheets, jobs, settings)
        app.state.funnel_service = FunnelService(sheets, settings)

        yield

        await jobs.drain(timeout=SHUTDOWN_DRAIN_TIMEOUT)


app = FastAPI(title="Stay Checkout", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(BookingValidationError, booking_validation_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(ConfigurationError, configuration_error_handler)
app.add_exception_handler(UpstreamPaymentError, upstream_payment_error_handler)
app.add_exception_handler(UpstreamDeliveryError, upstream_delivery_error_handler)

app.include_router(diagnostics_router)
app.include_router(checkout_router)
