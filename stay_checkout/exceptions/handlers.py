import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .custom import (
    BookingValidationError,
    ConfigurationError,
    UpstreamDeliveryError,
    UpstreamPaymentError,
)

logger = logging.getLogger(__name__)


async def booking_validation_error_handler(
    _request: Request, exc: BookingValidationError
) -> JSONResponse:
    logger.info("Rejected request: %s", exc.message)
    return JSONResponse(
        status_code=400,
        content={"ok": False, "error": exc.message},
    )


async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in errors]
    logger.info("Malformed request body: %s", fields)
    return JSONResponse(
        status_code=400,
        content={
            "ok": False,
            "error": "Invalid request body.",
            "details": [f for f in fields if f],
        },
    )


async def configuration_error_handler(
    _request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Configuration error: %s", exc.message)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": exc.message},
    )


async def upstream_payment_error_handler(
    _request: Request, exc: UpstreamPaymentError
) -> JSONResponse:
    logger.error(
        "Square error: %s (status=%s) details=%s",
        exc.message, exc.status_code, exc.details,
    )
    return JSONResponse(
        status_code=502,
        content={"ok": False, "error": exc.message, "details": exc.details},
    )


async def upstream_delivery_error_handler(
    _request: Request, exc: UpstreamDeliveryError
) -> JSONResponse:
    logger.error("Sheets webhook error: %s (status=%s)", exc.message, exc.status_code)
    return JSONResponse(
        status_code=502,
        content={"ok": False, "error": exc.message},
    )
