from pydantic import BaseModel


class CreateCheckoutRequest(BaseModel):
    # Field names mirror the widget's JSON body
    guestName: str | None = None
    guestEmail: str | None = None
    guestPhone: str | None = None
    total: float | str | None = None
    checkin: str | None = None
    checkout: str | None = None
    guests: int | None = None
    nights: int | None = None
    lodging: float | str | None = None
    cleaning: float | str | None = None
    discountApplied: bool = False
    discountAmount: float | str | None = None
    preTaxTotal: float | str | None = None
    taxAmount: float | str | None = None
    rateMode: str | None = None
    sessionId: str | None = None
    redirectUrl: str | None = None


class CheckoutResult(BaseModel):
    ok: bool = True
    bookingRef: str
    url: str
    squareCheckoutUrl: str
    sheets: dict | None = None


class TrackEventRequest(BaseModel):
    eventType: str | None = None
    sessionId: str | None = None
    checkin: str | None = None
    checkout: str | None = None
    guests: int | None = None
    nights: int | None = None
    lodging: float | str | None = None
    cleaning: float | str | None = None
    total: float | str | None = None
    discountApplied: bool = False
    discountAmount: float | str | None = None
    preTaxTotal: float | str | None = None
    taxAmount: float | str | None = None
    rateMode: str | None = None
    guestName: str | None = None
    guestEmail: str | None = None
    guestPhone: str | None = None


class TrackEventResponse(BaseModel):
    ok: bool = True
    bookingRef: str
