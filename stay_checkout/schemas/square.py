from pydantic import BaseModel


class PaymentLink(BaseModel):
    id: str | None = None
    url: str | None = None
    order_id: str | None = None
    version: int | None = None


class CreatePaymentLinkResponse(BaseModel):
    payment_link: PaymentLink | None = None
    errors: list[dict] = []
