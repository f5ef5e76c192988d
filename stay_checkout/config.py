from datetime import date
from typing import Literal

from pydantic_settings import BaseSettings

SQUARE_PRODUCTION_URL = "https://connect.squareup.com"
SQUARE_SANDBOX_URL = "https://connect.squareupsandbox.com"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "frozen": True}

    square_access_token: str = ""
    square_location_id: str = ""
    square_env: Literal["production", "sandbox"] = "production"
    square_version: str = "2025-10-16"
    square_timeout_seconds: float = 15.0

    cte_sheets_webhook_url: str = ""  # Apps Script /exec URL
    cte_sheets_webhook_secret: str = ""
    sheets_transport: Literal["post", "get"] = "post"
    sheets_lead_action: Literal["appendLead", "upsertLead"] = "appendLead"
    sheets_delivery_mode: Literal["await", "background"] = "await"
    sheets_timeout_seconds: float = 20.0

    business_name: str = "Coastal Tide Escapes"
    booking_ref_prefix: str = "CTE"
    currency: str = "USD"
    discount_enabled: bool = True
    discount_ends_on: date | None = None

    log_level: str = "INFO"

    @property
    def square_base_url(self) -> str:
        if self.square_env == "sandbox":
            return SQUARE_SANDBOX_URL
        return SQUARE_PRODUCTION_URL

    @property
    def square_configured(self) -> bool:
        return bool(self.square_access_token and self.square_location_id)

    @property
    def sheets_configured(self) -> bool:
        return bool(self.cte_sheets_webhook_url and self.cte_sheets_webhook_secret)
