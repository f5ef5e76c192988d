import httpx
import pytest
from httpx import ASGITransport

SQUARE_LINKS_URL = "https://connect.squareupsandbox.com/v2/online-checkout/payment-links"
SHEETS_URL = "https://script.google.com/macros/s/test-deployment/exec"
SHEETS_ECHO_URL = "https://script.googleusercontent.com/macros/echo?user_content_key=abc"


@pytest.fixture(autouse=True)
def no_retry_backoff(monkeypatch):
    monkeypatch.setattr("stay_checkout.services.sheets.RETRY_BACKOFF", 0)


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("SQUARE_ACCESS_TOKEN", "test-square-token")
    monkeypatch.setenv("SQUARE_LOCATION_ID", "LOC123")
    monkeypatch.setenv("SQUARE_ENV", "sandbox")
    monkeypatch.setenv("CTE_SHEETS_WEBHOOK_URL", SHEETS_URL)
    monkeypatch.setenv("CTE_SHEETS_WEBHOOK_SECRET", "test-secret")
    monkeypatch.setenv("SHEETS_DELIVERY_MODE", "await")


@pytest.fixture
async def client(mock_env):
    from stay_checkout.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
