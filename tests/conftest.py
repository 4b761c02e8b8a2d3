import os
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Module-level app in app.main reads these at startup
os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test-key-secret")

API_KEY = "test-api-key"
KEY_SECRET = "test-key-secret"


class FakeRazorpay:
    """Stands in for api.razorpay.com through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}

    def respond(self, method: str, path: str, status_code: int, body: Any) -> None:
        self.routes[(method, "/v1" + path)] = (status_code, body)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, "/v1" + path)] = (0, exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.routes.get(
            (request.method, request.url.path),
            (404, {"error": {"code": "BAD_REQUEST_ERROR", "description": "The requested URL was not found on the server."}}),
        )
        if isinstance(body, Exception):
            raise body
        return httpx.Response(status_code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings():
    from app.core.config import Settings
    return Settings(
        _env_file=None,
        env="test",
        api_key=API_KEY,
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=KEY_SECRET,
    )


@pytest.fixture
def fake_razorpay() -> FakeRazorpay:
    return FakeRazorpay()


@pytest_asyncio.fixture
async def gateway(fake_razorpay, settings):
    from app.services.razorpay import RazorpayGateway
    gw = RazorpayGateway.from_settings(settings, transport=fake_razorpay.transport)
    yield gw
    await gw.aclose()


@pytest.fixture
def app(settings, gateway):
    from app.main import create_app
    application = create_app(settings)
    application.state.gateway = gateway
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-api-key": API_KEY}


def razorpay_order(**overrides) -> dict:
    order = {
        "id": "order_EKwxwAgItmmXdp",
        "entity": "order",
        "amount": 10050,
        "amount_paid": 0,
        "amount_due": 10050,
        "currency": "INR",
        "receipt": "receipt_1",
        "offer_id": None,
        "status": "created",
        "attempts": 0,
        "notes": {"description": "Wallet topup", "customer_id": "user"},
        "created_at": 1582628071,
    }
    order.update(overrides)
    return order


def razorpay_payment(**overrides) -> dict:
    payment = {
        "id": "pay_29QQoUBi66xm2f",
        "entity": "payment",
        "amount": 10050,
        "currency": "INR",
        "status": "captured",
        "order_id": "order_EKwxwAgItmmXdp",
        "method": "upi",
        "captured": True,
        "description": "Wallet topup",
        "email": "gaurav.kumar@example.com",
        "contact": "+919000090000",
        "fee": 236,
        "tax": 36,
        "created_at": 1400826750,
    }
    payment.update(overrides)
    return payment
