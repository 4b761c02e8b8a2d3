"""Razorpay REST client: basic-auth httpx session, one call per operation, no retries."""

from typing import Any
from urllib.parse import quote

import httpx

from app.core.config import RAZORPAY_API_BASE, RAZORPAY_TIMEOUT_SECONDS, Settings
from app.core.exceptions import GatewayError, GatewayTransportError
from app.core.logging import get_logger

log = get_logger(__name__)


class RazorpayGateway:
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = RAZORPAY_API_BASE,
        timeout: float = RAZORPAY_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.key_id = key_id
        self._key_secret = key_secret.encode("utf-8")
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "RazorpayGateway":
        return cls(
            settings.razorpay_key_id,
            settings.razorpay_key_secret,
            base_url=settings.razorpay_base_url,
            timeout=settings.razorpay_timeout_seconds,
            transport=transport,
        )

    @property
    def key_secret(self) -> bytes:
        """Signing secret for checkout signatures."""
        return self._key_secret

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            r = await self._client.request(method, path, json=payload)
        except httpx.TimeoutException as exc:
            log.error("razorpay_timeout", method=method, path=path, error=str(exc))
            raise GatewayTransportError("Payment gateway timed out") from exc
        except httpx.HTTPError as exc:
            log.error("razorpay_unreachable", method=method, path=path, error=str(exc))
            raise GatewayTransportError() from exc
        if r.is_error:
            try:
                body = r.json()
            except ValueError:
                body = {"raw": r.text}
            if not isinstance(body, dict):
                body = {"raw": body}
            raise GatewayError(r.status_code, body)
        return r.json()

    async def create_order(self, order: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/orders", order)

    async def fetch_order(self, order_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/orders/{quote(order_id, safe='')}")

    async def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/payments/{quote(payment_id, safe='')}")

    async def aclose(self) -> None:
        await self._client.aclose()
