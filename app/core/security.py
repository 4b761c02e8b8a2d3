import hashlib
import hmac
from typing import Mapping

BEARER_PREFIX = "bearer "


def generate_signature(order_id: str, payment_id: str, secret: bytes) -> str:
    """HMAC-SHA256 of "<order_id>|<payment_id>" as lowercase hex."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret, message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: bytes) -> bool:
    """True when signature was produced by the gateway for this order/payment pair."""
    expected = generate_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def extract_api_key(headers: Mapping[str, str]) -> str | None:
    """Read the client key from x-api-key, falling back to Authorization: Bearer."""
    api_key = (headers.get("x-api-key") or "").strip()
    if api_key:
        return api_key
    authorization = (headers.get("authorization") or "").strip()
    if authorization.lower().startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip() or None
    return None


def api_keys_match(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
