"""Razorpay orders and checkout verification: amount conversion, receipts, error mapping."""

import uuid
from decimal import ROUND_DOWN, Decimal
from typing import Any

from app.core.config import ORDER_DESCRIPTION
from app.core.exceptions import GatewayError, InvalidSignatureError, PaymentOperationError
from app.core.logging import get_logger
from app.core.security import verify_payment_signature
from app.models.order import Order
from app.models.payment import PaymentSummary
from app.services.razorpay import RazorpayGateway

log = get_logger(__name__)

RECEIPT_PREFIX = "receipt_"
DEFAULT_CUSTOMER_ID = "user"


def to_minor_units(amount: Decimal | int) -> int:
    """Rupees -> paise, truncating sub-paise fractions."""
    return int((Decimal(amount) * 100).to_integral_value(rounding=ROUND_DOWN))


def generate_receipt() -> str:
    return f"{RECEIPT_PREFIX}{uuid.uuid4().hex}"


def _upstream_failure(exc: GatewayError, code: str, message: str) -> PaymentOperationError:
    return PaymentOperationError(
        exc.description or message,
        code=exc.upstream_code or code,
        status_code=exc.status_code,
        details=exc.payload,
    )


async def create_order(
    gateway: RazorpayGateway,
    amount: Decimal | int,
    currency: str = "INR",
    receipt: str | None = None,
    notes: dict[str, Any] | None = None,
    partial_payment: bool = False,
    first_payment_min_amount: Decimal | int | None = None,
    description: str = ORDER_DESCRIPTION,
) -> dict:
    """Create a Razorpay order; amount is in rupees. Returns the client-facing order subset."""
    receipt = receipt if receipt is not None else generate_receipt()
    notes = notes or {}
    customer_id = notes.get("customer_id") or DEFAULT_CUSTOMER_ID
    order_data: dict[str, Any] = {
        "amount": to_minor_units(amount),
        "currency": currency,
        "receipt": receipt,
        "notes": {"description": description, "customer_id": customer_id, **notes},
        "partial_payment": partial_payment,
    }
    if first_payment_min_amount is not None:
        order_data["first_payment_min_amount"] = to_minor_units(first_payment_min_amount)

    log.info(
        "razorpay_order_create",
        amount=order_data["amount"],
        currency=currency,
        receipt=receipt,
        customer_id=customer_id,
    )
    try:
        order = await gateway.create_order(order_data)
    except GatewayError as exc:
        log.error("razorpay_order_create_failed", status_code=exc.status_code, error=exc.payload, receipt=receipt)
        raise _upstream_failure(exc, "ORDER_CREATION_FAILED", "Failed to create order") from exc
    log.info("razorpay_order_created", order_id=order.get("id"), amount=order.get("amount"))
    return Order.model_validate(order).model_dump()


async def verify_payment(gateway: RazorpayGateway, order_id: str, payment_id: str, signature: str) -> dict:
    """
    Check the checkout signature locally, then fetch the payment.
    A forged signature never reaches the gateway.
    """
    log.info("razorpay_payment_verify", order_id=order_id, payment_id=payment_id)
    if not verify_payment_signature(order_id, payment_id, signature, gateway.key_secret):
        log.warning("razorpay_signature_invalid", order_id=order_id, payment_id=payment_id)
        raise InvalidSignatureError()
    try:
        payment = await gateway.fetch_payment(payment_id)
    except GatewayError as exc:
        log.error("razorpay_payment_verify_failed", status_code=exc.status_code, error=exc.payload, payment_id=payment_id)
        raise _upstream_failure(exc, "PAYMENT_VERIFICATION_FAILED", "Failed to verify payment") from exc
    log.info("razorpay_payment_verified", order_id=order_id, payment_id=payment_id, status=payment.get("status"))
    return PaymentSummary.from_gateway(payment).model_dump()


async def get_payment(gateway: RazorpayGateway, payment_id: str) -> dict:
    log.info("razorpay_payment_fetch", payment_id=payment_id)
    try:
        return await gateway.fetch_payment(payment_id)
    except GatewayError as exc:
        log.error("razorpay_payment_fetch_failed", status_code=exc.status_code, error=exc.payload, payment_id=payment_id)
        raise _upstream_failure(exc, "PAYMENT_DETAILS_FAILED", "Failed to get payment details") from exc


async def get_order(gateway: RazorpayGateway, order_id: str) -> dict:
    log.info("razorpay_order_fetch", order_id=order_id)
    try:
        return await gateway.fetch_order(order_id)
    except GatewayError as exc:
        log.error("razorpay_order_fetch_failed", status_code=exc.status_code, error=exc.payload, order_id=order_id)
        raise _upstream_failure(exc, "ORDER_DETAILS_FAILED", "Failed to get order details") from exc
