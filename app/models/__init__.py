from app.models.order import Order
from app.models.payment import PaymentSummary
from app.models.requests import CreateOrderRequest, VerifyPaymentRequest

__all__ = [
    "Order",
    "PaymentSummary",
    "CreateOrderRequest",
    "VerifyPaymentRequest",
]
