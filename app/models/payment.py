from typing import Any

from pydantic import BaseModel


class PaymentSummary(BaseModel):
    """Verified payment as returned by /verify-payment."""

    payment_id: str
    order_id: str | None = None
    amount: int
    currency: str
    status: str
    method: str | None = None
    captured: bool = False
    description: str | None = None
    email: str | None = None
    contact: str | None = None
    name: str | None = None
    created_at: int | None = None

    @classmethod
    def from_gateway(cls, payment: dict[str, Any]) -> "PaymentSummary":
        return cls(
            payment_id=payment["id"],
            order_id=payment.get("order_id"),
            amount=payment["amount"],
            currency=payment["currency"],
            status=payment["status"],
            method=payment.get("method"),
            captured=bool(payment.get("captured")),
            description=payment.get("description"),
            email=payment.get("email"),
            contact=payment.get("contact"),
            name=payment.get("name"),
            created_at=payment.get("created_at"),
        )
