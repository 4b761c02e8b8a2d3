from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Order(BaseModel):
    """Subset of a Razorpay order returned to clients. Amounts are in paise."""

    model_config = ConfigDict(extra="ignore")

    id: str
    entity: str = "order"
    amount: int
    amount_paid: int = 0
    amount_due: int = 0
    currency: str
    receipt: str | None = None
    status: str
    attempts: int = 0
    # Razorpay sends [] instead of {} when an order has no notes
    notes: dict[str, Any] | list[Any] = Field(default_factory=dict)
    created_at: int | None = None
