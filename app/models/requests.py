"""Inbound payload schemas. Unknown keys are rejected."""

from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_RECEIPT_LENGTH = 40
MAX_NOTES = 15
# Upper bound in rupees (10 crore)
MAX_AMOUNT = Decimal("100000000")


def _stringify_decimals(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _stringify_decimals(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_decimals(v) for v in value]
    return value


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Major units (rupees); Decimal keeps 100.50 exact until conversion to paise
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    currency: Literal["INR"] = "INR"
    receipt: str | None = Field(default=None, min_length=1, max_length=MAX_RECEIPT_LENGTH)
    notes: dict[str, Any] | None = None
    partial_payment: bool = False
    first_payment_min_amount: Decimal | None = Field(default=None, gt=0, le=MAX_AMOUNT)

    @field_validator("notes")
    @classmethod
    def _limit_notes(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        if v is None:
            return v
        if len(v) > MAX_NOTES:
            raise ValueError(f"notes must have at most {MAX_NOTES} keys")
        # Decoded floats arrive as Decimal; note values go upstream as JSON strings
        return _stringify_decimals(v)


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)
