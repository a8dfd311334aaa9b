from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PHONE_PATTERN = r"^\+233\d{9}$"


class OrderCreate(BaseModel):
    """Draft order as sent by the checkout form (and embedded in payment metadata)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    food_id: str = Field(..., alias="foodId", min_length=1)
    quantity: int = Field(..., ge=1)
    delivery_location: str = Field(..., alias="deliveryLocation", min_length=1)
    phone_number: str = Field(..., alias="phoneNumber", pattern=PHONE_PATTERN)
    delivery_time: datetime = Field(..., alias="deliveryTime")
    payment_mode: str = Field(..., alias="paymentMode", min_length=1)
    additional_notes: Optional[str] = Field(default=None, alias="additionalNotes")
    addons: List[str] = Field(default_factory=list)
    drink: Optional[str] = None

    @field_validator("food_id", mode="before")
    @classmethod
    def _coerce_food_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("addons", mode="before")
    @classmethod
    def _default_addons(cls, value: Any) -> Any:
        return [] if value is None else value


class OrderStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Any non-empty text is stored as-is.
    order_status: str = Field(..., alias="orderStatus", min_length=1)

    @field_validator("order_status")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("orderStatus is required")
        return value.strip()


class PaymentVerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reference: Optional[str] = None
    # Client-side correlation id only; the stored order gets a fresh identifier.
    order_id: Optional[str] = Field(default=None, alias="orderId")
