from enum import Enum

from pydantic import BaseModel, Field


class DeliveryFeeSource(str, Enum):
    USER_INPUT = "USER_INPUT"
    USER_EMPTY = "USER_EMPTY"
    NOT_PROVIDED = "NOT_PROVIDED"


class OrderItem(BaseModel):
    quantity: int = Field(gt=0)
    name: str = Field(min_length=1)


class DraftOrder(BaseModel):
    """Structured, not-yet-persisted result of parsing an order template."""
    customer_name: str | None = None
    receiver_name: str | None = None
    phone_number: str | None = None
    address: str | None = None
    event_name: str | None = None
    event_duration: str | None = None
    event_date: str | None = None
    delivery_time: str | None = None
    items: list[OrderItem] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    delivery_fee: int | None = None
    delivery_fee_source: DeliveryFeeSource | None = None
    delivery_method: str | None = None


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
