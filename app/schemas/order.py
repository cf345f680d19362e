import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

from app.models.order import OrderStatus, PaymentStatus


class ShippingAddress(SQLModel):
    """
    Structured delivery address stored as JSON on the order row.

    Every field is required and cannot be blank.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    phone: str
    address: str
    detail: str
    zip_code: str

    @field_validator("name", "phone", "address", "detail", "zip_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - shipping_address
      - order_note (optional)

    Backend derives:
      - user_id from token
      - status = 'pending'
      - total_amount from cart lines and current product prices
      - items from cart
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress
    order_note: str | None = None

    @field_validator("order_note", mode="before")
    @classmethod
    def normalize_note(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: str
    total_amount: int
    status: OrderStatus
    payment_status: PaymentStatus
    payment_id: str | None = None
    payment_method: str | None = None
    shipping_address: ShippingAddress
    order_note: str | None = None
    created_at: datetime


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    quantity: int
    price: int
    line_total: int


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class PaymentResult(SQLModel):
    """
    Outcome of one payment attempt.
    """

    order_id: uuid.UUID
    success: bool
    status: OrderStatus
    payment_status: PaymentStatus
    payment_id: str | None = None
    payment_method: str | None = None
