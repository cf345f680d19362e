import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


class Order(SQLModel, table=True):
    """
    Customer order.

    Columns:
      - id, user_id, total_amount, status, payment_status,
        payment_id, payment_method, shipping_address (JSON),
        order_note, created_at

    status and payment_status are independent fields; the only code path
    that couples them is a successful payment (see payment_service).
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: str = Field(
        foreign_key="users.id",
        index=True,
    )

    # Sum of snapshotted line totals (minor units)
    total_amount: int = Field(
        ge=0,
        description="Order total in minor currency units",
    )

    status: OrderStatus = Field(
        default=OrderStatus.pending,
        index=True,
        description="Order status lifecycle",
    )

    payment_status: PaymentStatus = Field(
        default=PaymentStatus.pending,
        description="Payment state; pending means not yet attempted",
    )

    payment_id: str | None = Field(
        default=None,
        description="Opaque id of the last successful payment",
    )

    payment_method: str | None = Field(
        default=None,
        description="e.g. 'card'",
    )

    # {name, phone, address, detail, zip_code}
    shipping_address: dict[str, Any] = Field(
        sa_column=Column(JSON, nullable=False),
    )

    order_note: str | None = Field(
        default=None,
        description="Optional note / special instructions",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    product_name and price are frozen at order creation and never follow
    later product changes.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    product_name: str = Field(
        description="Product name at time of order",
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: int = Field(
        ge=0,
        description="Unit price at time of order (minor units)",
    )
