import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from app.schemas.product import ProductRead


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart line.

    Values below 1 are accepted here and ignored by the service.
    """

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart line joined with live product data.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    line_total: int
    created_at: datetime
    product: ProductRead


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    total_amount: int
