import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel

ProductCategory = Literal[
    "electronics",
    "clothing",
    "books",
    "food",
    "sports",
    "beauty",
    "home",
]

PRODUCT_CATEGORIES: tuple[str, ...] = ProductCategory.__args__

# "all" disables the category filter
CategoryFilter = Literal["all", ProductCategory]

ProductSort = Literal["latest", "price_asc", "price_desc"]


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None = None
    price: int
    category: str
    stock_quantity: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductPage(SQLModel):
    """
    One page of the catalog listing plus the numbers a pager needs.
    """

    items: list[ProductRead]
    total_count: int
    page: int
    page_size: int
    total_pages: int
