import math
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.schemas.product import PRODUCT_CATEGORIES, ProductPage, ProductRead


class ProductService:
    """
    Read-only catalog logic.

    Responsibilities:
      - hide inactive products from listings
      - translate page numbers to offsets
      - category filter and sort options
    """

    def __init__(self, repo: ProductRepository, page_size: int = 12):
        self.repo = repo
        self.page_size = page_size

    @staticmethod
    def _category_filter(category: str) -> str | None:
        return None if category == "all" else category

    def list_categories(self) -> list[str]:
        return list(PRODUCT_CATEGORIES)

    def list_products(
        self,
        session: Session,
        category: str = "all",
        sort: str = "latest",
        page: int = 1,
        page_size: int | None = None,
    ) -> ProductPage:
        """
        Return one page of active products.

        `page` is 1-based. A page past the end is empty, not an error.
        """
        size = page_size or self.page_size
        category_filter = self._category_filter(category)

        total = self.repo.count_active(session, category_filter)
        products = self.repo.list_active(
            session,
            category=category_filter,
            sort=sort,
            skip=(page - 1) * size,
            limit=size,
        )

        return ProductPage(
            items=[ProductRead.model_validate(p) for p in products],
            total_count=total,
            page=page,
            page_size=size,
            total_pages=math.ceil(total / size) if total else 0,
        )

    def list_latest(
        self,
        session: Session,
        category: str = "all",
        limit: int = 8,
    ) -> list[Product]:
        """Newest active products, for the home page sections."""
        return self.repo.list_active(
            session,
            category=self._category_filter(category),
            sort="latest",
            limit=limit,
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product
