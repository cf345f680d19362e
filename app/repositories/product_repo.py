import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB reads (the storefront never writes products).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def _active_query(self, stmt, category: str | None):
        stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if category is not None:
            stmt = stmt.where(Product.category == category)
        return stmt

    def count_active(self, session: Session, category: str | None = None) -> int:
        stmt = self._active_query(select(func.count()).select_from(Product), category)
        return session.exec(stmt).one()

    def list_active(
        self,
        session: Session,
        category: str | None = None,
        sort: str = "latest",
        skip: int = 0,
        limit: int = 12,
    ) -> list[Product]:
        stmt = self._active_query(select(Product), category)

        if sort == "price_asc":
            stmt = stmt.order_by(Product.price.asc(), Product.created_at.desc())
        elif sort == "price_desc":
            stmt = stmt.order_by(Product.price.desc(), Product.created_at.desc())
        else:
            stmt = stmt.order_by(Product.created_at.desc())

        stmt = stmt.offset(skip).limit(limit)
        return session.exec(stmt).all()
