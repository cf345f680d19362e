import uuid

from sqlmodel import Session, select

from app.models.cart import CartItem
from app.models.product import Product


class CartRepository:
    """
    Data access layer for cart_items.

    Every query is filtered by user_id, mirroring the store's row-level
    policy; a line id alone never reaches a row.
    """

    # Lines joined with their product, newest first
    def list_with_products(
        self, session: Session, user_id: str
    ) -> list[tuple[CartItem, Product]]:
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc())
        )
        return session.exec(stmt).all()

    def list_for_user(self, session: Session, user_id: str) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc())
        )
        return session.exec(stmt).all()

    def get_item(
        self, session: Session, user_id: str, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_line(
        self, session: Session, user_id: str, item_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.id == item_id, CartItem.user_id == user_id
        )
        return session.exec(stmt).first()

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: str) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()
