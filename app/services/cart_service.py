import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.cart import CartItem
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
)
from app.schemas.product import ProductRead


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag on add
      - merge repeated adds of the same product into one line
      - compute line totals and cart totals from live product prices

    Quantities are not checked against stock here; checkout does that.
    Concurrent updates of the same line are last-write-wins.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID):
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is inactive",
            )
        return product

    def _get_line(
        self,
        session: Session,
        user_id: str,
        item_id: uuid.UUID,
    ) -> CartItem:
        item = self.cart_repo.get_line(session, user_id, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )
        return item

    # ---- public operations ----

    def get_cart_summary(
        self,
        session: Session,
        user_id: str,
    ) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with product and line_total), newest first
          - total_quantity
          - total_amount
        """
        rows = self.cart_repo.list_with_products(session, user_id)

        item_reads: list[CartItemRead] = []
        total_qty = 0
        total_amount = 0

        for it, product in rows:
            line_total = it.quantity * product.price
            total_qty += it.quantity
            total_amount += line_total

            item_reads.append(
                CartItemRead(
                    id=it.id,
                    product_id=it.product_id,
                    quantity=it.quantity,
                    line_total=line_total,
                    created_at=it.created_at,
                    product=ProductRead.model_validate(product),
                )
            )

        return CartSummary(
            items=item_reads,
            total_quantity=total_qty,
            total_amount=total_amount,
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: str,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be active
          - an existing line for the product is incremented by quantity
        """
        self._get_valid_product(session, payload.product_id)

        existing = self.cart_repo.get_item(session, user_id, payload.product_id)

        if existing:
            existing.quantity += payload.quantity
            self.cart_repo.update(session, existing)
        else:
            item = CartItem(
                user_id=user_id,
                product_id=payload.product_id,
                quantity=payload.quantity,
            )
            self.cart_repo.create(session, item)

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: str,
        item_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of a cart line.

        A quantity below 1 leaves the stored line untouched.
        """
        item = self._get_line(session, user_id, item_id)

        if payload.quantity >= 1:
            item.quantity = payload.quantity
            self.cart_repo.update(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: str,
        item_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a line from the cart and return updated summary.
        """
        item = self._get_line(session, user_id, item_id)
        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: str,
    ) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], total_quantity=0, total_amount=0)
