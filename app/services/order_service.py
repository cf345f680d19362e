import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.models.order import Order, OrderItem, OrderStatus, PaymentStatus
from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.order_repo import OrderRepository
from app.repositories.cart_repo import CartRepository
from app.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderWithItemsRead,
    OrderItemRead,
)

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart
      - Validate cart lines against live products (active, stock)
      - Compute totals and snapshot names/prices into order items
      - Clear cart after success (best-effort)
      - Order history scoped to the requesting user
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo

    # -------- Checkout --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: str,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart lines with products; error if empty.
          2. For each line:
             - Ensure product is active.
             - Ensure quantity <= stock_quantity.
          3. Compute total_amount from current product prices.
          4. Create Order row (status='pending') and its OrderItem rows,
             committed together.
          5. Clear cart. A failure here is logged and the order stands.
          6. Return full order.
        """
        # 1) Load cart (shipping fields were validated by OrderCreate)
        rows: list[tuple[CartItem, Product]] = self.cart_repo.list_with_products(
            session, user_id
        )
        if not rows:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 2) Validate each cart line vs product
        errors: list[dict[str, str]] = []

        for ci, product in rows:
            if not product.is_active:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": "Product is inactive",
                    }
                )
                continue

            if ci.quantity > product.stock_quantity:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": f"Insufficient stock (have {product.stock_quantity}, requested {ci.quantity})",
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        # 3) Total from live prices
        total_amount = sum(product.price * ci.quantity for ci, product in rows)

        # 4) Order + items in one transaction
        try:
            order = Order(
                user_id=user_id,
                total_amount=total_amount,
                status=OrderStatus.pending,
                payment_status=PaymentStatus.pending,
                shipping_address=payload.shipping_address.model_dump(),
                order_note=payload.order_note,
            )
            order = self.order_repo.create_order(session, order)

            order_items = [
                OrderItem(
                    order_id=order.id,
                    product_id=product.id,
                    product_name=product.name,
                    quantity=ci.quantity,
                    price=product.price,
                )
                for ci, product in rows
            ]
            order_items = self.order_repo.create_items(session, order_items)

            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise

        session.refresh(order)

        # Nothing after this point may reload order state from the store
        result = self._build_order_with_items_dto(order, order_items)
        logger.info(
            "Order %s created for user %s (%d items, total %d)",
            result.id,
            user_id,
            len(result.items),
            result.total_amount,
        )

        # 5) Clear cart; the order is already committed
        try:
            self.cart_repo.clear_user_cart(session, user_id)
        except SQLAlchemyError:
            session.rollback()
            logger.exception(
                "Failed to clear cart for user %s after order %s", user_id, result.id
            )

        return result

    # -------- History --------

    def list_user_orders(
        self,
        session: Session,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user (without items), newest first.
        """
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        return [OrderRead.model_validate(o) for o in orders]

    def get_owned_order(
        self,
        session: Session,
        user_id: str,
        order_id: uuid.UUID,
    ) -> Order:
        """
        Load an order that belongs to user_id.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, user_id, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def get_user_order(
        self,
        session: Session,
        user_id: str,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the user, including items.
        """
        order = self.get_owned_order(session, user_id, order_id)
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Helper DTO builder --------

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        """
        Compose OrderWithItemsRead from ORM models.
        """
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                price=it.price,
                line_total=it.quantity * it.price,
            )
            for it in items
        ]

        return OrderWithItemsRead(
            **OrderRead.model_validate(order).model_dump(),
            items=item_dtos,
        )
