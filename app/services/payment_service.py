import logging
import random
import string
import time
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.order import Order, OrderStatus, PaymentStatus
from app.repositories.order_repo import OrderRepository
from app.schemas.order import PaymentResult
from app.services.order_lifecycle import (
    can_transition_payment,
    can_transition_status,
    set_payment_status,
    set_status,
)
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)

PAYMENT_METHOD_CARD = "card"

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class PaymentSimulator:
    """
    Test-mode stand-in for a payment gateway.

    Waits `delay_seconds`, then succeeds with probability `success_rate`.
    No money moves; swap this class for a real gateway client in production.
    """

    def __init__(
        self,
        delay_seconds: float = 2.0,
        success_rate: float = 0.9,
        rng: random.Random | None = None,
    ):
        self.delay_seconds = delay_seconds
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    def charge(self) -> bool:
        if self.delay_seconds > 0:
            time.sleep(self.delay_seconds)
        return self.rng.random() < self.success_rate

    def new_payment_id(self) -> str:
        """pay_<epoch ms>_<9 base36 chars>"""
        suffix = "".join(self.rng.choices(_TOKEN_ALPHABET, k=9))
        return f"pay_{int(time.time() * 1000)}_{suffix}"


class PaymentService:
    """
    Applies a simulated charge to an order.

    Success writes payment_id, payment_method, payment_status=completed and
    moves the order to confirmed. Failure only writes payment_status=failed;
    the order stays pending and the user may try again.
    """

    def __init__(self, order_repo: OrderRepository, order_service: OrderService):
        self.order_repo = order_repo
        self.order_service = order_service

    def process_payment(
        self,
        session: Session,
        user_id: str,
        order_id: uuid.UUID,
        simulator: PaymentSimulator,
    ) -> PaymentResult:
        order = self.order_service.get_owned_order(session, user_id, order_id)

        # Reject before waiting so an already paid order is not charged twice
        self._ensure_payable(order)

        # No connection or transaction is held during the gateway wait
        session.commit()
        success = simulator.charge()

        # Re-read under a row lock; another request may have paid meanwhile
        order = self.order_repo.get_for_user(session, user_id, order_id, for_update=True)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        self._ensure_payable(order)

        if success:
            set_status(order, OrderStatus.confirmed)
            set_payment_status(order, PaymentStatus.completed)
            order.payment_id = simulator.new_payment_id()
            order.payment_method = PAYMENT_METHOD_CARD
        else:
            set_payment_status(order, PaymentStatus.failed)

        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)

        logger.info(
            "Payment for order %s %s (payment_status=%s)",
            order.id,
            "succeeded" if success else "failed",
            order.payment_status.value,
        )

        return PaymentResult(
            order_id=order.id,
            success=success,
            status=order.status,
            payment_status=order.payment_status,
            payment_id=order.payment_id,
            payment_method=order.payment_method,
        )

    @staticmethod
    def _ensure_payable(order: Order) -> None:
        """
        A charge may only start when its success outcome is a legal move.

        Raises:
            HTTPException(409): order already paid, or no longer pending.
        """
        if PaymentStatus(order.payment_status) == PaymentStatus.completed:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Order is already paid",
            )
        if not can_transition_payment(
            PaymentStatus(order.payment_status), PaymentStatus.completed
        ) or not can_transition_status(
            OrderStatus(order.status), OrderStatus.confirmed
        ):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Order cannot be paid in status '{OrderStatus(order.status).value}'",
            )
