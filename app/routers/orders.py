import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.config import get_settings
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.cart_repo import CartRepository
from app.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderWithItemsRead,
    PaymentResult,
)
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService, PaymentSimulator

settings = get_settings()

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
service = OrderService(order_repo, cart_repo)
payment_service = PaymentService(order_repo, service)


def get_payment_simulator() -> PaymentSimulator:
    """
    Dependency providing the test-mode payment gateway.

    Tests override this to force an outcome.
    """
    return PaymentSimulator(
        delay_seconds=settings.PAYMENT_SIMULATED_DELAY_SECONDS,
        success_rate=settings.PAYMENT_SUCCESS_RATE,
    )


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create an order from the current user's cart.

    The returned id is what the client sends to the payment endpoint.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders (without items).
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderWithItemsRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)


@router.post(
    "/me/{order_id}/payment",
    response_model=PaymentResult,
)
def pay_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    simulator: PaymentSimulator = Depends(get_payment_simulator),
):
    """
    Run a test-mode payment for one of the current user's orders.

      success -> payment_status=completed, status=confirmed

      failure -> payment_status=failed, status unchanged (retry allowed)

      already paid -> 409

    Runs in the threadpool; the gateway wait blocks only this worker.
    """
    return payment_service.process_payment(
        session, current_user.id, order_id, simulator
    )
