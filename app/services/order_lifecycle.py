"""
Order and payment state tables.

Only pending -> confirmed (driven by a successful payment) has a producing
code path. shipped, delivered and cancelled are part of the lifecycle but
nothing in this service moves an order into them.
"""

from fastapi import HTTPException, status

from app.models.order import Order, OrderStatus, PaymentStatus

ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.pending: frozenset({OrderStatus.confirmed, OrderStatus.cancelled}),
    OrderStatus.confirmed: frozenset({OrderStatus.shipped, OrderStatus.cancelled}),
    OrderStatus.shipped: frozenset({OrderStatus.delivered}),
    OrderStatus.delivered: frozenset(),
    OrderStatus.cancelled: frozenset(),
}

# failed -> failed is a retry that failed again
PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.pending: frozenset(
        {PaymentStatus.completed, PaymentStatus.failed, PaymentStatus.cancelled}
    ),
    PaymentStatus.failed: frozenset(
        {PaymentStatus.completed, PaymentStatus.failed, PaymentStatus.cancelled}
    ),
    PaymentStatus.completed: frozenset(),
    PaymentStatus.cancelled: frozenset(),
}


def can_transition_status(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ORDER_TRANSITIONS[current]


def can_transition_payment(current: PaymentStatus, new: PaymentStatus) -> bool:
    return new in PAYMENT_TRANSITIONS[current]


def set_status(order: Order, new: OrderStatus) -> None:
    """
    Move order.status to `new`.

    Raises:
        HTTPException(409): if the table does not allow the move.
    """
    current = OrderStatus(order.status)
    if not can_transition_status(current, new):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid status transition: {current.value} -> {new.value}",
        )
    order.status = new


def set_payment_status(order: Order, new: PaymentStatus) -> None:
    """
    Move order.payment_status to `new`.

    Raises:
        HTTPException(409): if the table does not allow the move.
    """
    current = PaymentStatus(order.payment_status)
    if not can_transition_payment(current, new):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid payment transition: {current.value} -> {new.value}",
        )
    order.payment_status = new
