"""Tests for checkout and order history."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from app.models.cart import CartItem
from app.models.order import Order, OrderItem
from app.routers import orders as orders_router
from app.schemas.order import OrderCreate
from app.services.order_service import OrderService
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from conftest import SHIPPING, USER_A, USER_B, auth_headers

CART = "/api/v1/cart"
ORDERS = "/api/v1/orders"


def fill_cart(client, lines, user=USER_A):
    for product, quantity in lines:
        response = client.post(
            CART,
            json={"product_id": str(product.id), "quantity": quantity},
            headers=auth_headers(user),
        )
        assert response.status_code == 200


def checkout(client, user=USER_A, **overrides):
    body = {"shipping_address": dict(SHIPPING), "order_note": "Leave at the door"}
    body.update(overrides)
    return client.post(f"{ORDERS}/checkout", json=body, headers=auth_headers(user))


def order_count(session) -> int:
    return len(session.exec(select(Order)).all())


class TestCheckout:
    def test_pen_and_mug_scenario(self, client, pen_and_mug):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 2), (mug, 1)])

        response = checkout(client)
        assert response.status_code == 201
        data = response.json()

        assert data["total_amount"] == 7000
        assert data["status"] == "pending"
        assert data["payment_status"] == "pending"
        assert data["payment_id"] is None
        assert data["order_note"] == "Leave at the door"
        assert data["shipping_address"] == SHIPPING

        items = sorted(data["items"], key=lambda i: i["price"])
        assert [(i["product_name"], i["price"], i["quantity"]) for i in items] == [
            ("Pen", 1000, 2),
            ("Mug", 5000, 1),
        ]

    def test_cart_is_cleared(self, client, session, pen_and_mug):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 1), (mug, 1)])
        checkout(client)

        assert client.get(CART, headers=auth_headers()).json()["items"] == []
        assert session.exec(select(CartItem)).all() == []

    def test_other_users_cart_untouched(self, client, pen_and_mug):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 1)], user=USER_A)
        fill_cart(client, [(mug, 1)], user=USER_B)
        checkout(client, user=USER_A)

        other = client.get(CART, headers=auth_headers(USER_B)).json()
        assert len(other["items"]) == 1

    def test_empty_cart_rejected(self, client, session):
        response = checkout(client)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"
        assert order_count(session) == 0

    @pytest.mark.parametrize("field", ["name", "phone", "address", "detail", "zip_code"])
    def test_blank_shipping_field_rejected(self, client, session, pen_and_mug, field):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 1)])

        address = dict(SHIPPING, **{field: "   "})
        response = checkout(client, shipping_address=address)
        assert response.status_code == 422
        assert order_count(session) == 0
        assert len(client.get(CART, headers=auth_headers()).json()["items"]) == 1

    def test_missing_shipping_field_rejected(self, client, session, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 1)])

        address = {k: v for k, v in SHIPPING.items() if k != "zip_code"}
        response = checkout(client, shipping_address=address)
        assert response.status_code == 422
        assert order_count(session) == 0

    def test_blank_note_stored_as_null(self, client, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 1)])
        data = checkout(client, order_note="  ").json()
        assert data["order_note"] is None

    def test_stock_checked_at_checkout(self, client, session, make_product):
        scarce = make_product("Scarce", 100, stock_quantity=2)
        fill_cart(client, [(scarce, 3)])

        response = checkout(client)
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["items"][0]["product_id"] == str(scarce.id)
        assert "Insufficient stock" in detail["items"][0]["reason"]
        assert order_count(session) == 0

    def test_product_deactivated_after_add(self, client, session, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 1)])
        pen.is_active = False
        session.commit()

        response = checkout(client)
        assert response.status_code == 400
        assert response.json()["detail"]["items"][0]["reason"] == "Product is inactive"

    def test_total_uses_price_at_checkout(self, client, session, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 3)])
        pen.price = 1200
        session.commit()

        data = checkout(client).json()
        assert data["total_amount"] == 3600
        assert data["items"][0]["price"] == 1200

    def test_stock_is_not_decremented(self, client, session, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 4)])
        checkout(client)
        session.refresh(pen)
        assert pen.stock_quantity == 10

    def test_cart_clear_failure_keeps_order(
        self, client, session, pen_and_mug, monkeypatch, caplog
    ):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 2), (mug, 1)])

        def boom(session, user_id):
            raise OperationalError("DELETE FROM cart_items", {}, Exception("store down"))

        monkeypatch.setattr(orders_router.service.cart_repo, "clear_user_cart", boom)

        response = checkout(client)
        assert response.status_code == 201
        order_id = response.json()["id"]
        assert "Failed to clear cart" in caplog.text

        # cart survives, order is still visible in history
        assert len(client.get(CART, headers=auth_headers()).json()["items"]) == 2
        history = client.get(f"{ORDERS}/me", headers=auth_headers()).json()
        assert [o["id"] for o in history] == [order_id]
        detail = client.get(f"{ORDERS}/me/{order_id}", headers=auth_headers())
        assert detail.status_code == 200
        assert detail.json()["total_amount"] == 7000

    def test_store_down_during_cart_clear_still_places_order(
        self, client, session, pen_and_mug, monkeypatch
    ):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 2), (mug, 1)])

        engine = session.get_bind()
        store_down = {"on": False}

        def refuse_queries(conn, cursor, statement, parameters, context, executemany):
            if store_down["on"]:
                raise OperationalError(statement, parameters, Exception("store down"))

        def boom(session, user_id):
            store_down["on"] = True
            raise OperationalError("DELETE FROM cart_items", {}, Exception("store down"))

        monkeypatch.setattr(orders_router.service.cart_repo, "clear_user_cart", boom)
        event.listen(engine, "before_cursor_execute", refuse_queries)
        try:
            response = checkout(client)
        finally:
            store_down["on"] = False
            event.remove(engine, "before_cursor_execute", refuse_queries)

        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == 7000
        assert len(data["items"]) == 2

        assert order_count(session) == 1
        history = client.get(f"{ORDERS}/me", headers=auth_headers()).json()
        assert [o["id"] for o in history] == [data["id"]]


class TestOrderHistory:
    def test_list_newest_first(self, client, session, pen_and_mug):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 1)])
        first = checkout(client).json()["id"]
        fill_cart(client, [(mug, 1)])
        second = checkout(client).json()["id"]

        older = session.get(Order, uuid.UUID(first))
        older.created_at = datetime.now(timezone.utc) - timedelta(days=1)
        session.commit()

        data = client.get(f"{ORDERS}/me", headers=auth_headers()).json()
        assert [o["id"] for o in data] == [second, first]
        assert "items" not in data[0]

    def test_history_is_per_user(self, client, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 1)], user=USER_B)
        checkout(client, user=USER_B)

        assert client.get(f"{ORDERS}/me", headers=auth_headers(USER_A)).json() == []

    def test_get_other_users_order_is_not_found(self, client, pen_and_mug):
        pen, _ = pen_and_mug
        fill_cart(client, [(pen, 1)], user=USER_B)
        order_id = checkout(client, user=USER_B).json()["id"]

        response = client.get(f"{ORDERS}/me/{order_id}", headers=auth_headers(USER_A))
        assert response.status_code == 404
        assert response.json()["detail"] == "Order not found"

    def test_get_unknown_order(self, client):
        response = client.get(f"{ORDERS}/me/{uuid.uuid4()}", headers=auth_headers())
        assert response.status_code == 404

    def test_snapshot_ignores_later_product_changes(self, client, session, pen_and_mug):
        pen, mug = pen_and_mug
        fill_cart(client, [(pen, 2), (mug, 1)])
        order_id = checkout(client).json()["id"]

        pen.price = 9999
        pen.name = "Fountain Pen"
        session.commit()

        data = client.get(f"{ORDERS}/me/{order_id}", headers=auth_headers()).json()
        pen_item = next(i for i in data["items"] if i["product_id"] == str(pen.id))
        assert pen_item["product_name"] == "Pen"
        assert pen_item["price"] == 1000
        assert pen_item["line_total"] == 2000
        assert data["total_amount"] == 7000


class TestOrderServiceTotals:
    @pytest.mark.parametrize(
        "lines",
        [
            [(1000, 2), (5000, 1)],
            [(0, 3)],
            [(250, 7), (1, 1), (99999, 2)],
        ],
    )
    def test_total_equals_sum_of_items(self, session, make_user, make_product, lines):
        make_user(USER_A)
        for idx, (price, qty) in enumerate(lines):
            product = make_product(f"P{idx}", price)
            session.add(CartItem(user_id=USER_A, product_id=product.id, quantity=qty))
        session.commit()

        service = OrderService(OrderRepository(), CartRepository())
        order = service.create_order_from_cart(
            session, USER_A, OrderCreate(shipping_address=SHIPPING)
        )

        stored_items = session.exec(
            select(OrderItem).where(OrderItem.order_id == order.id)
        ).all()
        assert len(stored_items) == len(lines)
        assert order.total_amount == sum(i.price * i.quantity for i in stored_items)
