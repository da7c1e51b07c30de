"""Orders: 1-based pagination and all-or-nothing order placement."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from db.errors import NotFoundError
from models.order import Order, OrderItem
from models.user import User
from repositories.order_repo import OrderRepository

DINER = User(id=4, name="pizza diner", email="d@jwt.com")
PLACED_AT = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def orders(fake_db):
    return OrderRepository(fake_db, page_size=10)


class TestListOrders:
    def test_offset_is_computed_from_page(self, orders, fake_db):
        fake_db.script([])
        orders.list_orders(DINER, 3)
        assert fake_db.conn.executed[0][1] == (4, 10, 20)

    def test_first_page_by_default(self, orders, fake_db):
        fake_db.script([])
        page = orders.list_orders(DINER)
        assert page.page == 1
        assert fake_db.conn.executed[0][1] == (4, 10, 0)

    def test_page_past_the_end_is_empty(self, orders, fake_db):
        fake_db.script([])
        page = orders.list_orders(DINER, 4)

        assert page.orders == []
        assert page.to_dict() == {"dinerId": 4, "orders": [], "page": 4}
        assert len(fake_db.conn.executed) == 1

    def test_items_are_attached_to_their_orders(self, orders, fake_db):
        fake_db.script(
            [(1, 2, 5, PLACED_AT), (2, 2, 5, PLACED_AT)],
            [(1, 10, 1, "Veggie", Decimal("0.0038")), (2, 11, 2, "Pepperoni", Decimal("0.0042"))],
        )
        page = orders.list_orders(DINER)

        assert [o.id for o in page.orders] == [1, 2]
        assert page.orders[0].items == [OrderItem(id=10, menu_id=1, description="Veggie", price=0.0038)]
        assert page.orders[1].items[0].price == pytest.approx(0.0042)
        assert fake_db.conn.executed[1][1] == ([1, 2],)

    def test_items_come_from_the_order_not_the_menu(self, orders, fake_db):
        fake_db.script(
            [(1, 2, 5, PLACED_AT)],
            [(1, 10, 1, "Veggie", Decimal("0.0038"))],
        )
        page = orders.list_orders(DINER)

        assert not any("FROM menu" in s for s in fake_db.conn.statements)
        assert page.orders[0].items[0].description == "Veggie"

    def test_page_must_be_positive(self, orders, fake_db):
        with pytest.raises(ValueError):
            orders.list_orders(DINER, 0)
        assert fake_db.acquired == 0


class TestAddOrder:
    def test_uses_server_timestamp(self, orders, fake_db):
        fake_db.script([(11, PLACED_AT)], [("Veggie", Decimal("0.0038"))], [(21,)])
        order = orders.add_order(
            DINER, Order(franchise_id=2, store_id=5, items=[OrderItem(menu_id=1)])
        )

        assert "NOW()" in fake_db.conn.statements[0]
        assert fake_db.conn.executed[0][1] == (4, 2, 5)
        assert order.id == 11
        assert order.date == PLACED_AT
        assert order.diner_id == 4

    def test_items_snapshot_menu_values_when_omitted(self, orders, fake_db):
        fake_db.script([(11, PLACED_AT)], [("Veggie", Decimal("0.0038"))], [(21,)])
        order = orders.add_order(
            DINER, Order(franchise_id=2, store_id=5, items=[OrderItem(menu_id=1)])
        )

        assert order.items == [OrderItem(id=21, menu_id=1, description="Veggie", price=0.0038)]
        assert fake_db.conn.executed[2][1] == (11, 1, "Veggie", 0.0038)

    def test_items_keep_caller_values(self, orders, fake_db):
        fake_db.script([(11, PLACED_AT)], [("Veggie", Decimal("0.0038"))], [(21,)])
        orders.add_order(
            DINER,
            Order(
                franchise_id=2,
                store_id=5,
                items=[OrderItem(menu_id=1, description="Veggie special", price=0.05)],
            ),
        )
        assert fake_db.conn.executed[2][1] == (11, 1, "Veggie special", 0.05)

    def test_unknown_menu_item_discards_whole_order(self, orders, fake_db):
        fake_db.script(
            [(11, PLACED_AT)],
            [("Veggie", Decimal("0.0038"))], [(21,)],
            [],
        )
        with pytest.raises(NotFoundError, match="unknown menu item 99"):
            orders.add_order(
                DINER,
                Order(franchise_id=2, store_id=5, items=[OrderItem(menu_id=1), OrderItem(menu_id=99)]),
            )

        assert fake_db.conn.commits == 0
        assert fake_db.conn.rollbacks == 1
        assert fake_db.released == 1
