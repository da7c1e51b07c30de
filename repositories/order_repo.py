"""
repositories/order_repo.py
--------------------------
Data access layer for diner orders.
All SQL queries related to the `diner_order` and `order_item` tables live here.
"""

from config import ORDERS_PER_PAGE
from db.connection import ConnectionManager
from db.errors import NotFoundError
from models.order import Order, OrderItem, OrderPage
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)


class OrderRepository:
    """Repository for diner orders and their items."""

    def __init__(self, manager: ConnectionManager, page_size: int = ORDERS_PER_PAGE):
        self.manager = manager
        self.page_size = page_size

    # ── CREATE ────────────────────────────────────────────

    def add_order(self, user: User, order: Order) -> Order:
        """
        Place an order for `user`, stamped with the server time.

        The header and every item are written in one transaction. Item
        description and price are copied into the order; when the caller
        leaves them out the current menu values are used.

        Returns:
            A new Order with ids, diner and date populated.

        Raises:
            NotFoundError: An item references a menu id that does not exist.
                Nothing from the order is kept.
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO diner_order (diner_id, franchise_id, store_id, date)
                    VALUES (%s, %s, %s, NOW())
                    RETURNING id, date;
                    """,
                    (user.id, order.franchise_id, order.store_id),
                )
                order_id, placed_at = cur.fetchone()
                items = [self._add_item(cur, order_id, item) for item in order.items]
            conn.commit()
            logger.info(f"Added order #{order_id} with {len(items)} item(s) for user {user.id}")
            return Order(
                id=order_id,
                diner_id=user.id,
                franchise_id=order.franchise_id,
                store_id=order.store_id,
                date=placed_at,
                items=items,
            )
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add order for user {user.id}: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def list_orders(self, user: User, page: int = 1) -> OrderPage:
        """
        Fetch one page of the user's orders, oldest first.

        Args:
            user: The diner.
            page: 1-based page number. Pages past the end are empty.

        Returns:
            OrderPage with each order's items filled in.
        """
        if page < 1:
            raise ValueError(f"page must be 1 or greater, got {page}")
        offset = (page - 1) * self.page_size
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id, franchise_id, store_id, date FROM diner_order
                    WHERE diner_id = %s
                    ORDER BY id
                    LIMIT %s OFFSET %s;
                    """,
                    (user.id, self.page_size, offset),
                )
                orders = [
                    Order(id=r[0], diner_id=user.id, franchise_id=r[1], store_id=r[2], date=r[3])
                    for r in cur.fetchall()
                ]
                if orders:
                    by_id = {o.id: o for o in orders}
                    cur.execute(
                        """
                        SELECT order_id, id, menu_id, description, price FROM order_item
                        WHERE order_id = ANY(%s)
                        ORDER BY id;
                        """,
                        (list(by_id),),
                    )
                    for r in cur.fetchall():
                        by_id[r[0]].items.append(
                            OrderItem(id=r[1], menu_id=r[2], description=r[3], price=float(r[4]))
                        )
            return OrderPage(diner_id=user.id, orders=orders, page=page)
        finally:
            self.manager.release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _add_item(cur, order_id: int, item: OrderItem) -> OrderItem:
        cur.execute("SELECT description, price FROM menu WHERE id = %s;", (item.menu_id,))
        menu_row = cur.fetchone()
        if not menu_row:
            raise NotFoundError(f"unknown menu item {item.menu_id}")
        description = item.description if item.description is not None else menu_row[0]
        price = item.price if item.price is not None else float(menu_row[1])
        cur.execute(
            """
            INSERT INTO order_item (order_id, menu_id, description, price)
            VALUES (%s, %s, %s, %s)
            RETURNING id;
            """,
            (order_id, item.menu_id, description, price),
        )
        return OrderItem(id=cur.fetchone()[0], menu_id=item.menu_id, description=description, price=price)
