"""
repositories/menu_repo.py
-------------------------
Data access layer for the menu catalog.
"""

from db.connection import ConnectionManager
from models.menu import MenuItem
from utils.logger import get_logger

logger = get_logger(__name__)


class MenuRepository:
    """Repository for the menu table."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def get_menu(self) -> list[MenuItem]:
        """Return every menu item, ordered by id."""
        sql = "SELECT id, title, description, image, price FROM menu ORDER BY id;"
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_item(r) for r in cur.fetchall()]
        finally:
            self.manager.release_connection(conn)

    def add_menu_item(self, item: MenuItem) -> MenuItem:
        """
        Insert a menu item.
        Callers are responsible for checking that the requester is an admin.

        Returns:
            The same MenuItem with its `id` populated.
        """
        sql = """
            INSERT INTO menu (title, description, image, price)
            VALUES (%s, %s, %s, %s)
            RETURNING id;
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (item.title, item.description, item.image, item.price))
                item.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added menu item '{item.title}' #{item.id}")
            return item
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add menu item: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    @staticmethod
    def _row_to_item(row: tuple) -> MenuItem:
        """Convert a database row tuple to a MenuItem domain object."""
        return MenuItem(
            id=row[0],
            title=row[1],
            description=row[2],
            image=row[3],
            price=float(row[4]),
        )
