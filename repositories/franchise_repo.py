"""
repositories/franchise_repo.py
------------------------------
Data access layer for franchises, their stores and their admins.
All SQL queries related to the `franchise` and `store` tables live here,
plus the franchisee grants in `user_role` that point at a franchise.
"""

from typing import Optional

from psycopg2 import errors

from db.connection import ConnectionManager
from db.errors import IntegrityError, NotFoundError
from models.franchise import Franchise, FranchiseAdmin, Store
from models.role import ADMIN, FRANCHISEE
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)

# Dependency order: stores and grants reference the franchise row.
CASCADE_DELETE_STEPS = (
    "DELETE FROM store WHERE franchise_id = %s;",
    "DELETE FROM user_role WHERE role = 'franchisee' AND object_id = %s;",
    "DELETE FROM franchise WHERE id = %s;",
)

# Outer join so stores without orders still show up, with zero revenue.
STORES_WITH_REVENUE_SQL = """
    SELECT s.id, s.name, COALESCE(SUM(oi.price), 0) AS total_revenue
    FROM store AS s
    LEFT JOIN diner_order AS o ON o.store_id = s.id
    LEFT JOIN order_item AS oi ON oi.order_id = o.id
    WHERE s.franchise_id = %s
    GROUP BY s.id, s.name
    ORDER BY s.id;
"""

ADMINS_SQL = """
    SELECT u.id, u.name, u.email
    FROM user_role AS ur
    JOIN users AS u ON u.id = ur.user_id
    WHERE ur.object_id = %s AND ur.role = 'franchisee'
    ORDER BY u.id;
"""


class FranchiseRepository:
    """Repository for franchises and stores."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    # ── CREATE ────────────────────────────────────────────

    def create_franchise(self, franchise: Franchise) -> Franchise:
        """
        Create a franchise and grant the franchisee role to each of its admins.

        Args:
            franchise: Name plus admins identified by email.

        Returns:
            The same Franchise with its id and admin ids/names populated.

        Raises:
            NotFoundError: An admin email does not belong to any user.
            IntegrityError: A franchise with this name already exists.
        """
        admins = franchise.admins or []
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                for admin in admins:
                    cur.execute("SELECT id, name FROM users WHERE email = %s;", (admin.email,))
                    row = cur.fetchone()
                    if not row:
                        raise NotFoundError(
                            f"unknown user for franchise admin {admin.email} provided"
                        )
                    admin.id, admin.name = row
                cur.execute(
                    "INSERT INTO franchise (name) VALUES (%s) RETURNING id;", (franchise.name,)
                )
                franchise.id = cur.fetchone()[0]
                for admin in admins:
                    cur.execute(
                        "INSERT INTO user_role (user_id, role, object_id) VALUES (%s, %s, %s);",
                        (admin.id, FRANCHISEE, franchise.id),
                    )
            conn.commit()
            franchise.admins = admins
            logger.info(f"Created franchise '{franchise.name}' #{franchise.id}")
            return franchise
        except errors.UniqueViolation as e:
            conn.rollback()
            logger.warning(f"Rejected duplicate franchise name '{franchise.name}'")
            raise IntegrityError(f"franchise {franchise.name} already exists") from e
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to create franchise '{franchise.name}': {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    def create_store(self, franchise_id: int, store: Store) -> Store:
        """
        Add a store to a franchise.

        Raises:
            NotFoundError: The franchise does not exist.
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO store (franchise_id, name) VALUES (%s, %s) RETURNING id;",
                    (franchise_id, store.name),
                )
                store_id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Created store '{store.name}' #{store_id} in franchise {franchise_id}")
            return Store(id=store_id, franchise_id=franchise_id, name=store.name)
        except errors.ForeignKeyViolation as e:
            conn.rollback()
            logger.warning(f"Rejected store for unknown franchise {franchise_id}")
            raise NotFoundError(f"unknown franchise {franchise_id}") from e
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to create store in franchise {franchise_id}: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def list_franchises(self, requesting_user: Optional[User]) -> list[Franchise]:
        """
        List every franchise with its stores.

        Admins additionally see each franchise's admins and the revenue of
        every store. Anyone else (including anonymous callers) gets id, name
        and stores only.
        """
        privileged = requesting_user is not None and requesting_user.is_role(ADMIN)
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT id, name FROM franchise ORDER BY id;")
                franchises = [Franchise(id=r[0], name=r[1]) for r in cur.fetchall()]
                if privileged:
                    for franchise in franchises:
                        self._enrich(cur, franchise)
                elif franchises:
                    by_id = {f.id: f for f in franchises}
                    cur.execute("SELECT franchise_id, id, name FROM store ORDER BY id;")
                    for r in cur.fetchall():
                        if r[0] in by_id:
                            by_id[r[0]].stores.append(Store(id=r[1], name=r[2]))
            return franchises
        finally:
            self.manager.release_connection(conn)

    def list_franchises_of_user(self, user_id: int) -> list[Franchise]:
        """Franchises the user is a franchisee of, with admins and store revenue."""
        sql = """
            SELECT DISTINCT f.id, f.name
            FROM franchise AS f
            JOIN user_role AS ur ON ur.object_id = f.id
            WHERE ur.role = 'franchisee' AND ur.user_id = %s
            ORDER BY f.id;
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                franchises = [Franchise(id=r[0], name=r[1]) for r in cur.fetchall()]
                for franchise in franchises:
                    self._enrich(cur, franchise)
            return franchises
        finally:
            self.manager.release_connection(conn)

    def get_franchise(self, franchise: Franchise) -> Optional[Franchise]:
        """
        Fill in name, admins and stores (with revenue) for a franchise known by id.

        Returns:
            The same Franchise, or None if no franchise has that id.
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT name FROM franchise WHERE id = %s;", (franchise.id,))
                row = cur.fetchone()
                if not row:
                    return None
                franchise.name = row[0]
                self._enrich(cur, franchise)
            return franchise
        finally:
            self.manager.release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete_franchise(self, franchise_id: int) -> None:
        """
        Delete a franchise together with its stores and franchisee grants.

        All three deletes run in one transaction.

        Raises:
            IntegrityError: Any step failed; the transaction was rolled back
                and nothing was deleted.
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                for statement in CASCADE_DELETE_STEPS:
                    cur.execute(statement, (franchise_id,))
            conn.commit()
            logger.info(f"Deleted franchise #{franchise_id}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete franchise #{franchise_id}, rolled back: {e}")
            raise IntegrityError("unable to delete franchise") from e
        finally:
            self.manager.release_connection(conn)

    def delete_store(self, franchise_id: int, store_id: int) -> bool:
        """
        Delete one store of a franchise.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM store WHERE franchise_id = %s AND id = %s;"
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (franchise_id, store_id))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted store #{store_id} of franchise {franchise_id}")
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete store #{store_id}: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _enrich(cur, franchise: Franchise) -> None:
        """Attach admins and revenue-bearing stores to a franchise."""
        cur.execute(ADMINS_SQL, (franchise.id,))
        franchise.admins = [
            FranchiseAdmin(id=r[0], name=r[1], email=r[2]) for r in cur.fetchall()
        ]
        cur.execute(STORES_WITH_REVENUE_SQL, (franchise.id,))
        franchise.stores = [
            Store(id=r[0], name=r[1], total_revenue=float(r[2])) for r in cur.fetchall()
        ]
