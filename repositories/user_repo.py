"""
repositories/user_repo.py
--------------------------
Data access layer for users and their role assignments.
All SQL queries related to the `users` and `user_role` tables live here.
"""

from typing import Optional

from psycopg2 import errors

from db.connection import ConnectionManager
from db.errors import IntegrityError, NotFoundError
from models.role import Franchisee, Role, role_from_row
from models.user import User
from security.passwords import PasswordHasher
from utils.logger import get_logger

logger = get_logger(__name__)

# Same error for unknown email and wrong password, so callers cannot tell which accounts exist.
UNKNOWN_USER = "unknown user"


class UserRepository:
    """Repository for CRUD operations on the users and user_role tables."""

    def __init__(self, manager: ConnectionManager, hasher: Optional[PasswordHasher] = None):
        self.manager = manager
        self.hasher = hasher or PasswordHasher()

    # ── CREATE ────────────────────────────────────────────

    def add_user(self, user: User) -> User:
        """
        Register a user with their roles in one transaction.

        Args:
            user: User with a plaintext password. Franchisee roles may name
                their franchise instead of giving its id.

        Returns:
            A new User with `id` set, franchisee roles resolved to ids,
            and no password.

        Raises:
            NotFoundError: A franchisee role names an unknown franchise.
            IntegrityError: The email is already registered.
        """
        if not user.password:
            raise ValueError("password is required")
        digest = self.hasher.hash(user.password)
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO users (name, email, password) VALUES (%s, %s, %s) RETURNING id;",
                    (user.name, user.email, digest),
                )
                user_id = cur.fetchone()[0]
                roles = [self._resolve_role(cur, role) for role in user.roles]
                for role in roles:
                    object_id = role.franchise_id if isinstance(role, Franchisee) else None
                    cur.execute(
                        "INSERT INTO user_role (user_id, role, object_id) VALUES (%s, %s, %s);",
                        (user_id, role.kind, object_id),
                    )
            conn.commit()
            logger.info(f"Added user #{user_id} with roles {[r.kind for r in roles]}")
            return User(id=user_id, name=user.name, email=user.email, roles=roles)
        except errors.UniqueViolation as e:
            conn.rollback()
            logger.warning(f"Rejected duplicate email for new user: {e}")
            raise IntegrityError("email already registered") from e
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add user: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def authenticate(self, email: str, password: str) -> User:
        """
        Look up a user by email and check the password.

        Returns:
            The User with roles and no password.

        Raises:
            NotFoundError: Unknown email or wrong password (same message for both).
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT id, name, email, password FROM users WHERE email = %s;",
                    (email,),
                )
                row = cur.fetchone()
                if not row or not self.hasher.verify(password, row[3]):
                    logger.info("Authentication failed.")
                    raise NotFoundError(UNKNOWN_USER)
                roles = self._fetch_roles(cur, row[0])
            return User(id=row[0], name=row[1], email=row[2], roles=roles)
        finally:
            self.manager.release_connection(conn)

    def get_user(self, user_id: int) -> User:
        """
        Fetch a user with roles by id.

        Raises:
            NotFoundError: No such user.
        """
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                user = self._fetch_user(cur, user_id)
            if user is None:
                raise NotFoundError(UNKNOWN_USER)
            return user
        finally:
            self.manager.release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update_user(
        self, user_id: int, email: Optional[str] = None, password: Optional[str] = None
    ) -> User:
        """
        Change a user's email and/or password. Fields left as None are untouched;
        with neither given nothing is written and the current user is returned.

        Raises:
            NotFoundError: No such user.
            IntegrityError: The new email belongs to another user.
        """
        assignments: list[str] = []
        params: list = []
        if password:
            assignments.append("password = %s")
            params.append(self.hasher.hash(password))
        if email:
            assignments.append("email = %s")
            params.append(email)

        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                if assignments:
                    cur.execute(
                        "UPDATE users SET " + ", ".join(assignments) + " WHERE id = %s;",
                        params + [user_id],
                    )
                user = self._fetch_user(cur, user_id)
            if user is None:
                raise NotFoundError(UNKNOWN_USER)
            conn.commit()
            if assignments:
                logger.info(f"Updated user #{user_id}")
            return user
        except errors.UniqueViolation as e:
            conn.rollback()
            logger.warning(f"Rejected duplicate email for user #{user_id}: {e}")
            raise IntegrityError("email already registered") from e
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update user #{user_id}: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_user(self, cur, user_id: int) -> Optional[User]:
        cur.execute("SELECT id, name, email FROM users WHERE id = %s;", (user_id,))
        row = cur.fetchone()
        if not row:
            return None
        return User(id=row[0], name=row[1], email=row[2], roles=self._fetch_roles(cur, row[0]))

    @staticmethod
    def _fetch_roles(cur, user_id: int) -> list[Role]:
        cur.execute(
            "SELECT role, object_id FROM user_role WHERE user_id = %s ORDER BY id;",
            (user_id,),
        )
        return [role_from_row(r[0], r[1]) for r in cur.fetchall()]

    @staticmethod
    def _resolve_role(cur, role: Role) -> Role:
        """
        Look up the franchise of a franchisee role, by id when given, else by name.

        Raises:
            NotFoundError: No such franchise.
        """
        if not isinstance(role, Franchisee):
            return role
        if role.franchise_id is not None:
            cur.execute("SELECT id FROM franchise WHERE id = %s;", (role.franchise_id,))
            wanted = role.franchise_id
        else:
            cur.execute("SELECT id FROM franchise WHERE name = %s;", (role.franchise,))
            wanted = role.franchise
        row = cur.fetchone()
        if not row:
            raise NotFoundError(f"unknown franchise {wanted}")
        return Franchisee(franchise_id=row[0])
