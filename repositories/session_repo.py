"""
repositories/session_repo.py
----------------------------
Data access layer for login sessions.

Bearer tokens are issued and signed elsewhere. This layer only keeps the
signature segment of each issued token in the `auth` table: a row present
means the session is logged in, deleting it logs the session out.
"""

from typing import Optional

from db.connection import ConnectionManager
from utils.logger import get_logger

logger = get_logger(__name__)


def signature_of(issued_token: Optional[str]) -> str:
    """
    Extract the signature segment of a ``<header>.<payload>.<signature>`` token.

    Returns an empty string when the token has fewer than three segments,
    which never matches a stored session.
    """
    if not issued_token:
        return ""
    parts = issued_token.split(".")
    if len(parts) > 2:
        return parts[2]
    return ""


class SessionRepository:
    """Repository for the auth (session) table."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def create(self, user_id: int, issued_token: str) -> None:
        """
        Record a login for `user_id`.
        Not deduplicated: call once per issued token.
        """
        sql = "INSERT INTO auth (token, user_id) VALUES (%s, %s);"
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (signature_of(issued_token), user_id))
            conn.commit()
            logger.info(f"Created session for user {user_id}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to create session for user {user_id}: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    def is_active(self, issued_token: str) -> bool:
        """True iff a session exists for the token's signature."""
        signature = signature_of(issued_token)
        if not signature:
            return False
        sql = "SELECT user_id FROM auth WHERE token = %s LIMIT 1;"
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (signature,))
                return cur.fetchone() is not None
        finally:
            self.manager.release_connection(conn)

    def revoke(self, issued_token: str) -> None:
        """Delete the session for the token. Unknown tokens are ignored."""
        sql = "DELETE FROM auth WHERE token = %s;"
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (signature_of(issued_token),))
                revoked = cur.rowcount
            conn.commit()
            if revoked:
                logger.info("Session revoked.")
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to revoke session: {e}")
            raise
        finally:
            self.manager.release_connection(conn)

    def revoke_all(self, user_id: int) -> int:
        """
        Delete every session of a user.

        Returns:
            Number of sessions removed.
        """
        sql = "DELETE FROM auth WHERE user_id = %s;"
        conn = self.manager.get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                revoked = cur.rowcount
            conn.commit()
            logger.info(f"Revoked {revoked} session(s) for user {user_id}")
            return revoked
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to revoke sessions for user {user_id}: {e}")
            raise
        finally:
            self.manager.release_connection(conn)
