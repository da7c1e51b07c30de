"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool for connection reuse across threads,
with a bounded semaphore so callers wait (up to a timeout) for a free
connection instead of failing immediately when the pool is exhausted.
"""

import threading
from typing import Optional

import psycopg2
from psycopg2 import pool, extensions

import config
from db.errors import TransportError
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """
    Owns the connection pool for one database.

    Every repository operation borrows a connection with `get_connection()`
    and hands it back with `release_connection()` in a ``finally`` block.
    Connections are never shared between operations.
    """

    def __init__(
        self,
        host: str = config.DB_HOST,
        port: int = config.DB_PORT,
        dbname: str = config.DB_NAME,
        user: str = config.DB_USER,
        password: str = config.DB_PASS,
        maintenance_dbname: str = config.DB_MAINTENANCE_NAME,
        connect_timeout: int = config.DB_CONNECT_TIMEOUT,
        min_conn: int = config.DB_POOL_MIN,
        max_conn: int = config.DB_POOL_MAX,
        acquire_timeout: float = config.DB_ACQUIRE_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.dbname = dbname
        self.user = user
        self.password = password
        self.maintenance_dbname = maintenance_dbname
        self.connect_timeout = connect_timeout
        self.min_conn = min_conn
        self.max_conn = max_conn
        self.acquire_timeout = acquire_timeout
        self._pool: Optional[pool.ThreadedConnectionPool] = None
        self._slots = threading.BoundedSemaphore(max_conn)

    def _params(self, dbname: str) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "dbname": dbname,
            "user": self.user,
            "password": self.password,
            "connect_timeout": self.connect_timeout,
        }

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """
        Initialize the connection pool on the target database.

        Raises:
            TransportError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        try:
            self._pool = pool.ThreadedConnectionPool(
                self.min_conn, self.max_conn, **self._params(self.dbname)
            )
            logger.info(f"Connection pool opened on database '{self.dbname}'.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to open connection pool: {e}")
            raise TransportError(f"unable to connect to database '{self.dbname}'") from e

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Connection pool closed.")

    def get_connection(self):
        """
        Borrow a connection from the pool, waiting up to `acquire_timeout` seconds.

        Returns:
            A psycopg2 connection object.

        Raises:
            RuntimeError: If the pool has not been opened.
            TransportError: If no connection became available in time,
                or a new connection could not be established.
        """
        if self._pool is None:
            raise RuntimeError("Connection pool not opened. Call open() first.")
        if not self._slots.acquire(timeout=self.acquire_timeout):
            logger.warning(f"No connection available after {self.acquire_timeout}s.")
            raise TransportError("timed out waiting for a database connection")
        try:
            return self._pool.getconn()
        except (psycopg2.OperationalError, pool.PoolError) as e:
            self._slots.release()
            logger.error(f"Failed to acquire connection: {e}")
            raise TransportError("unable to connect to database") from e

    def release_connection(self, conn) -> None:
        """
        Return a connection to the pool.
        An unfinished transaction is rolled back first so the next borrower
        starts clean; a broken connection is discarded. If the pool was closed
        while the connection was out, the connection is closed and its slot freed.
        """
        if self._pool is None:
            try:
                if not conn.closed:
                    conn.close()
            finally:
                self._slots.release()
            return
        broken = bool(conn.closed)
        if not broken and conn.get_transaction_status() != extensions.TRANSACTION_STATUS_IDLE:
            try:
                conn.rollback()
            except psycopg2.Error as e:
                logger.warning(f"Discarding connection after failed rollback: {e}")
                broken = True
        try:
            self._pool.putconn(conn, close=broken)
        finally:
            self._slots.release()

    def connect_server(self):
        """
        Open a standalone autocommit connection to the maintenance database.
        Used before the target database exists, so it bypasses the pool.
        The caller closes it.

        Raises:
            TransportError: If the server is unreachable.
        """
        try:
            conn = psycopg2.connect(**self._params(self.maintenance_dbname))
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to connect to database server {self.host}:{self.port}: {e}")
            raise TransportError(f"unable to connect to database server {self.host}:{self.port}") from e
        conn.autocommit = True
        return conn
