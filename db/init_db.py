"""
db/init_db.py
-------------
Creates the database and its schema (tables) if they do not already exist,
and seeds the first administrator when the database is brand new.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from typing import Optional

from psycopg2 import errors, sql

from config import FIRST_ADMIN_EMAIL, FIRST_ADMIN_NAME, FIRST_ADMIN_PASSWORD
from db.connection import ConnectionManager
from models.role import Admin
from models.user import User
from repositories.user_repo import UserRepository
from security.passwords import PasswordHasher
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users table: registered accounts, password is a bcrypt digest
CREATE TABLE IF NOT EXISTS users (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(200) NOT NULL,
    email           VARCHAR(200) UNIQUE NOT NULL,
    password        VARCHAR(200) NOT NULL
);

-- Franchises table: franchise names are unique
CREATE TABLE IF NOT EXISTS franchise (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(200) UNIQUE NOT NULL
);

-- Role assignments: object_id is the franchise of a franchisee, NULL otherwise
CREATE TABLE IF NOT EXISTS user_role (
    id              SERIAL PRIMARY KEY,
    user_id         INT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    role            VARCHAR(20) NOT NULL CHECK (role IN ('diner', 'franchisee', 'admin')),
    object_id       INT REFERENCES franchise(id),
    CHECK ((role = 'franchisee') = (object_id IS NOT NULL))
);

-- Stores table: deleted explicitly before their franchise
CREATE TABLE IF NOT EXISTS store (
    id              SERIAL PRIMARY KEY,
    franchise_id    INT NOT NULL REFERENCES franchise(id),
    name            VARCHAR(200) NOT NULL
);

-- Menu table: global catalog
CREATE TABLE IF NOT EXISTS menu (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(200) NOT NULL,
    description     TEXT NOT NULL,
    image           VARCHAR(1000) NOT NULL,
    price           NUMERIC(12,8) NOT NULL
);

-- Orders table: historical, no foreign keys to franchise or store
CREATE TABLE IF NOT EXISTS diner_order (
    id              SERIAL PRIMARY KEY,
    diner_id        INT NOT NULL REFERENCES users(id),
    franchise_id    INT NOT NULL,
    store_id        INT NOT NULL,
    date            TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Order items: description and price copied from the menu at order time
CREATE TABLE IF NOT EXISTS order_item (
    id              SERIAL PRIMARY KEY,
    order_id        INT NOT NULL REFERENCES diner_order(id) ON DELETE CASCADE,
    menu_id         INT NOT NULL,
    description     TEXT,
    price           NUMERIC(12,8) NOT NULL
);

-- Sessions table: signature of each issued token that is logged in
CREATE TABLE IF NOT EXISTS auth (
    id              SERIAL PRIMARY KEY,
    token           VARCHAR(512) NOT NULL,
    user_id         INT NOT NULL REFERENCES users(id) ON DELETE CASCADE
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_user_role_user ON user_role(user_id);
CREATE INDEX IF NOT EXISTS idx_user_role_object ON user_role(object_id) WHERE object_id IS NOT NULL;
CREATE INDEX IF NOT EXISTS idx_store_franchise ON store(franchise_id);
CREATE INDEX IF NOT EXISTS idx_order_diner ON diner_order(diner_id);
CREATE INDEX IF NOT EXISTS idx_order_store ON diner_order(store_id);
CREATE INDEX IF NOT EXISTS idx_order_item_order ON order_item(order_id);
CREATE INDEX IF NOT EXISTS idx_auth_token ON auth(token);
"""


def ensure_database(manager: ConnectionManager) -> bool:
    """
    Create the target database on the server if it is missing.

    Returns:
        True if the database already existed.
    """
    conn = manager.connect_server()
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1 FROM pg_database WHERE datname = %s;", (manager.dbname,))
            if cur.fetchone():
                logger.info(f"Database '{manager.dbname}' exists.")
                return True
            try:
                cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(manager.dbname)))
            except errors.DuplicateDatabase:
                # Another process created it between the check and the create.
                logger.info(f"Database '{manager.dbname}' was created concurrently.")
                return True
            logger.info(f"Created database '{manager.dbname}'.")
            return False
    finally:
        conn.close()


def create_tables(manager: ConnectionManager) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = manager.get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        manager.release_connection(conn)


def seed_admin(manager: ConnectionManager, hasher: Optional[PasswordHasher] = None) -> User:
    """Register the default administrator account."""
    admin = UserRepository(manager, hasher).add_user(
        User(
            name=FIRST_ADMIN_NAME,
            email=FIRST_ADMIN_EMAIL,
            password=FIRST_ADMIN_PASSWORD,
            roles=[Admin()],
        )
    )
    logger.info(f"Seeded default admin {admin.email} as user #{admin.id}")
    return admin


def initialize_database(
    manager: ConnectionManager, hasher: Optional[PasswordHasher] = None
) -> bool:
    """
    Make the database ready for use: create it if missing, open the pool,
    create the tables, and seed the default admin.

    The admin is seeded only when this call created the database, so it is
    never re-added on later restarts.

    Returns:
        True if the database was created by this call.
    """
    existed = ensure_database(manager)
    manager.open()
    create_tables(manager)
    if not existed:
        seed_admin(manager, hasher)
    return not existed


def drop_database(manager: ConnectionManager) -> None:
    """Close the pool and drop the target database. Used by test teardown."""
    manager.close()
    conn = manager.connect_server()
    try:
        with conn.cursor() as cur:
            cur.execute(
                sql.SQL("DROP DATABASE IF EXISTS {}").format(sql.Identifier(manager.dbname))
            )
        logger.info(f"Dropped database '{manager.dbname}'.")
    finally:
        conn.close()


if __name__ == "__main__":
    db_manager = ConnectionManager()
    created = initialize_database(db_manager)
    db_manager.close()
    print("✅ Database created." if created else "✅ Database schema is up to date.")
