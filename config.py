"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "pizza")
DB_USER: str = os.getenv("DB_USER", "pizza_user")
DB_PASS: str = os.getenv("DB_PASS", "")

# Database used to check for / create DB_NAME before it exists
DB_MAINTENANCE_NAME: str = os.getenv("DB_MAINTENANCE_NAME", "postgres")

# ── Connection pool ───────────────────────────────────────
DB_CONNECT_TIMEOUT: int = int(os.getenv("DB_CONNECT_TIMEOUT", "10"))
DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "10"))
DB_ACQUIRE_TIMEOUT: float = float(os.getenv("DB_ACQUIRE_TIMEOUT", "30"))

# ── Orders ────────────────────────────────────────────────
ORDERS_PER_PAGE: int = int(os.getenv("ORDERS_PER_PAGE", "10"))

# ── Security ──────────────────────────────────────────────
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

# ── Default admin (seeded when the database is first created) ──
FIRST_ADMIN_NAME: str = os.getenv("FIRST_ADMIN_NAME", "常用名字")
FIRST_ADMIN_EMAIL: str = os.getenv("FIRST_ADMIN_EMAIL", "a@jwt.com")
FIRST_ADMIN_PASSWORD: str = os.getenv("FIRST_ADMIN_PASSWORD", "admin")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
LOG_DATE_FORMAT: str = os.getenv("LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")
# Also write logs to this file when set
LOG_FILE: str = os.getenv("LOG_FILE", "")
