"""
main.py
-------
Process bootstrap for the pizza persistence layer.

Responsibilities:
    - Build the connection manager and initialize the database schema.
    - Build the DomainRepository handed to the HTTP layer.
    - Close the connection pool on shutdown.
"""

from contextlib import contextmanager
from typing import Iterator

from db.connection import ConnectionManager
from db.init_db import initialize_database
from repositories.domain import DomainRepository
from security.passwords import PasswordHasher
from utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def open_repository() -> Iterator[DomainRepository]:
    """
    Yield a ready DomainRepository for the lifetime of the process.

    Usage:
        with open_repository() as repo:
            serve(repo)
    """
    manager = ConnectionManager()
    hasher = PasswordHasher()
    created = initialize_database(manager, hasher)
    logger.info("Database created and seeded." if created else "Database ready.")
    try:
        yield DomainRepository(manager, hasher)
    finally:
        manager.close()


def main() -> None:
    with open_repository() as repo:
        menu = repo.get_menu()
        logger.info(f"Persistence layer ready, {len(menu)} menu item(s) available.")


if __name__ == "__main__":
    main()
