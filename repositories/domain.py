"""
repositories/domain.py
----------------------
Single entry point used by the HTTP layer.
Composes the per-table repositories over one ConnectionManager and exposes
the operations callers need by name.
"""

from typing import Optional

from config import ORDERS_PER_PAGE
from db.connection import ConnectionManager
from models.franchise import Franchise, Store
from models.menu import MenuItem
from models.order import Order, OrderPage
from models.user import User
from repositories.franchise_repo import FranchiseRepository
from repositories.menu_repo import MenuRepository
from repositories.order_repo import OrderRepository
from repositories.session_repo import SessionRepository
from repositories.user_repo import UserRepository
from security.passwords import PasswordHasher


class DomainRepository:
    """
    Facade over users, sessions, menu, orders and franchises.

    Construct one per process after the schema has been initialized, and
    pass it to whatever needs database access.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        hasher: Optional[PasswordHasher] = None,
        page_size: int = ORDERS_PER_PAGE,
    ):
        self.manager = manager
        self.users = UserRepository(manager, hasher)
        self.sessions = SessionRepository(manager)
        self.menu = MenuRepository(manager)
        self.orders = OrderRepository(manager, page_size)
        self.franchises = FranchiseRepository(manager)

    # ── Menu ──────────────────────────────────────────────

    def get_menu(self) -> list[MenuItem]:
        return self.menu.get_menu()

    def add_menu_item(self, item: MenuItem) -> MenuItem:
        return self.menu.add_menu_item(item)

    # ── Users ─────────────────────────────────────────────

    def add_user(self, user: User) -> User:
        return self.users.add_user(user)

    def authenticate(self, email: str, password: str) -> User:
        return self.users.authenticate(email, password)

    def get_user(self, user_id: int) -> User:
        return self.users.get_user(user_id)

    def update_user(
        self, user_id: int, email: Optional[str] = None, password: Optional[str] = None
    ) -> User:
        return self.users.update_user(user_id, email, password)

    # ── Sessions ──────────────────────────────────────────

    def create_session(self, user_id: int, issued_token: str) -> None:
        self.sessions.create(user_id, issued_token)

    def has_active_session(self, issued_token: str) -> bool:
        return self.sessions.is_active(issued_token)

    def end_session(self, issued_token: str) -> None:
        self.sessions.revoke(issued_token)

    def end_all_sessions(self, user_id: int) -> int:
        return self.sessions.revoke_all(user_id)

    # ── Orders ────────────────────────────────────────────

    def list_orders(self, user: User, page: int = 1) -> OrderPage:
        return self.orders.list_orders(user, page)

    def add_order(self, user: User, order: Order) -> Order:
        return self.orders.add_order(user, order)

    # ── Franchises ────────────────────────────────────────

    def list_franchises(self, requesting_user: Optional[User]) -> list[Franchise]:
        return self.franchises.list_franchises(requesting_user)

    def list_franchises_of_user(self, user_id: int) -> list[Franchise]:
        return self.franchises.list_franchises_of_user(user_id)

    def get_franchise(self, franchise: Franchise) -> Optional[Franchise]:
        return self.franchises.get_franchise(franchise)

    def create_franchise(self, franchise: Franchise) -> Franchise:
        return self.franchises.create_franchise(franchise)

    def delete_franchise(self, franchise_id: int) -> None:
        self.franchises.delete_franchise(franchise_id)

    def create_store(self, franchise_id: int, store: Store) -> Store:
        return self.franchises.create_store(franchise_id, store)

    def delete_store(self, franchise_id: int, store_id: int) -> bool:
        return self.franchises.delete_store(franchise_id, store_id)
