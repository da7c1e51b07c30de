"""
models/order.py
---------------
Domain models for diner orders.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class OrderItem:
    """
    One line of an order. Description and price are copied at order time
    and do not follow later edits of the menu item.
    """
    menu_id: int
    description: Optional[str] = None
    price: Optional[float] = None
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "menuId": self.menu_id,
            "description": self.description,
            "price": self.price,
        }


@dataclass
class Order:
    """
    Attributes:
        id: Database primary key (None for new records).
        franchise_id: Franchise the store belongs to.
        store_id: Store the order was placed at.
        items: Order lines.
        diner_id: Ordering user; set by the repository.
        date: Server timestamp assigned on insert.
    """
    franchise_id: int
    store_id: int
    items: list[OrderItem] = field(default_factory=list)
    id: Optional[int] = None
    diner_id: Optional[int] = None
    date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "franchiseId": self.franchise_id,
            "storeId": self.store_id,
            "date": self.date.isoformat() if self.date else None,
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class OrderPage:
    """One page of a diner's order history."""
    diner_id: int
    orders: list[Order]
    page: int

    def to_dict(self) -> dict:
        return {
            "dinerId": self.diner_id,
            "orders": [o.to_dict() for o in self.orders],
            "page": self.page,
        }
