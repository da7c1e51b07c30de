"""
models/franchise.py
-------------------
Domain models for franchises and their stores.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class FranchiseAdmin:
    """A user holding the franchisee role for a franchise."""
    email: str
    id: Optional[int] = None
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass
class Store:
    """
    A store belonging to exactly one franchise.

    Attributes:
        total_revenue: Sum of all order item prices sold at this store.
            Only filled in for privileged listings; None otherwise.
    """
    name: str
    franchise_id: Optional[int] = None
    id: Optional[int] = None
    total_revenue: Optional[float] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name}
        if self.franchise_id is not None:
            data["franchiseId"] = self.franchise_id
        if self.total_revenue is not None:
            data["totalRevenue"] = self.total_revenue
        return data


@dataclass
class Franchise:
    """
    A franchise and its stores.

    Attributes:
        admins: Franchisee users of this franchise. None when the listing
            was produced for a caller not allowed to see them.
    """
    name: str
    id: Optional[int] = None
    admins: Optional[list[FranchiseAdmin]] = None
    stores: list[Store] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name}
        if self.admins is not None:
            data["admins"] = [a.to_dict() for a in self.admins]
        data["stores"] = [s.to_dict() for s in self.stores]
        return data
