"""
models/role.py
--------------
Role assignments held by a user.

A role is one of three variants:
    Diner                 - ordering customer
    Franchisee(franchise) - manager of one franchise
    Admin                 - global administrator

In the `user_role` table the variant is stored as a lowercase tag and the
franchise id goes in `object_id`, which is NULL for every other variant.
"""

from dataclasses import dataclass
from typing import Optional, Union

DINER = "diner"
FRANCHISEE = "franchisee"
ADMIN = "admin"

ROLE_KINDS = (DINER, FRANCHISEE, ADMIN)


@dataclass(frozen=True)
class Diner:
    kind = DINER


@dataclass(frozen=True)
class Admin:
    kind = ADMIN


@dataclass(frozen=True)
class Franchisee:
    """
    Franchise manager role.

    Attributes:
        franchise_id: Id of the managed franchise.
        franchise: Franchise name; only used on input, when the caller knows
            the franchise by name. The repository resolves it to an id.
    """
    franchise_id: Optional[int] = None
    franchise: Optional[str] = None

    kind = FRANCHISEE


Role = Union[Diner, Franchisee, Admin]


def role_from_row(kind: str, object_id: Optional[int]) -> Role:
    """Build a role variant from a `user_role` row."""
    if kind == DINER:
        return Diner()
    if kind == ADMIN:
        return Admin()
    if kind == FRANCHISEE:
        return Franchisee(franchise_id=object_id)
    raise ValueError(f"Unknown role '{kind}'")


def role_from_dict(data: dict) -> Role:
    """
    Build a role from its JSON shape, e.g. ``{"role": "franchisee", "object": "pizzaPocket"}``.
    Accepts ``objectId`` (franchise id) or ``object`` (franchise name) for franchisees.
    """
    kind = data.get("role")
    if kind == FRANCHISEE:
        return Franchisee(franchise_id=data.get("objectId"), franchise=data.get("object"))
    return role_from_row(kind, None)


def role_to_dict(role: Role) -> dict:
    if isinstance(role, Franchisee):
        return {"role": role.kind, "objectId": role.franchise_id}
    return {"role": role.kind}
