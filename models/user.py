"""
models/user.py
--------------
Domain model for registered users.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.role import Role, role_from_dict, role_to_dict


@dataclass
class User:
    """
    Represents a user and the roles they hold.

    Attributes:
        id: Database primary key (None for new records).
        name: Display name.
        email: Unique login email.
        password: Plaintext password on input only. Users returned by the
            repositories always have this set to None.
        roles: Role assignments held by the user.
    """
    name: str
    email: str
    password: Optional[str] = None
    roles: list[Role] = field(default_factory=list)
    id: Optional[int] = None

    def is_role(self, kind: str) -> bool:
        """Returns True if the user holds at least one role of this kind."""
        return any(role.kind == kind for role in self.roles)

    def to_dict(self) -> dict:
        """JSON shape used by the HTTP layer. Never includes the password."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": [role_to_dict(r) for r in self.roles],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data.get("id"),
            name=data["name"],
            email=data["email"],
            password=data.get("password"),
            roles=[role_from_dict(r) for r in data.get("roles", [])],
        )
