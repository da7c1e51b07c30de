"""
models/menu.py
--------------
Domain model for the global menu catalog.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class MenuItem:
    title: str
    description: str
    image: str
    price: float
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "price": self.price,
        }
