from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime


class Pizza(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=50)
    description: str = Field(max_length=200)
    image: str
    category: str = Field(default="Vegetarian", index=True)

    # [{"size": "Medium", "price": 1200, "diameter": "12 inch"}, ...]
    sizes: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    ingredients: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    is_vegetarian: bool = True
    is_vegan: bool = False
    is_gluten_free: bool = False
    spice_level: str = "Mild"

    rating_average: float = 0.0
    rating_count: int = 0

    is_available: bool = Field(default=True, index=True)
    is_featured: bool = False
    preparation_time: int = 15

    created_at: datetime = Field(default_factory=datetime.utcnow)

    def price_for(self, size: str) -> Optional[float]:
        for entry in self.sizes or []:
            if entry.get("size") == size:
                return entry.get("price")
        return None

    @property
    def min_price(self) -> Optional[float]:
        prices = [s["price"] for s in self.sizes or []]
        return min(prices) if prices else None
