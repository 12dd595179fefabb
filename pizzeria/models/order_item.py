from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from pizzeria.models.order import Order


class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    pizza_id: int = Field(foreign_key="pizza.id")

    name: str
    image: str
    size: str
    price: float
    quantity: int
    total_price: float
    customizations: dict = Field(default_factory=dict, sa_column=Column(JSON))

    order: Optional["Order"] = Relationship(back_populates="items")
