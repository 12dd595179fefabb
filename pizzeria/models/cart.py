from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, List
from datetime import datetime


class Cart(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    # derived by the pricing engine, never written from request data
    subtotal: float = 0
    tax: float = 0
    delivery_fee: float = 0
    discount_amount: float = 0
    discount_code: Optional[str] = None
    discount_percentage: float = 0
    # set when a recalculation dropped the applied code
    discount_notice: Optional[str] = None
    total: float = 0
    item_count: int = 0

    is_active: bool = Field(default=True, index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["CartItem"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={"order_by": "CartItem.id", "cascade": "all, delete-orphan"},
    )


class CartItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: int = Field(foreign_key="cart.id", index=True)
    pizza_id: int = Field(foreign_key="pizza.id")

    # snapshot taken when the line was added
    name: str
    image: str
    description: str

    size: str
    price: float
    quantity: int = 1
    total_price: float = 0
    customizations: dict = Field(default_factory=dict, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=datetime.utcnow)

    cart: Optional[Cart] = Relationship(back_populates="items")
