from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

from pizzeria.models.order_item import OrderItem
from pizzeria.models.order_event import OrderStatusEvent


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(unique=True, index=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    subtotal: float
    tax: float
    delivery_fee: float
    discount_amount: float = 0
    discount_code: Optional[str] = None
    discount_percentage: float = 0
    total: float

    shipping_address: dict = Field(default_factory=dict, sa_column=Column(JSON))

    payment_method: str
    payment_status: str = Field(default="Pending", index=True)
    paid_at: Optional[datetime] = None

    status: str = Field(default="Pending", index=True)
    delivery_type: str = Field(default="Delivery")
    estimated_delivery_time: datetime
    actual_delivery_time: Optional[datetime] = None

    customer_notes: Optional[str] = None

    review_rating: Optional[int] = None
    review_comment: Optional[str] = None
    review_date: Optional[datetime] = None

    cancel_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    refund_amount: Optional[float] = None
    refund_status: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.id"},
    )
    status_history: List["OrderStatusEvent"] = Relationship(
        sa_relationship_kwargs={"order_by": "OrderStatusEvent.id"},
    )
