from typing import Optional

from pydantic import Field

from pizzeria.constants.order_status import DeliveryType, OrderStatus, PaymentMethod
from pizzeria.schemas.address_schemas import AddressCreate
from pizzeria.schemas.base import RequestModel


class OrderCreate(RequestModel):
    shipping_address_id: Optional[int] = None
    new_address: Optional[AddressCreate] = None
    payment_method: PaymentMethod
    delivery_type: DeliveryType = DeliveryType.delivery
    customer_notes: Optional[str] = Field(default=None, max_length=500)


class CodOrderCreate(RequestModel):
    shipping_address_id: Optional[int] = None
    new_address: Optional[AddressCreate] = None
    delivery_type: DeliveryType = DeliveryType.delivery
    customer_notes: Optional[str] = Field(default=None, max_length=500)


class OrderCancelRequest(RequestModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class OrderReviewCreate(RequestModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)


class OrderStatusUpdate(RequestModel):
    status: OrderStatus
    note: Optional[str] = None


class CodPaymentUpdate(RequestModel):
    payment_status: str = Field(pattern="^(Completed|Failed)$")
    note: Optional[str] = None
