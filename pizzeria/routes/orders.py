from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from pizzeria.config import settings
from pizzeria.constants.order_status import PaymentMethod, PaymentStatus
from pizzeria.database import get_session
from pizzeria.dependencies.admin import require_admin
from pizzeria.models.order import Order
from pizzeria.models.user import User
from pizzeria.schemas.order_schemas import (
    CodOrderCreate,
    CodPaymentUpdate,
    OrderCancelRequest,
    OrderCreate,
    OrderReviewCreate,
    OrderStatusUpdate,
)
from pizzeria.services import order_service
from pizzeria.utils.money import format_amount
from pizzeria.utils.responses import success
from pizzeria.utils.token import get_current_user


router = APIRouter()


def serialize_order(order: Order, with_history: bool = True) -> dict:
    data = {
        "order_id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "items": [
            {
                "pizza_id": i.pizza_id,
                "name": i.name,
                "image": i.image,
                "size": i.size,
                "price": i.price,
                "quantity": i.quantity,
                "customizations": i.customizations,
                "total_price": i.total_price,
            }
            for i in order.items
        ],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "delivery_fee": order.delivery_fee,
        "discount": {
            "amount": order.discount_amount,
            "code": order.discount_code,
            "percentage": order.discount_percentage,
        },
        "total": order.total,
        "formatted_total": format_amount(order.total, settings.currency),
        "shipping_address": order.shipping_address,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "delivery_type": order.delivery_type,
        "estimated_delivery_time": order.estimated_delivery_time,
        "actual_delivery_time": order.actual_delivery_time,
        "customer_notes": order.customer_notes,
        "review": {
            "rating": order.review_rating,
            "comment": order.review_comment,
            "review_date": order.review_date,
        } if order.review_rating is not None else None,
        "cancellation": {
            "reason": order.cancel_reason,
            "cancelled_by": order.cancelled_by,
            "cancelled_at": order.cancelled_at,
            "refund_amount": order.refund_amount,
            "refund_status": order.refund_status,
        } if order.cancelled_at else None,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }

    if with_history:
        data["status_history"] = [
            {
                "status": e.status,
                "note": e.note,
                "timestamp": e.created_at,
                "updated_by": e.created_by,
            }
            for e in order.status_history
        ]

    if order.payment_method == PaymentMethod.cash_on_delivery.value:
        data["payment_instructions"] = order_service.COD_INSTRUCTIONS
        data["amount_to_be_paid"] = order.total
        if order.payment_status == PaymentStatus.pending.value:
            data["status_message"] = "Your order is being prepared. Payment will be collected upon delivery."
        elif order.payment_status == PaymentStatus.completed.value:
            data["status_message"] = "Order delivered and payment collected successfully."

    return data


def _created_response(order: Order, message: str) -> dict:
    data = {
        "order_id": order.id,
        "order_number": order.order_number,
        "total": order.total,
        "payment_method": order.payment_method,
        "estimated_delivery_time": order.estimated_delivery_time,
    }
    if order.payment_method == PaymentMethod.cash_on_delivery.value:
        data["amount_to_be_paid"] = order.total
        data["instructions"] = order_service.COD_INSTRUCTIONS
    return success(data, message)


# Place Order

@router.post("", status_code=201)
@router.post("/create", status_code=201)
def create_order(
    data: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.create_order(
        session,
        current_user.id,
        payment_method=data.payment_method,
        shipping_address_id=data.shipping_address_id,
        new_address=data.new_address,
        delivery_type=data.delivery_type,
        customer_notes=data.customer_notes,
        config=settings,
    )
    if order.payment_method == PaymentMethod.cash_on_delivery.value:
        return _created_response(order, "Cash on Delivery order created successfully")
    return _created_response(order, "Order created successfully")


@router.post("/create-cod", status_code=201)
def create_cod_order(
    data: CodOrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.create_order(
        session,
        current_user.id,
        payment_method=PaymentMethod.cash_on_delivery,
        shipping_address_id=data.shipping_address_id,
        new_address=data.new_address,
        delivery_type=data.delivery_type,
        customer_notes=data.customer_notes,
        config=settings,
    )
    return _created_response(order, "Cash on Delivery order created successfully")


# My Orders

@router.get("")
def list_orders(
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    result = order_service.list_user_orders(session, current_user.id, page, limit, status)
    return success(
        [serialize_order(o, with_history=False) for o in result["results"]],
        pagination=result["pagination"],
    )


# Admin: cash on delivery overview

@router.get("/cod-orders")
def list_cod_orders(
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    result = order_service.list_cod_orders(session, page, limit, status, payment_status)
    return success(
        [serialize_order(o, with_history=False) for o in result["results"]],
        pagination=result["pagination"],
        statistics=result["statistics"],
    )


@router.get("/{order_id}")
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.get_user_order(session, current_user.id, order_id)
    return success(serialize_order(order))


# Cancel / Review

@router.put("/{order_id}/cancel")
def cancel_order(
    order_id: int,
    data: OrderCancelRequest = OrderCancelRequest(),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.cancel_order(session, current_user.id, order_id, data.reason)
    return success(serialize_order(order), "Order cancelled successfully")


@router.post("/{order_id}/review")
def add_review(
    order_id: int,
    data: OrderReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.add_review(session, current_user.id, order_id, data.rating, data.comment)
    return success(serialize_order(order), "Review added successfully")


# Admin: lifecycle

@router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    order = order_service.update_status(session, order_id, data.status, data.note, created_by=f"admin:{admin.id}")
    return success(serialize_order(order), "Order status updated successfully")


@router.put("/{order_id}/cod-payment")
def update_cod_payment(
    order_id: int,
    data: CodPaymentUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    order = order_service.update_cod_payment(
        session, order_id, data.payment_status, data.note, created_by=f"admin:{admin.id}"
    )
    return success(serialize_order(order), "COD payment status updated successfully")
