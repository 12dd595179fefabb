# pizzeria/services/order_service.py
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from pizzeria.config import Settings, settings as default_settings
from pizzeria.constants.order_status import (
    CANCELLABLE_STATUSES,
    COD_ONLY_STATUSES,
    DeliveryType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
    can_transition,
)
from pizzeria.exceptions import (
    AlreadyReviewedError,
    EmptyCartError,
    InvalidTransitionError,
    NotFoundError,
    ServerError,
    UnavailableError,
    ValidationError,
)
from pizzeria.models.address import Address
from pizzeria.models.order import Order
from pizzeria.models.order_item import OrderItem
from pizzeria.models.pizza import Pizza
from pizzeria.schemas.address_schemas import AddressCreate
from pizzeria.services.cart_service import deactivate_cart, get_active_cart
from pizzeria.services.order_event_service import log_status_event
from pizzeria.services.order_number import next_order_number
from pizzeria.services.pricing import recalculate_cart
from pizzeria.utils.pagination import paginate

logger = logging.getLogger(__name__)

COD_INSTRUCTIONS = "Please have exact change ready. Payment will be collected upon delivery."


def is_refund_eligible(order: Order) -> bool:
    """Only money that was actually captured can be refunded; cash on delivery never is."""
    return (
        order.payment_method != PaymentMethod.cash_on_delivery.value
        and order.payment_status == PaymentStatus.completed.value
    )


def get_user_order(session: Session, user_id: int, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order or order.user_id != user_id:
        raise NotFoundError("Order not found", details={'order_id': order_id})
    return order


def _resolve_shipping_address(
    session: Session,
    user_id: int,
    shipping_address_id: Optional[int],
    new_address: Optional[AddressCreate],
    require_phone: bool = False,
) -> dict:
    if shipping_address_id is not None:
        address = session.get(Address, shipping_address_id)
        if not address or address.user_id != user_id:
            raise NotFoundError("Shipping address not found", details={'address_id': shipping_address_id})
        return address.snapshot()

    if new_address is not None:
        if require_phone and len(new_address.phone) < 10:
            raise ValidationError("Valid phone number is required for Cash on Delivery orders")
        return new_address.model_dump(exclude={"is_default", "address_type"})

    raise ValidationError("Shipping address is required")


def _set_status(session: Session, order: Order, status: OrderStatus, note: Optional[str], created_by: str):
    order.status = status.value
    order.updated_at = datetime.utcnow()
    if status == OrderStatus.delivered and not order.actual_delivery_time:
        order.actual_delivery_time = datetime.utcnow()
    log_status_event(session, order, status.value, note, created_by)


def create_order(
    session: Session,
    user_id: int,
    payment_method: PaymentMethod,
    shipping_address_id: Optional[int] = None,
    new_address: Optional[AddressCreate] = None,
    delivery_type: DeliveryType = DeliveryType.delivery,
    customer_notes: Optional[str] = None,
    config: Settings = default_settings,
) -> Order:
    """
    Turn the user's active cart into an order.

    Items and pricing are copied verbatim from the freshly recomputed cart,
    then the cart is emptied and deactivated in the same transaction.
    """
    payment_method = PaymentMethod(payment_method)
    delivery_type = DeliveryType(delivery_type)
    is_cod = payment_method == PaymentMethod.cash_on_delivery

    if is_cod and delivery_type == DeliveryType.pickup:
        raise ValidationError("Cash on Delivery is only available for delivery orders")

    cart = get_active_cart(session, user_id, config)
    if not cart.items:
        raise EmptyCartError(user_id)

    recalculate_cart(cart, config)

    if is_cod and cart.total < config.cod_minimum_amount:
        raise ValidationError(
            f"Minimum order amount for Cash on Delivery is {config.currency} {config.cod_minimum_amount:g}"
        )

    if delivery_type == DeliveryType.delivery or shipping_address_id is not None or new_address is not None:
        shipping_address = _resolve_shipping_address(
            session, user_id, shipping_address_id, new_address, require_phone=is_cod
        )
    else:
        shipping_address = {}

    for item in cart.items:
        pizza = session.get(Pizza, item.pizza_id)
        if not pizza or not pizza.is_available:
            raise UnavailableError(f"{item.name} is no longer available", details={'pizza_id': item.pizza_id})

    now = datetime.utcnow()
    order = Order(
        order_number=next_order_number(session, config),
        user_id=user_id,
        subtotal=cart.subtotal,
        tax=cart.tax,
        delivery_fee=cart.delivery_fee,
        discount_amount=cart.discount_amount,
        discount_code=cart.discount_code,
        discount_percentage=cart.discount_percentage,
        total=cart.total,
        shipping_address=shipping_address,
        payment_method=payment_method.value,
        # card and wallet payments are captured by the gateway before checkout
        payment_status=(PaymentStatus.pending if is_cod else PaymentStatus.completed).value,
        paid_at=None if is_cod else now,
        status=OrderStatus.pending.value,
        delivery_type=delivery_type.value,
        estimated_delivery_time=now + timedelta(minutes=config.estimated_delivery_minutes),
        customer_notes=customer_notes or "",
        items=[
            OrderItem(
                pizza_id=item.pizza_id,
                name=item.name,
                image=item.image,
                size=item.size,
                price=item.price,
                quantity=item.quantity,
                total_price=item.total_price,
                customizations=dict(item.customizations or {}),
            )
            for item in cart.items
        ],
    )
    try:
        session.add(order)
        session.flush()

        log_status_event(session, order, OrderStatus.pending.value, "Order placed successfully", "customer")
        deactivate_cart(session, cart, config)

        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to persist order for user {user_id}: {e}")
        raise ServerError("Failed to create order", details={'user_id': user_id}) from e
    session.refresh(order)

    logger.info(
        f"Order {order.order_number} created from cart {cart.id} "
        f"for user {user_id}, total {order.total} ({order.payment_method})"
    )
    return order


def list_user_orders(
    session: Session,
    user_id: int,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
) -> dict:
    query = select(Order).where(Order.user_id == user_id)
    if status:
        query = query.where(Order.status == status)
    return paginate(
        session=session,
        query=query.order_by(Order.created_at.desc(), Order.id.desc()),
        page=page,
        limit=limit,
    )


def list_cod_orders(
    session: Session,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
) -> dict:
    cod = PaymentMethod.cash_on_delivery.value
    query = select(Order).where(Order.payment_method == cod)
    if status:
        query = query.where(Order.status == status)
    if payment_status:
        query = query.where(Order.payment_status == payment_status)

    result = paginate(
        session=session,
        query=query.order_by(Order.created_at.desc(), Order.id.desc()),
        page=page,
        limit=limit,
    )

    def _sum_for(payment: str) -> float:
        return session.exec(
            select(func.coalesce(func.sum(Order.total), 0))
            .where(Order.payment_method == cod, Order.payment_status == payment)
        ).one()

    result["statistics"] = {
        "total_cod_collected": _sum_for(PaymentStatus.completed.value),
        "pending_cod_amount": _sum_for(PaymentStatus.pending.value),
    }
    return result


def cancel_order(session: Session, user_id: int, order_id: int, reason: Optional[str] = None) -> Order:
    order = get_user_order(session, user_id, order_id)

    if OrderStatus(order.status) not in CANCELLABLE_STATUSES:
        raise InvalidTransitionError(
            "Order cannot be cancelled at this stage",
            details={'order_id': order_id, 'status': order.status},
        )

    refundable = is_refund_eligible(order)
    order.cancel_reason = reason or "Cancelled by customer"
    order.cancelled_by = "Customer"
    order.cancelled_at = datetime.utcnow()
    order.refund_amount = order.total if refundable else 0
    order.refund_status = (RefundStatus.pending if refundable else RefundStatus.not_applicable).value

    _set_status(session, order, OrderStatus.cancelled, order.cancel_reason, "customer")
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.order_number} cancelled by user {user_id}, refund {order.refund_status}")
    return order


def update_status(
    session: Session,
    order_id: int,
    status: OrderStatus,
    note: Optional[str] = None,
    created_by: str = "admin",
) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order not found", details={'order_id': order_id})

    target = OrderStatus(status)
    if not can_transition(order.status, target):
        raise InvalidTransitionError(
            f"Cannot change order status from '{order.status}' to '{target.value}'",
            details={'order_id': order_id, 'from': order.status, 'to': target.value},
        )

    if target in COD_ONLY_STATUSES and order.payment_method != PaymentMethod.cash_on_delivery.value:
        raise InvalidTransitionError(
            f"'{target.value}' only applies to Cash on Delivery orders",
            details={'order_id': order_id},
        )

    if target == OrderStatus.refunded:
        if not is_refund_eligible(order):
            raise InvalidTransitionError("Order is not eligible for a refund", details={'order_id': order_id})
        order.payment_status = PaymentStatus.refunded.value
        order.refund_amount = order.total
        order.refund_status = RefundStatus.processed.value

    if target == OrderStatus.cancelled:
        refundable = is_refund_eligible(order)
        order.cancel_reason = note or "Cancelled by restaurant"
        order.cancelled_by = "Admin"
        order.cancelled_at = datetime.utcnow()
        order.refund_amount = order.total if refundable else 0
        order.refund_status = (RefundStatus.pending if refundable else RefundStatus.not_applicable).value

    _set_status(session, order, target, note, created_by)
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.order_number} moved to {order.status} by {created_by}")
    return order


def update_cod_payment(
    session: Session,
    order_id: int,
    payment_status: str,
    note: Optional[str] = None,
    created_by: str = "admin",
) -> Order:
    order = session.get(Order, order_id)
    if not order or order.payment_method != PaymentMethod.cash_on_delivery.value:
        raise NotFoundError("COD order not found", details={'order_id': order_id})

    if payment_status == PaymentStatus.completed.value:
        target = OrderStatus.delivered
    elif payment_status == PaymentStatus.failed.value:
        target = OrderStatus.payment_failed
    else:
        raise ValidationError("Invalid payment status for COD")

    if order.status != target.value and not can_transition(order.status, target):
        raise InvalidTransitionError(
            f"Cannot record COD payment while order is '{order.status}'",
            details={'order_id': order_id, 'status': order.status},
        )

    order.payment_status = payment_status
    order.paid_at = datetime.utcnow() if target == OrderStatus.delivered else None

    if order.status != target.value:
        _set_status(session, order, target, note or f"COD payment {payment_status.lower()}", created_by)
    else:
        order.updated_at = datetime.utcnow()

    session.commit()
    session.refresh(order)

    logger.info(f"COD payment for order {order.order_number} marked {payment_status}")
    return order


def add_review(
    session: Session,
    user_id: int,
    order_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Order:
    order = get_user_order(session, user_id, order_id)

    if order.status != OrderStatus.delivered.value:
        raise InvalidTransitionError(
            "Only delivered orders can be reviewed",
            details={'order_id': order_id, 'status': order.status},
        )

    if order.review_rating is not None:
        raise AlreadyReviewedError(order_id)

    if rating < 1 or rating > 5:
        raise ValidationError("Rating must be between 1 and 5")

    order.review_rating = int(rating)
    order.review_comment = comment or ""
    order.review_date = datetime.utcnow()
    order.updated_at = datetime.utcnow()

    session.add(order)
    session.commit()
    session.refresh(order)
    return order
