# pizzeria/services/order_event_service.py

from datetime import datetime
from typing import Optional
from sqlmodel import Session
from pizzeria.models.order import Order
from pizzeria.models.order_event import OrderStatusEvent


def log_status_event(
    session: Session,
    order: Order,
    status: str,
    note: Optional[str] = None,
    created_by: str = "system",
) -> OrderStatusEvent:
    """
    Append-only status history for the order timeline
    """

    event = OrderStatusEvent(
        order_id=order.id,
        status=status,
        note=note or f"Status updated to {status}",
        created_by=created_by,
        created_at=datetime.utcnow(),
    )

    session.add(event)
    return event
