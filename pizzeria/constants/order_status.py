from enum import Enum


class OrderStatus(str, Enum):
    pending = "Pending"
    confirmed = "Confirmed"
    preparing = "Preparing"
    ready_for_pickup = "Ready for Pickup"
    out_for_delivery = "Out for Delivery"
    delivered = "Delivered"
    cancelled = "Cancelled"
    refunded = "Refunded"
    payment_failed = "Payment Failed"


class PaymentMethod(str, Enum):
    card = "Card"
    cash_on_delivery = "Cash on Delivery"
    digital_wallet = "Digital Wallet"


class PaymentStatus(str, Enum):
    pending = "Pending"
    processing = "Processing"
    completed = "Completed"
    failed = "Failed"
    refunded = "Refunded"


class DeliveryType(str, Enum):
    delivery = "Delivery"
    pickup = "Pickup"


class RefundStatus(str, Enum):
    not_applicable = "Not Applicable"
    pending = "Pending"
    processed = "Processed"
    failed = "Failed"


ALLOWED_TRANSITIONS = {
    OrderStatus.pending: [OrderStatus.confirmed, OrderStatus.cancelled, OrderStatus.refunded],
    OrderStatus.confirmed: [OrderStatus.preparing, OrderStatus.cancelled, OrderStatus.refunded],
    OrderStatus.preparing: [OrderStatus.ready_for_pickup, OrderStatus.cancelled, OrderStatus.refunded],
    OrderStatus.ready_for_pickup: [OrderStatus.out_for_delivery],
    OrderStatus.out_for_delivery: [OrderStatus.delivered, OrderStatus.payment_failed],
    OrderStatus.delivered: [OrderStatus.refunded, OrderStatus.payment_failed],
    OrderStatus.cancelled: [OrderStatus.refunded],
    OrderStatus.refunded: [],
    OrderStatus.payment_failed: [],
}

CANCELLABLE_STATUSES = {OrderStatus.pending, OrderStatus.confirmed, OrderStatus.preparing}

# only reachable for cash on delivery orders
COD_ONLY_STATUSES = {OrderStatus.payment_failed}


def can_transition(current: str, target: str) -> bool:
    return OrderStatus(target) in ALLOWED_TRANSITIONS.get(OrderStatus(current), [])
