# pizzeria/services/cart_service.py
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlmodel import Session, select

from pizzeria.config import Settings, settings as default_settings
from pizzeria.constants.catalog import PizzaSize
from pizzeria.exceptions import (
    InvalidQuantityError,
    InvalidSizeError,
    NotFoundError,
    UnavailableError,
)
from pizzeria.models.cart import Cart, CartItem
from pizzeria.models.pizza import Pizza
from pizzeria.schemas.cart_schemas import Customizations
from pizzeria.services import discounts
from pizzeria.services.pricing import recalculate_cart

logger = logging.getLogger(__name__)


def _expiry(config: Settings) -> datetime:
    return datetime.utcnow() + timedelta(hours=config.cart_ttl_hours)


def _save(session: Session, cart: Cart, config: Settings) -> Cart:
    """Recompute, persist and hand back the cart. Every mutation ends here."""
    recalculate_cart(cart, config)
    cart.expires_at = _expiry(config)
    session.add(cart)
    session.commit()
    session.refresh(cart)
    return cart


def find_active_cart(session: Session, user_id: int) -> Optional[Cart]:
    return session.exec(
        select(Cart)
        .where(Cart.user_id == user_id, Cart.is_active == True)  # noqa: E712
        .order_by(Cart.id.desc())
    ).first()


def get_active_cart(session: Session, user_id: int, config: Settings = default_settings) -> Cart:
    """
    Return the user's active cart, creating an empty one on first access.

    An expired cart is deactivated here and replaced by a fresh one.
    """
    cart = find_active_cart(session, user_id)

    if cart and cart.expires_at <= datetime.utcnow():
        logger.info(f"Cart {cart.id} of user {user_id} expired at {cart.expires_at}")
        cart.is_active = False
        cart.items.clear()
        recalculate_cart(cart, config)
        session.add(cart)
        session.commit()
        cart = None

    if cart:
        return cart

    cart = Cart(user_id=user_id, expires_at=_expiry(config))
    recalculate_cart(cart, config)
    session.add(cart)
    session.commit()
    session.refresh(cart)
    logger.info(f"Created cart {cart.id} for user {user_id}")
    return cart


def add_item(
    session: Session,
    user_id: int,
    pizza_id: int,
    size: str,
    quantity: int = 1,
    customizations: Optional[Customizations] = None,
    config: Settings = default_settings,
) -> Cart:
    quantity = max(1, min(quantity, config.max_item_quantity))

    pizza = session.get(Pizza, pizza_id)
    if not pizza:
        raise NotFoundError("Pizza not found", details={'pizza_id': pizza_id})

    if not pizza.is_available:
        raise UnavailableError("Pizza is currently unavailable", details={'pizza_id': pizza_id})

    try:
        size = PizzaSize(size).value
    except ValueError:
        raise InvalidSizeError(pizza_id, str(size))

    unit_price = pizza.price_for(size)
    if unit_price is None:
        raise InvalidSizeError(pizza_id, size)

    wanted = (customizations or Customizations()).model_dump()
    cart = get_active_cart(session, user_id, config)

    existing = next(
        (
            item for item in cart.items
            if item.pizza_id == pizza_id and item.size == size and item.customizations == wanted
        ),
        None,
    )

    if existing:
        merged = min(existing.quantity + quantity, config.max_item_quantity)
        logger.info(
            f"Pizza {pizza_id} ({size}) already in cart {cart.id}, "
            f"quantity {existing.quantity} -> {merged}"
        )
        existing.quantity = merged
    else:
        logger.info(f"Adding pizza {pizza_id} ({size}) x{quantity} to cart {cart.id}")
        cart.items.append(
            CartItem(
                pizza_id=pizza.id,
                name=pizza.name,
                image=pizza.image,
                description=pizza.description,
                size=size,
                price=unit_price,
                quantity=quantity,
                customizations=wanted,
            )
        )

    return _save(session, cart, config)


def update_item_quantity(
    session: Session,
    user_id: int,
    item_id: int,
    quantity: int,
    config: Settings = default_settings,
) -> Cart:
    if quantity is None or quantity < 1 or quantity > config.max_item_quantity:
        raise InvalidQuantityError(quantity, config.max_item_quantity)

    cart = get_active_cart(session, user_id, config)
    item = next((i for i in cart.items if i.id == item_id), None)
    if not item:
        raise NotFoundError("Item not found in cart", details={'item_id': item_id})

    item.quantity = quantity
    return _save(session, cart, config)


def remove_item(session: Session, user_id: int, item_id: int, config: Settings = default_settings) -> Cart:
    """Idempotent: removing a line that is not there still succeeds."""
    cart = get_active_cart(session, user_id, config)
    item = next((i for i in cart.items if i.id == item_id), None)
    if item:
        cart.items.remove(item)
        logger.info(f"Removed item {item_id} from cart {cart.id}")
    return _save(session, cart, config)


def clear_cart(session: Session, user_id: int, config: Settings = default_settings) -> Cart:
    cart = get_active_cart(session, user_id, config)
    cart.items.clear()
    return _save(session, cart, config)


def apply_discount_code(session: Session, user_id: int, code: str, config: Settings = default_settings) -> Cart:
    cart = get_active_cart(session, user_id, config)
    # subtotal must reflect the current lines before the minimum order check
    recalculate_cart(cart, config)
    discounts.apply_discount(cart, code, config.discount_codes, config.currency)
    return _save(session, cart, config)


def remove_discount_code(session: Session, user_id: int, config: Settings = default_settings) -> Cart:
    cart = get_active_cart(session, user_id, config)
    discounts.remove_discount(cart)
    return _save(session, cart, config)


def deactivate_cart(session: Session, cart: Cart, config: Settings = default_settings) -> Cart:
    """Empty and close a cart after checkout. The caller owns the commit."""
    cart.items.clear()
    cart.is_active = False
    discounts.remove_discount(cart)
    recalculate_cart(cart, config)
    session.add(cart)
    return cart
