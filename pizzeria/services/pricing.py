# pizzeria/services/pricing.py
from datetime import datetime
from typing import Iterable

from pydantic import BaseModel

from pizzeria.config import Settings, settings as default_settings
from pizzeria.models.cart import Cart
from pizzeria.services.discounts import rederive_discount
from pizzeria.utils.money import round_half_up


class CartTotals(BaseModel):
    subtotal: float
    tax: float
    delivery_fee: float
    discount_amount: float
    total: float
    item_count: int


def customization_surcharge(customizations: dict | None, extra_cheese_price: float) -> float:
    """Per-pizza surcharge for extra cheese and extra toppings."""
    if not customizations:
        return 0
    surcharge = 0
    if customizations.get("extra_cheese"):
        surcharge += extra_cheese_price
    for topping in customizations.get("extra_toppings") or []:
        surcharge += topping.get("price") or 0
    return surcharge


def item_total(price: float, quantity: int, customizations: dict | None, extra_cheese_price: float) -> float:
    return price * quantity + customization_surcharge(customizations, extra_cheese_price) * quantity


def tax_for(subtotal: float, config: Settings) -> float:
    return round_half_up(subtotal * config.tax_rate)


def delivery_fee_for(subtotal: float, config: Settings) -> float:
    return 0 if subtotal >= config.free_delivery_threshold else config.delivery_fee


def compute_totals(items: Iterable, discount_amount: float = 0, config: Settings = default_settings) -> CartTotals:
    """
    Price a list of cart lines.

    Quantities are assumed valid; they are clamped where the cart is mutated.
    The total is floored at zero.
    """
    items = list(items)
    subtotal = sum(
        item_total(i.price, i.quantity, i.customizations, config.extra_cheese_price)
        for i in items
    )
    tax = tax_for(subtotal, config)
    delivery_fee = delivery_fee_for(subtotal, config)
    total = max(0, subtotal + tax + delivery_fee - discount_amount)

    return CartTotals(
        subtotal=subtotal,
        tax=tax,
        delivery_fee=delivery_fee,
        discount_amount=discount_amount,
        total=total,
        item_count=sum(i.quantity for i in items),
    )


def recalculate_cart(cart: Cart, config: Settings = default_settings) -> Cart:
    """Rewrite every derived field on the cart and its lines. Nothing is trusted from before."""
    for item in cart.items:
        item.total_price = item_total(item.price, item.quantity, item.customizations, config.extra_cheese_price)

    cart.subtotal = sum(i.total_price for i in cart.items)
    rederive_discount(cart, config.discount_codes, config.currency)

    totals = compute_totals(cart.items, cart.discount_amount, config)
    cart.subtotal = totals.subtotal
    cart.tax = totals.tax
    cart.delivery_fee = totals.delivery_fee
    cart.total = totals.total
    cart.item_count = totals.item_count
    cart.updated_at = datetime.utcnow()
    return cart
