# pizzeria/services/discounts.py
import logging
from typing import Dict, Optional

from pizzeria.config import DiscountRule
from pizzeria.exceptions import InvalidDiscountCodeError, MinimumOrderNotMetError
from pizzeria.models.cart import Cart
from pizzeria.utils.money import round_half_up

logger = logging.getLogger(__name__)


def lookup_rule(code: str, rules: Dict[str, DiscountRule]) -> Optional[DiscountRule]:
    """Case-insensitive lookup in the configured code table."""
    wanted = code.strip().upper()
    for key, rule in rules.items():
        if key.upper() == wanted:
            return rule
    return None


def discount_amount_for(rule: DiscountRule, subtotal: float) -> float:
    if rule.percentage is not None:
        return round_half_up(subtotal * (rule.percentage / 100))
    return rule.amount


def apply_discount(
    cart: Cart,
    code: str,
    rules: Dict[str, DiscountRule],
    currency: str = "LKR",
) -> Cart:
    """
    Put a discount code on the cart, replacing any previous one.

    The cart subtotal must already be current. Raises without touching the
    cart when the code is unknown or the minimum order is not met.
    """
    rule = lookup_rule(code, rules)
    if rule is None:
        logger.info(f"Rejected unknown discount code {code!r} for cart {cart.id}")
        raise InvalidDiscountCodeError(code)

    normalized = code.strip().upper()
    if cart.subtotal < rule.min_order:
        logger.info(
            f"Rejected discount {normalized} for cart {cart.id}: "
            f"subtotal {cart.subtotal} below {rule.min_order}"
        )
        raise MinimumOrderNotMetError(normalized, rule.min_order, currency)

    cart.discount_code = normalized
    cart.discount_percentage = rule.percentage or 0
    cart.discount_amount = discount_amount_for(rule, cart.subtotal)
    logger.info(f"Applied discount {normalized} ({cart.discount_amount}) to cart {cart.id}")
    return cart


def remove_discount(cart: Cart) -> Cart:
    cart.discount_code = None
    cart.discount_percentage = 0
    cart.discount_amount = 0
    return cart


def rederive_discount(cart: Cart, rules: Dict[str, DiscountRule], currency: str = "LKR") -> Cart:
    """
    Recompute the active discount against the current subtotal.

    Percentage codes follow the subtotal; a code that is no longer in the
    table, or whose minimum order is no longer met, is dropped and
    `cart.discount_notice` says why. The notice only describes the latest
    recalculation.
    """
    cart.discount_notice = None
    if not cart.discount_code:
        return remove_discount(cart)

    code = cart.discount_code
    rule = lookup_rule(code, rules)
    if rule is None:
        logger.info(f"Dropping unknown discount {code} from cart {cart.id}")
        remove_discount(cart)
        cart.discount_notice = f"Discount code {code} is no longer valid and was removed"
        return cart

    if cart.subtotal < rule.min_order:
        logger.info(f"Dropping discount {code} from cart {cart.id}: subtotal {cart.subtotal} below {rule.min_order}")
        remove_discount(cart)
        cart.discount_notice = (
            f"Discount {code} was removed: minimum order amount of "
            f"{currency} {rule.min_order:g} is no longer met"
        )
        return cart

    cart.discount_percentage = rule.percentage or 0
    cart.discount_amount = discount_amount_for(rule, cart.subtotal)
    return cart
