from fastapi import APIRouter, Depends
from sqlmodel import Session

from pizzeria.config import settings
from pizzeria.database import get_session
from pizzeria.models.cart import Cart
from pizzeria.models.user import User
from pizzeria.schemas.cart_schemas import CartAddRequest, CartUpdateRequest, DiscountRequest
from pizzeria.services import cart_service
from pizzeria.utils.money import format_amount
from pizzeria.utils.responses import success
from pizzeria.utils.token import get_current_user


router = APIRouter()


def serialize_cart(cart: Cart) -> dict:
    return {
        "cart_id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {
                "item_id": item.id,
                "pizza_id": item.pizza_id,
                "name": item.name,
                "image": item.image,
                "description": item.description,
                "size": item.size,
                "price": item.price,
                "quantity": item.quantity,
                "customizations": item.customizations,
                "total_price": item.total_price,
            }
            for item in cart.items
        ],
        "subtotal": cart.subtotal,
        "tax": cart.tax,
        "delivery_fee": cart.delivery_fee,
        "discount": {
            "amount": cart.discount_amount,
            "code": cart.discount_code,
            "percentage": cart.discount_percentage,
        },
        "discount_notice": cart.discount_notice,
        "total": cart.total,
        "item_count": cart.item_count,
        "is_active": cart.is_active,
        "expires_at": cart.expires_at,
        "formatted_subtotal": format_amount(cart.subtotal, settings.currency),
        "formatted_total": format_amount(cart.total, settings.currency),
    }


def _respond(cart: Cart, message: str):
    # a dropped discount is reported alongside the action message
    if cart.discount_notice:
        message = f"{message}. {cart.discount_notice}"
    return success(serialize_cart(cart), message)


# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.get_active_cart(session, current_user.id, settings)
    return success(serialize_cart(cart))


# Add to Cart

@router.post("/add")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.add_item(
        session,
        current_user.id,
        pizza_id=data.pizza_id,
        size=data.size,
        quantity=data.quantity,
        customizations=data.customizations,
        config=settings,
    )
    return _respond(cart, "Item added to cart successfully")


# Update Cart

@router.put("/update/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.update_item_quantity(session, current_user.id, item_id, data.quantity, settings)
    return _respond(cart, "Cart item updated successfully")


# Remove Cart

@router.delete("/remove/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.remove_item(session, current_user.id, item_id, settings)
    return _respond(cart, "Item removed from cart successfully")


# Clear Cart

@router.delete("/clear")
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.clear_cart(session, current_user.id, settings)
    return _respond(cart, "Cart cleared successfully")


# Discounts

@router.post("/discount")
def apply_discount(
    data: DiscountRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.apply_discount_code(session, current_user.id, data.code, settings)
    return _respond(cart, "Discount applied successfully")


@router.delete("/discount")
def remove_discount(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.remove_discount_code(session, current_user.id, settings)
    return _respond(cart, "Discount removed successfully")
