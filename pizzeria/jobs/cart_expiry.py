import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from pizzeria.config import Settings, settings as default_settings
from pizzeria.models.cart import Cart
from pizzeria.services.cart_service import deactivate_cart

logger = logging.getLogger(__name__)


def expire_stale_carts(
    session: Session,
    now: Optional[datetime] = None,
    config: Settings = default_settings,
) -> int:
    """Deactivate every active cart past its expiry. Returns how many were closed."""
    now = now or datetime.utcnow()

    carts = session.exec(
        select(Cart)
        .where(Cart.is_active == True)  # noqa: E712
        .where(Cart.expires_at <= now)
    ).all()

    for cart in carts:
        deactivate_cart(session, cart, config)

    session.commit()

    if carts:
        logger.info(f"Expired {len(carts)} stale carts")
    return len(carts)
