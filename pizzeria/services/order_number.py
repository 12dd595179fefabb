from sqlalchemy import update
from sqlmodel import Session, select

from pizzeria.config import Settings, settings as default_settings
from pizzeria.models.order_event import OrderCounter

ORDER_SEQUENCE = "order"


def next_order_number(session: Session, config: Settings = default_settings) -> str:
    """
    Hand out the next display number, e.g. PZ000042.

    The increment is a single UPDATE on the counter row, so concurrent
    checkouts serialize on the row lock instead of racing on a count.
    Runs inside the caller's transaction.
    """
    if session.get(OrderCounter, ORDER_SEQUENCE) is None:
        session.add(OrderCounter(name=ORDER_SEQUENCE, value=0))
        session.flush()

    session.execute(
        update(OrderCounter)
        .where(OrderCounter.name == ORDER_SEQUENCE)
        .values(value=OrderCounter.value + 1)
    )
    value = session.exec(
        select(OrderCounter.value).where(OrderCounter.name == ORDER_SEQUENCE)
    ).one()

    return f"{config.order_number_prefix}{value:06d}"
