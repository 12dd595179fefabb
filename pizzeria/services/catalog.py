# pizzeria/services/catalog.py
from typing import List, Optional

from sqlalchemy import String, cast, func, or_
from sqlmodel import Session, select

from pizzeria.constants.catalog import PizzaCategory
from pizzeria.exceptions import NotFoundError, ValidationError
from pizzeria.models.pizza import Pizza
from pizzeria.utils.pagination import paginate, paginate_items

SORT_OPTIONS = ("name", "price_low", "price_high", "rating", "newest")
FEATURED_LIMIT = 8
SEARCH_LIMIT = 20


def _text_match(term: str, include_tags: bool = False):
    like = f"%{term}%"
    clauses = [
        Pizza.name.ilike(like),
        Pizza.description.ilike(like),
        cast(Pizza.ingredients, String).ilike(like),
    ]
    if include_tags:
        clauses.append(cast(Pizza.tags, String).ilike(like))
    return or_(*clauses)


def _in_price_range(pizza: Pizza, min_price: Optional[float], max_price: Optional[float]) -> bool:
    for entry in pizza.sizes or []:
        price = entry.get("price", 0)
        if min_price is not None and price < min_price:
            continue
        if max_price is not None and price > max_price:
            continue
        return True
    return False


def _sort(pizzas: List[Pizza], sort_by: Optional[str]) -> List[Pizza]:
    if sort_by == "name":
        return sorted(pizzas, key=lambda p: p.name.lower())
    if sort_by == "price_low":
        return sorted(pizzas, key=lambda p: p.min_price or 0)
    if sort_by == "price_high":
        return sorted(pizzas, key=lambda p: max((s["price"] for s in p.sizes or []), default=0), reverse=True)
    if sort_by == "rating":
        return sorted(pizzas, key=lambda p: p.rating_average, reverse=True)
    # newest
    return sorted(pizzas, key=lambda p: (p.created_at, p.id), reverse=True)


def list_pizzas(
    session: Session,
    category: Optional[str] = None,
    is_vegetarian: Optional[bool] = None,
    is_vegan: Optional[bool] = None,
    is_gluten_free: Optional[bool] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    is_available: bool = True,
    page: int = 1,
    limit: int = 12,
) -> dict:
    """
    Filtered, sorted and paginated menu.

    Prices live in the per-size JSON list, so the price range and the
    price sorts are applied after the column filters have run in SQL.
    """
    query = select(Pizza).where(Pizza.is_available == is_available)

    if category:
        query = query.where(Pizza.category == category)
    if is_vegetarian is not None:
        query = query.where(Pizza.is_vegetarian == is_vegetarian)
    if is_vegan is not None:
        query = query.where(Pizza.is_vegan == is_vegan)
    if is_gluten_free is not None:
        query = query.where(Pizza.is_gluten_free == is_gluten_free)
    if search:
        query = query.where(_text_match(search))

    if min_price is None and max_price is None and sort_by not in ("price_low", "price_high"):
        order = {
            "name": Pizza.name.asc(),
            "rating": Pizza.rating_average.desc(),
        }.get(sort_by, Pizza.created_at.desc())
        return paginate(session=session, query=query.order_by(order, Pizza.id.desc()), page=page, limit=limit)

    pizzas = session.exec(query).all()
    if min_price is not None or max_price is not None:
        pizzas = [p for p in pizzas if _in_price_range(p, min_price, max_price)]

    return paginate_items(_sort(pizzas, sort_by), page, limit)


def get_pizza(session: Session, pizza_id: int) -> Pizza:
    pizza = session.get(Pizza, pizza_id)
    if not pizza:
        raise NotFoundError("Pizza not found", details={'pizza_id': pizza_id})
    return pizza


def featured_pizzas(session: Session) -> List[Pizza]:
    return session.exec(
        select(Pizza)
        .where(Pizza.is_featured == True, Pizza.is_available == True)  # noqa: E712
        .order_by(Pizza.rating_average.desc())
        .limit(FEATURED_LIMIT)
    ).all()


def pizzas_by_category(session: Session, category: str, page: int = 1, limit: int = 12) -> dict:
    if category not in {c.value for c in PizzaCategory}:
        raise ValidationError("Invalid category", details={'category': category})

    query = (
        select(Pizza)
        .where(Pizza.category == category, Pizza.is_available == True)  # noqa: E712
        .order_by(Pizza.created_at.desc(), Pizza.id.desc())
    )
    return paginate(session=session, query=query, page=page, limit=limit)


def category_stats(session: Session) -> List[dict]:
    rows = session.exec(
        select(Pizza.category, func.count(Pizza.id), func.avg(Pizza.rating_average))
        .where(Pizza.is_available == True)  # noqa: E712
        .group_by(Pizza.category)
        .order_by(func.count(Pizza.id).desc())
    ).all()

    return [
        {"category": category, "count": count, "avg_rating": round(avg or 0, 1)}
        for category, count, avg in rows
    ]


def search_pizzas(
    session: Session,
    q: Optional[str],
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[Pizza]:
    if not q or len(q.strip()) < 2:
        raise ValidationError("Search query must be at least 2 characters long")

    query = select(Pizza).where(
        Pizza.is_available == True,  # noqa: E712
        _text_match(q.strip(), include_tags=True),
    )
    if category:
        query = query.where(Pizza.category == category)

    pizzas = session.exec(query.order_by(Pizza.rating_average.desc())).all()
    if min_price is not None or max_price is not None:
        pizzas = [p for p in pizzas if _in_price_range(p, min_price, max_price)]
    return pizzas[:SEARCH_LIMIT]
