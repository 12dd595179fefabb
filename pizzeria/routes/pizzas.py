from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from pizzeria.database import get_session
from pizzeria.models.pizza import Pizza
from pizzeria.services import catalog

router = APIRouter()


def serialize_pizza(pizza: Pizza) -> dict:
    return {
        "id": pizza.id,
        "name": pizza.name,
        "description": pizza.description,
        "image": pizza.image,
        "category": pizza.category,
        "sizes": pizza.sizes,
        "min_price": pizza.min_price,
        "ingredients": pizza.ingredients,
        "tags": pizza.tags,
        "is_vegetarian": pizza.is_vegetarian,
        "is_vegan": pizza.is_vegan,
        "is_gluten_free": pizza.is_gluten_free,
        "spice_level": pizza.spice_level,
        "rating": {"average": pizza.rating_average, "count": pizza.rating_count},
        "is_available": pizza.is_available,
        "is_featured": pizza.is_featured,
        "preparation_time": pizza.preparation_time,
    }


# ---------- MENU ----------

@router.get("")
def list_pizzas(
    category: Optional[str] = None,
    is_vegetarian: Optional[bool] = None,
    is_vegan: Optional[bool] = None,
    is_gluten_free: Optional[bool] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, pattern="^(name|price_low|price_high|rating|newest)$"),
    is_available: bool = True,
    page: int = 1,
    limit: int = 12,
    session: Session = Depends(get_session)
):
    result = catalog.list_pizzas(
        session,
        category=category,
        is_vegetarian=is_vegetarian,
        is_vegan=is_vegan,
        is_gluten_free=is_gluten_free,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort_by=sort_by,
        is_available=is_available,
        page=page,
        limit=limit,
    )
    return {
        "success": True,
        "data": [serialize_pizza(p) for p in result["results"]],
        "pagination": result["pagination"],
    }


@router.get("/featured")
def featured(session: Session = Depends(get_session)):
    pizzas = catalog.featured_pizzas(session)
    return {"success": True, "data": [serialize_pizza(p) for p in pizzas]}


@router.get("/categories/stats")
def category_stats(session: Session = Depends(get_session)):
    return {"success": True, "data": catalog.category_stats(session)}


@router.get("/category/{category}")
def by_category(
    category: str,
    page: int = 1,
    limit: int = 12,
    session: Session = Depends(get_session)
):
    result = catalog.pizzas_by_category(session, category, page, limit)
    return {
        "success": True,
        "data": [serialize_pizza(p) for p in result["results"]],
        "pagination": result["pagination"],
    }


# ---------- SEARCH ----------

@router.get("/search")
def search(
    q: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    session: Session = Depends(get_session)
):
    pizzas = catalog.search_pizzas(session, q, category, min_price, max_price)
    return {
        "success": True,
        "data": [serialize_pizza(p) for p in pizzas],
        "count": len(pizzas),
    }


@router.get("/{pizza_id}")
def get_pizza(pizza_id: int, session: Session = Depends(get_session)):
    return {"success": True, "data": serialize_pizza(catalog.get_pizza(session, pizza_id))}
