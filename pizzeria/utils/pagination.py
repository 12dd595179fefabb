from sqlalchemy import func
from sqlmodel import select


def _clamp(page: int, limit: int, max_limit: int):
    if page < 1:
        page = 1

    if limit < 1:
        limit = 10
    return page, min(limit, max_limit)


def _meta(page: int, limit: int, total: int) -> dict:
    total_pages = (total + limit - 1) // limit
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_items": total,
        "limit": limit,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 10,
    max_limit: int = 100,
):
    page, limit = _clamp(page, limit, max_limit)
    offset = (page - 1) * limit

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    results = session.exec(
        query.offset(offset).limit(limit)
    ).all()

    return {"results": results, "pagination": _meta(page, limit, total)}


def paginate_items(items: list, page: int = 1, limit: int = 10, max_limit: int = 100):
    """Same envelope as ``paginate`` for rows already filtered in Python."""
    page, limit = _clamp(page, limit, max_limit)
    offset = (page - 1) * limit
    return {
        "results": items[offset:offset + limit],
        "pagination": _meta(page, limit, len(items)),
    }
