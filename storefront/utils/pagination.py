from typing import Callable, Optional

from sqlalchemy import func
from sqlmodel import select

MAX_PAGE_SIZE = 100


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 10,
    serialize: Optional[Callable] = None,
) -> dict:
    """Run ``query`` for one page and wrap it in the standard list envelope.

    ``serialize`` maps each row to its response shape; rows are returned as-is
    without it.
    """
    page = max(page, 1)
    if limit < 1:
        limit = 10
    limit = min(limit, MAX_PAGE_SIZE)

    total = session.exec(
        select(func.count()).select_from(query.order_by(None).subquery())
    ).one()

    rows = session.exec(
        query.offset((page - 1) * limit).limit(limit)
    ).all()

    return {
        "total_items": total,
        "total_pages": (total + limit - 1) // limit,
        "current_page": page,
        "limit": limit,
        "results": [serialize(row) for row in rows] if serialize else list(rows),
    }
