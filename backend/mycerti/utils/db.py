"""Database query utility functions."""
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from sqlalchemy.orm import Query, Session

from mycerti.utils.exceptions import NotFoundError

T = TypeVar("T")


def get_by_id(
    db: Session,
    model: Type[T],
    id_value: int,
    error_message: Optional[str] = None,
) -> T:
    """
    Get a model instance by ID.

    Args:
        db: Database session
        model: SQLAlchemy model class
        id_value: Primary key value
        error_message: Custom error message if not found

    Returns:
        Model instance

    Raises:
        NotFoundError: If model not found
    """
    instance = db.get(model, id_value)
    if not instance:
        raise NotFoundError(error_message or f"{model.__name__} not found")
    return instance


def resolve_sort(
    sort_by: Optional[str],
    sort_order: Optional[str],
    allowed: Mapping[str, Any],
    default: str = "created_at",
) -> Tuple[Any, bool]:
    """
    Map user-supplied sort parameters onto an allow-listed column.

    Unknown fields fall back to ``default``; anything but ``ASC`` sorts descending.

    Returns:
        (column, descending)
    """
    column = allowed.get(sort_by or default, allowed[default])
    descending = (sort_order or "DESC").upper() != "ASC"
    return column, descending


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    """
    Run one page of a fully built (filtered and ordered) query.

    Returns:
        (rows, pagination) where pagination holds page, limit, total and pages
    """
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }
    return rows, pagination
