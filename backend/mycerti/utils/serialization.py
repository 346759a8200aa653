"""Serialization utilities for converting models to API responses."""
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

# Columns that must never leave the server
SENSITIVE_FIELDS = ("password_hash",)


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize datetime to ISO format string.

    Args:
        value: Datetime value or None

    Returns:
        ISO format string or None
    """
    return value.isoformat() if value else None


def serialize_value(value: Any) -> Any:
    """Serialize a single column or aggregate value."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def serialize_model_to_dict(
    model: Any,
    exclude: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Serialize a SQLAlchemy model to a dictionary.

    Args:
        model: SQLAlchemy model instance
        exclude: Extra column names to leave out

    Returns:
        Dictionary representation of the model
    """
    skipped = set(SENSITIVE_FIELDS) | set(exclude or ())

    result = {}
    for column in model.__table__.columns:
        if column.name in skipped:
            continue
        result[column.name] = serialize_value(getattr(model, column.name))

    return result


def serialize_row(row: Any) -> Dict[str, Any]:
    """Serialize a labelled result row (e.g. from a GROUP BY query)."""
    return {key: serialize_value(value) for key, value in row._mapping.items()}
