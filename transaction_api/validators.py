"""
Request value coercion for the transaction routes.

Query strings and JSON bodies carry dates as ISO-8601 strings; services
expect ``datetime.date`` values.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from .exceptions import TransactionValidationException

TXN_DATE_FIELD = "txn_date"


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def coerce_date(field: str, value: Any) -> date:
    """
    Convert an ISO-8601 date or datetime string into a date.

    Args:
        field: Name of the field being coerced, used in error messages
        value: String, date or datetime value

    Returns:
        The calendar date; offset-aware datetimes are converted to UTC
        first, naive ones keep their own date part

    Raises:
        TransactionValidationException: If the value is not a parseable date
    """
    if isinstance(value, datetime):
        return _utc_date(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TransactionValidationException(
            field, value, f"expected an ISO date string, got {type(value).__name__}"
        )

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return _utc_date(datetime.fromisoformat(text))
    except ValueError:
        raise TransactionValidationException(
            field, value, f"'{value}' is not a valid ISO date"
        ) from None


def coerce_optional_date(field: str, value: Optional[str]) -> Optional[date]:
    """Coerce a query-string date, treating missing or blank values as absent."""
    if not value:
        return None
    return coerce_date(field, value)


def coerce_transaction_body(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of a transaction body with ``txn_date`` as a date.

    Bodies without ``txn_date`` are passed through unchanged.
    """
    data = dict(body)
    if TXN_DATE_FIELD in data:
        data[TXN_DATE_FIELD] = coerce_date(TXN_DATE_FIELD, data[TXN_DATE_FIELD])
    return data
