import uuid
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

from app.services.search.errors import InvalidFilterValue

_TRUE_WORDS = {"1", "true", "t", "yes", "y"}
_FALSE_WORDS = {"0", "false", "f", "no", "n"}


def column_python_type(column):
    try:
        return column.property.columns[0].type.python_type
    except (AttributeError, IndexError, NotImplementedError):
        return None


def _coerce_bool(field: str, value: str) -> bool:
    text = value.strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise InvalidFilterValue(field, value, "boolean")


def _coerce_number(field: str, value: str, python_type):
    text = value.strip()
    if not text:
        raise InvalidFilterValue(field, value, "number")
    try:
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        return Decimal(text)
    except (ValueError, InvalidOperation):
        raise InvalidFilterValue(field, value, "number")


def _coerce_date(field: str, value: str) -> date:
    text = value.strip()
    try:
        # Accept either YYYY-MM-DD or a full ISO timestamp and keep its date part.
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidFilterValue(field, value, "date")


def _coerce_datetime(field: str, value: str) -> datetime:
    text = value.strip()
    try:
        if "T" not in text and " " not in text and len(text) == 10:
            # Date-only value for a timestamp column means start of that day.
            parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidFilterValue(field, value, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def coerce_filter_value(column, field: str, value: str):
    """Convert an opaque filter string to the Python type bound for ``column``.

    Unknown column types get the string unchanged and leave the comparison
    to the database.
    """
    python_type = column_python_type(column)
    if python_type is uuid.UUID:
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            raise InvalidFilterValue(field, value, "uuid")
    if python_type is bool:
        return _coerce_bool(field, value)
    if python_type in {int, float, Decimal}:
        return _coerce_number(field, value, python_type)
    if python_type is datetime:
        return _coerce_datetime(field, value)
    if python_type is date:
        return _coerce_date(field, value)
    return value
