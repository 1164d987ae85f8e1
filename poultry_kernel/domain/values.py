"""
Numeric and identifier coercion for ledger inputs.

Every quantity, weight and amount entering the core passes through these
helpers.  Floats are converted through ``str`` so that 0.1 becomes
Decimal("0.1") and not its binary expansion.  Booleans, NaN and infinities
are rejected outright.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID

from poultry_kernel.exceptions import InvalidInputError, MalformedIdentifierError

ZERO = Decimal("0")


def to_decimal(value, field: str) -> Decimal:
    """Coerce ``value`` to a finite Decimal or raise InvalidInputError."""
    if value is None:
        raise InvalidInputError(field, "is required")
    if isinstance(value, bool):
        raise InvalidInputError(field, "must be a number, not a boolean")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidInputError(field, f"not a number: {value!r}") from exc
    else:
        raise InvalidInputError(field, f"unsupported type {type(value).__name__}")
    if not result.is_finite():
        raise InvalidInputError(field, "must be finite")
    return result


def require_non_negative(value, field: str) -> Decimal:
    result = to_decimal(value, field)
    if result < 0:
        raise InvalidInputError(field, f"must be >= 0, got {result}")
    return result


def require_positive(value, field: str) -> Decimal:
    result = to_decimal(value, field)
    if result <= 0:
        raise InvalidInputError(field, f"must be > 0, got {result}")
    return result


def require_count(value, field: str, minimum: int = 1) -> int:
    """Coerce ``value`` to an integer count of at least ``minimum``."""
    number = to_decimal(value, field)
    if number != number.to_integral_value():
        raise InvalidInputError(field, f"must be a whole number, got {number}")
    count = int(number)
    if count < minimum:
        raise InvalidInputError(field, f"must be >= {minimum}, got {count}")
    return count


def to_uuid(value, field: str) -> UUID:
    """Parse an identifier, raising MalformedIdentifierError on garbage."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError as exc:
            raise MalformedIdentifierError(field, value) from exc
    raise MalformedIdentifierError(field, repr(value))


def to_date(value, field: str) -> date:
    """Accept a date, a datetime (its date part) or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise InvalidInputError(field, f"not an ISO date: {value!r}") from exc
    raise InvalidInputError(field, f"unsupported type {type(value).__name__}")


def optional_text(value, field: str, max_length: int) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(field, "must be a string")
    value = value.strip()
    if len(value) > max_length:
        raise InvalidInputError(field, f"must be at most {max_length} characters")
    return value or None


def required_text(value, field: str, max_length: int) -> str:
    text = optional_text(value, field, max_length)
    if text is None:
        raise InvalidInputError(field, "is required")
    return text
