"""Field checks shared by transaction intake and effect proofs."""

import math
from decimal import Decimal, InvalidOperation

from ephemeral_api.ledger.errors import ValidationError


def require_text(value, field: str) -> str:
    """Return a non-empty string or raise ValidationError naming the field."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field)
    if not isinstance(value, str):
        raise ValidationError(field, f"Field '{field}' must be a string")
    return value


def require_amount(value, field: str = "amount") -> float:
    """Parse a positive, finite amount from a number or numeric string."""
    if value is None or value == "":
        raise ValidationError(field)
    if isinstance(value, bool):
        raise ValidationError(field, f"Field '{field}' must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, f"Field '{field}' must be a number") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(field, f"Field '{field}' must be a positive number")
    return amount


def require_exact_amount(value, field: str = "amount") -> Decimal:
    """Like require_amount, but keeps every digit of the value as given.

    Strings are parsed exactly; numbers go through their shortest repr.
    """
    if value is None or value == "":
        raise ValidationError(field)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValidationError(field, f"Field '{field}' must be a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(field, f"Field '{field}' must be a number") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(field, f"Field '{field}' must be a positive number")
    return amount
