"""Money / rounding helpers.

Centralized so aggregation, the data layer and the API responses use
identical rounding and amount-acceptance rules.
"""

from __future__ import annotations
import math
from decimal import Decimal, ROUND_HALF_UP

from pesotrack.models.constants import MAX_AMOUNT


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def ensure_amount(value: float, limit: float = MAX_AMOUNT) -> float:
    """Return ``value`` as a float or raise ValueError unless 0 < value <= limit."""
    if isinstance(value, bool):
        raise ValueError(f"amount must be numeric, got {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"amount must be numeric, got {value!r}") from e
    if not math.isfinite(amount) or amount <= 0:
        raise ValueError(f"amount must be a positive finite number, got {value!r}")
    if amount > limit:
        raise ValueError(f"amount cannot exceed {limit:,.0f}")
    return amount
