"""Domain constants and enumerations for validation."""

from typing import Tuple

# Display order; breakdown ties are broken by position in this tuple.
CATEGORIES: Tuple[str, ...] = (
    "Transportation",
    "Food",
    "Utilities",
    "Healthcare",
    "Education",
    "Entertainment",
    "Housing",
    "Others",
)
DEFAULT_CATEGORY = "Food"

AVATAR_DATA_URL_PREFIX = "data:image/"
MIN_PASSWORD_LENGTH = 6

# Upper bound for a single expense or a month budget.
MAX_AMOUNT = 1_000_000_000_000.0
