"""Shared validation utilities"""

import math
from typing import Any, Optional, Union


def validate_bid_amount(value: Any) -> float:
    """
    Validate a bid amount.

    Accepts ints, floats and numeric strings ("250", "250.50").

    Returns:
        The amount as a float

    Raises:
        ValueError: If the amount is missing, non-numeric, non-finite or not positive
    """
    if value is None or isinstance(value, bool):
        raise ValueError("Enter a valid amount greater than 0 (e.g. 250)")

    try:
        amount = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as e:
        raise ValueError("Enter a valid amount greater than 0 (e.g. 250)") from e

    if not math.isfinite(amount) or amount <= 0:
        raise ValueError("Enter a valid amount greater than 0 (e.g. 250)")

    return amount


def validate_rating(value: Any) -> int:
    """
    Validate a review rating: integer 1-5.

    Raises:
        ValueError: If the rating is not a whole number in [1, 5]
    """
    if isinstance(value, bool):
        raise ValueError("Rating must be an integer between 1 and 5")

    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("Rating must be an integer between 1 and 5")
        value = int(value)

    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as e:
            raise ValueError("Rating must be an integer between 1 and 5") from e

    if not isinstance(value, int) or not 1 <= value <= 5:
        raise ValueError("Rating must be an integer between 1 and 5")

    return value


def validate_non_negative(value: Optional[Union[int, float]], field: str) -> Optional[Union[int, float]]:
    """Reject negative numbers; None passes through"""
    if value is None:
        return value
    if value < 0:
        raise ValueError(f"{field} cannot be negative")
    return value


def parse_specialties(value: Union[str, list, None]) -> list[str]:
    """
    Normalize specialties from a list or a comma-separated string.

    "BBQ, halal, , vegan" -> ["BBQ", "halal", "vegan"]
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [str(s).strip() for s in items if str(s).strip()]
