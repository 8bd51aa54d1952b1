"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(value: str | int | float | Decimal) -> Decimal:
    """Parse an amount into a Decimal.

    Accepts numbers as well as strings in various formats:
    - "123.45"
    - "€123.45"
    - "-123.45"
    - "-€123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Floats are converted through their shortest repr, so 0.1 becomes
    Decimal("0.1") rather than its binary expansion.

    Args:
        value: Amount string or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value cannot be parsed or is not finite
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        amount = _parse_amount_string(value)
    else:
        raise ValueError(f"Could not parse amount {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return amount


def _parse_amount_string(amount_str: str) -> Decimal:
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e
    return -amount if is_negative else amount
