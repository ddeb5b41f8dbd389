"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from virman.domain.errors import ValidationError

# Balances and amounts carry four decimal places.
AMOUNT_QUANTUM = Decimal("0.0001")

# Largest magnitude a signed 64-bit column holds in ten-thousandths.
MAX_AMOUNT = Decimal(2**63 - 1).scaleb(-4)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "₺123.45"

    "." is always the decimal separator.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₺]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'")

    return -amount if is_negative else amount


def to_decimal(value) -> Decimal:
    """Coerce an int, str, float or Decimal into a Decimal.

    Raises:
        ValidationError: If the value is missing or not a finite number
    """
    if value is None:
        raise ValidationError("Amount is required")
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        amount = parse_amount(value)
    else:
        raise ValidationError(f"Invalid amount {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"Invalid amount {value!r}")
    return amount


def quantize_amount(value) -> Decimal:
    """Return the value as a Decimal with exactly four decimal places.

    Raises:
        ValidationError: If the value has more than four decimal places or
            is larger in magnitude than MAX_AMOUNT
    """
    amount = to_decimal(value)
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Amount {amount} exceeds the maximum of {MAX_AMOUNT}")
    try:
        quantized = amount.quantize(AMOUNT_QUANTUM)
    except InvalidOperation:
        raise ValidationError(f"Invalid amount {value!r}")
    if quantized != amount:
        raise ValidationError(f"Amount {amount} has more than 4 decimal places")
    return quantized


def normalize_amount(value) -> Decimal:
    """Validate a money-moving amount: finite, strictly positive, four places.

    Raises:
        ValidationError: If the amount is not strictly positive or too precise
    """
    amount = quantize_amount(value)
    if amount <= 0:
        raise ValidationError(f"Amount must be positive, got {amount}")
    return amount
