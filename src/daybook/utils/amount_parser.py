"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from daybook.domain.errors import ValidationError
from daybook.domain.ledger import validate_amount


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount into a positive Decimal.

    Handles "123.45", "$123.45", "₹ 1,234.56" and similar. The direction of a
    transaction is carried by its type, so signs are rejected.

    Raises:
        ValidationError: If the string is not a positive amount with at most
            two decimal places that fits the amount column
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Amount is required")

    # Remove currency symbols, separators and whitespace
    cleaned = re.sub(r"[$€£¥₹,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e

    return validate_amount(amount)
