"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string from a statement into a Decimal.

    Handles:
    - "123.45", "-123.45", "+123.45"
    - "$123.45", "-$123.45"
    - "1,234.56" (only when the value was quoted in the CSV)
    - "(123.45)" (negative in parentheses)

    Raises:
        ValueError: If the string is empty, not a number, or not finite
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("empty amount")

    value = amount_str.strip()

    is_negative = False
    if value.startswith("(") and value.endswith(")"):
        is_negative = True
        value = value[1:-1]

    value = _CURRENCY_SYMBOLS.sub("", value).replace(",", "").strip()
    # "-$5.00" leaves "-5.00" after the symbol is removed
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError("not a number") from None

    if not amount.is_finite():
        raise ValueError("not a finite number")

    return -amount if is_negative else amount
