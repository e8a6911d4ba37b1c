"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from cashbook.domain.errors import InvalidAmountError

_SYMBOL_RE = re.compile(r"[$€£¥₹]|(?<![a-z])kr\.?(?![a-z])", re.IGNORECASE)
_ISO_CODE_RE = re.compile(r"(?<![A-Za-z])[A-Z]{3}(?![A-Za-z])")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a locale-ambiguous amount string into a Decimal.

    Handles US and European conventions:
    - "1,234.56" and "1.234,56" -> 1234.56
    - "3418,00" -> 3418.00
    - "1,234,567" -> 1234567
    - "$123.45", "123,45 kr", "EUR 10", "1 234,56"
    - "(123.45)" (negative in parentheses)

    When both separators appear, the last one is the decimal point. A lone
    comma followed by at most three characters is read as a decimal point,
    so "1,234" parses as 1.234; that ambiguity is inherent to the input.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount, negative if the input carried a minus sign or
        parentheses

    Raises:
        InvalidAmountError: If no finite number can be recovered
    """
    if amount_str is None or not str(amount_str).strip():
        raise InvalidAmountError("Empty amount string")

    original = str(amount_str)
    cleaned = _SYMBOL_RE.sub("", original)
    cleaned = _ISO_CODE_RE.sub("", cleaned)
    # Grouping spaces ("1 234,56") and non-breaking spaces go too
    cleaned = re.sub(r"\s+", "", cleaned)

    is_negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        is_negative = True
        cleaned = cleaned[1:-1]

    if not re.search(r"\d", cleaned):
        raise InvalidAmountError(f"Could not parse amount '{original}': no digits")
    # Decimal() would accept "1_000"
    if "_" in cleaned:
        raise InvalidAmountError(f"Could not parse amount '{original}'")

    has_comma = "," in cleaned
    has_period = "." in cleaned

    if has_comma and has_period:
        if cleaned.rfind(",") > cleaned.rfind("."):
            # European: 1.234,56
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            # US: 1,234.56
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        parts = cleaned.split(",")
        if len(parts) == 2 and len(parts[1]) <= 3:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmountError(f"Could not parse amount '{original}'")

    if not amount.is_finite():
        raise InvalidAmountError(f"Could not parse amount '{original}': not a finite number")

    return -amount if is_negative else amount
