"""Currency and money value definitions."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext, localcontext
from enum import Enum


TWO_PLACES = Decimal("0.01")

# Amounts are stored like a decimal(15, 2) column
MAX_AMOUNT = Decimal("9999999999999.99")

# Working precision for sums and conversions of bounded amounts
MONEY_PRECISION = 50


class Currency(str, Enum):
    """Supported goal currencies."""

    USD = "USD"
    INR = "INR"


def money_context():
    """Decimal context wide enough for totals of many converted amounts."""
    context = getcontext().copy()
    context.prec = MONEY_PRECISION
    return localcontext(context)


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount half-up to the two places used for storage."""
    with money_context():
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_positive_amount(value, message: str) -> Decimal:
    """
    Parse user input into a positive two-place Decimal.

    Accepts strings and numbers. Anything that is not a finite number, that
    is not positive once rounded to two places, or that exceeds
    ``MAX_AMOUNT`` is rejected with ``message`` rather than clamped.

    Examples:
        >>> parse_positive_amount("1000", "bad")
        Decimal('1000.00')
        >>> parse_positive_amount("-5", "bad")
        Traceback (most recent call last):
        ...
        ValueError: bad
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(message)

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(message)

    if not amount.is_finite() or amount > MAX_AMOUNT:
        raise ValueError(message)

    try:
        amount = quantize_amount(amount)
    except InvalidOperation:
        raise ValueError(message)

    if amount <= 0 or amount > MAX_AMOUNT:
        raise ValueError(message)

    return amount
