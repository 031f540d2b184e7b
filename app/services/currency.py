"""Currency conversion and display formatting (USD/INR)."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from app.models.currency import Currency


class InvalidRateError(ValueError):
    """Raised when a conversion is attempted without a usable rate."""


class UnsupportedCurrencyError(ValueError):
    """Raised for a currency outside the supported set."""


CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.INR: "₹",
}


def validate_rate(rate: Optional[Decimal]) -> Decimal:
    """
    Check that a USD to INR rate can be used for conversion.

    Args:
        rate: INR per 1 USD

    Returns:
        The rate as a Decimal

    Raises:
        InvalidRateError: If the rate is missing, not finite or not positive
    """
    if rate is None:
        raise InvalidRateError("Exchange rate is required")

    try:
        rate = Decimal(str(rate))
    except InvalidOperation:
        raise InvalidRateError(f"Exchange rate must be a number, got {rate!r}")

    if not rate.is_finite() or rate <= 0:
        raise InvalidRateError(f"Exchange rate must be positive, got {rate}")

    return rate


def _as_currency(value) -> Currency:
    try:
        return Currency(value)
    except ValueError:
        raise UnsupportedCurrencyError(f"Unsupported currency: {value}")


def convert(
    amount: Decimal,
    from_currency: Currency,
    to_currency: Currency,
    rate: Optional[Decimal],
) -> Decimal:
    """
    Convert an amount between USD and INR.

    The result is not rounded; callers quantize when storing or displaying.

    Args:
        amount: Amount in ``from_currency``
        from_currency: Source currency
        to_currency: Target currency
        rate: INR per 1 USD

    Returns:
        Amount in ``to_currency``

    Raises:
        InvalidRateError: If the rate is missing or not positive
        UnsupportedCurrencyError: If either currency is not USD or INR

    Examples:
        >>> convert(Decimal("100"), Currency.USD, Currency.INR, Decimal("83.5"))
        Decimal('8350.0')
    """
    from_currency = _as_currency(from_currency)
    to_currency = _as_currency(to_currency)
    rate = validate_rate(rate)

    if from_currency == to_currency:
        return amount

    if from_currency == Currency.USD and to_currency == Currency.INR:
        return amount * rate
    if from_currency == Currency.INR and to_currency == Currency.USD:
        return amount / rate

    raise UnsupportedCurrencyError(
        f"No conversion from {from_currency.value} to {to_currency.value}"
    )


def _group_western(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ",".join(groups)


def _group_indian(digits: str) -> str:
    # Last three digits, then pairs (lakh, crore, ...)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount, currency: Currency) -> str:
    """
    Format an amount for display in whole currency units.

    USD uses en-US grouping, INR uses en-IN lakh/crore grouping.

    Examples:
        >>> format_currency(Decimal("1234.50"), Currency.USD)
        '$1,235'
        >>> format_currency(Decimal("123456.70"), Currency.INR)
        '₹1,23,457'
    """
    currency = _as_currency(currency)
    whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    sign = "-" if whole < 0 else ""
    digits = str(abs(whole))

    if currency == Currency.USD:
        grouped = _group_western(digits)
    elif currency == Currency.INR:
        grouped = _group_indian(digits)
    else:
        raise UnsupportedCurrencyError(f"Unsupported currency: {currency}")

    return f"{sign}{CURRENCY_SYMBOLS[currency]}{grouped}"


def format_percentage(value: float) -> str:
    """Format a percentage with one decimal place, e.g. ``70.0%``."""
    rounded = Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded}%"
