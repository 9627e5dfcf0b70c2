from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from parcel_optimizer.errors import CurrencyConversionError

CENTS = Decimal("0.01")


def to_decimal(amount: str | float | Decimal) -> Decimal:
    """Parse a decimal amount; raises CurrencyConversionError on garbage."""
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise CurrencyConversionError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise CurrencyConversionError(f"Invalid amount: {amount!r}")
    return value


def convert_currency(
    amount: str | float | Decimal,
    from_currency: str,
    to_currency: str,
    rates: dict[str, float],
) -> Decimal:
    """
    Convert an amount between currencies using a table of units per 1 USD.

    The result is rounded half-up to cents.

    Raises:
        CurrencyConversionError: unknown currency or invalid amount
    """
    value = to_decimal(amount)
    source = (from_currency or "").upper()
    target = (to_currency or "").upper()

    if source == target:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)

    for code in (source, target):
        if code not in rates or not rates[code] or rates[code] <= 0:
            raise CurrencyConversionError(f"No exchange rate for currency '{code or '?'}'")

    usd = value / Decimal(str(rates[source]))
    converted = usd * Decimal(str(rates[target]))
    return converted.quantize(CENTS, rounding=ROUND_HALF_UP)
