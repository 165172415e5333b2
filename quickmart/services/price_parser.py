from decimal import Decimal, InvalidOperation
from typing import Final

from quickmart.exceptions import MalformedPriceError

CURRENCY_MARKER: Final[str] = "$"


def parse_price(token: str) -> Decimal:
    """Read a catalog price token as an exact decimal.

    Separators are disambiguated by a heuristic that existing catalog files
    depend on:
    - comma and period both present: comma groups thousands ("1,234.56");
    - only a comma: comma is the decimal point ("3,75");
    - otherwise the token is read as-is.

    "3,750" is therefore 3.750, not 3750.

    Args:
        token: Price text, optionally prefixed with ``$``.

    Returns:
        The exact decimal value.

    Raises:
        MalformedPriceError: When the cleaned token is not a finite number.
    """
    cleaned = token.replace(CURRENCY_MARKER, "").strip()

    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")

    if not cleaned:
        raise MalformedPriceError(token, "empty")
    if "_" in cleaned:
        raise MalformedPriceError(token, "digit separators are not allowed")
    try:
        value = Decimal(cleaned)
    except InvalidOperation as exc:
        raise MalformedPriceError(token, "not a number") from exc
    if not value.is_finite():
        raise MalformedPriceError(token, "not a finite number")
    return value
