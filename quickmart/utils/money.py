from contextlib import AbstractContextManager
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Final

CENT: Final[Decimal] = Decimal("0.01")


def exact_arithmetic() -> AbstractContextManager[Context]:
    """Decimal context wide enough that sums and products of prices never round.

    Only addition, subtraction and multiplication run under it, so results
    keep exactly the digits they need.
    """
    return localcontext(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def round_cents(value: Decimal) -> Decimal:
    """Round an amount to whole cents, half-up, for display only."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Render an amount as a two-decimal string without the currency marker."""
    return f"{round_cents(value):.2f}"
