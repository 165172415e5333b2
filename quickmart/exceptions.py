from decimal import Decimal
from pathlib import Path


class QuickMartError(Exception):
    """Base class for every error raised by the register core."""


class MalformedPriceError(QuickMartError, ValueError):
    """A price token could not be read as an exact decimal."""

    def __init__(self, token: str, reason: str = "") -> None:
        self.token = token
        message = f"Malformed price {token!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InsufficientStockError(QuickMartError):
    """The catalog cannot cover the requested quantity."""

    def __init__(self, name: str, requested: int, available: int) -> None:
        self.name = name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {name!r}: requested {requested}, available {available}"
        )


class ItemNotFoundError(QuickMartError, LookupError):
    """No product or basket line matches the given name or position."""

    def __init__(self, key: str | int) -> None:
        self.key = key
        super().__init__(f"Item not found: {key!r}")


class InsufficientPaymentError(QuickMartError):
    """Cash tendered does not cover the basket total."""

    def __init__(self, total: Decimal, cash_tendered: Decimal) -> None:
        self.total = total
        self.cash_tendered = cash_tendered
        super().__init__(f"Insufficient payment: total {total}, cash {cash_tendered}")


class EmptyBasketError(QuickMartError):
    """Checkout was requested for a basket with no lines."""

    def __init__(self) -> None:
        super().__init__("The cart is empty.")


class PersistenceError(QuickMartError):
    """Reading or writing a backing file failed."""

    def __init__(self, path: Path, action: str) -> None:
        self.path = path
        self.action = action
        super().__init__(f"Failed to {action} {path}")
