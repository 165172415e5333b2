from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from quickmart.exceptions import (
    EmptyBasketError,
    InsufficientStockError,
    ItemNotFoundError,
    PersistenceError,
)
from quickmart.loaders.receipt_loader import ReceiptLoader
from quickmart.loaders.yaml_loader import TransactionYamlLoader
from quickmart.models.basket import Basket
from quickmart.models.catalog import CatalogRecord, CustomerClass
from quickmart.models.line_item import LineItem
from quickmart.models.transaction import TransactionRecord
from quickmart.repositories.catalog import CatalogStore
from quickmart.services.checkout import CheckoutService

logger = logging.getLogger(__name__)


class CheckoutResult(BaseModel):
    """A recorded transaction and the artifacts that could be written for it."""

    transaction: TransactionRecord
    receipt_path: Path | None = None
    journal_path: Path | None = None
    artifact_errors: list[str] = Field(default_factory=list)

    @property
    def artifacts_saved(self) -> bool:
        return not self.artifact_errors


class RegisterSession(BaseModel):
    """Register operations for the customer currently at the counter.

    Callers address catalog records and basket lines by name or by their
    1-based position in the listings. Prompting and input validation stay
    with the caller.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    catalog: CatalogStore
    checkout_service: CheckoutService
    basket: Basket = Field(default_factory=lambda: Basket(customer_class=CustomerClass.REGULAR))
    receipt_loader: ReceiptLoader | None = None
    journal_loader: TransactionYamlLoader | None = None

    def new_customer(self, customer_class: CustomerClass) -> Basket:
        """Start an empty basket for the next customer."""
        self.basket = Basket(customer_class=customer_class)
        return self.basket

    def catalog_listing(self) -> list[tuple[int, CatalogRecord]]:
        return list(enumerate(self.catalog.all(), start=1))

    def record_at(self, position: int) -> CatalogRecord:
        for current, record in enumerate(self.catalog.all(), start=1):
            if current == position:
                return record
        raise ItemNotFoundError(position)

    def basket_listing(self) -> list[tuple[int, LineItem]]:
        return list(enumerate(self.basket.items, start=1))

    def line_at(self, position: int) -> LineItem:
        items = self.basket.items
        if not 1 <= position <= len(items):
            raise ItemNotFoundError(position)
        return items[position - 1]

    def _resolve_record(self, product: str | int) -> CatalogRecord:
        if isinstance(product, int):
            return self.record_at(product)
        record = self.catalog.get(product)
        if record is None:
            raise ItemNotFoundError(product)
        return record

    def add(self, product: str | int, quantity: int) -> None:
        """Add ``quantity`` units of a product given by name or catalog position.

        Raises:
            ItemNotFoundError: When the product is unknown.
            InsufficientStockError: When stock cannot cover the basket quantity.
        """
        record = self._resolve_record(product)
        if not self.basket.add_item(record, quantity):
            in_basket = self.basket.get(record.name)
            requested = quantity + (in_basket.quantity if in_basket else 0)
            raise InsufficientStockError(record.name, requested=requested, available=record.stock)

    def remove(self, name: str, quantity: int = 0) -> None:
        """Remove units of ``name`` from the basket; ``0`` removes the whole line.

        Raises:
            ItemNotFoundError: When the basket has no line for ``name``.
        """
        line = self.basket.get(name)
        if line is None:
            raise ItemNotFoundError(name)
        self.basket.remove_item(name, line.quantity if quantity == 0 else quantity)

    def clear(self) -> None:
        self.basket.clear()

    def cancel(self) -> None:
        logger.info("Transaction cancelled with %d lines", len(self.basket))
        self.basket.clear()

    def checkout(self, cash_tendered: Decimal) -> CheckoutResult:
        """Check out the current basket and persist its receipt.

        The basket is cleared once the transaction is recorded. A receipt or
        journal entry that cannot be written does not undo the sale: the
        failure is logged and listed in ``artifact_errors``.

        Raises:
            EmptyBasketError: When the basket has no lines.
            InsufficientPaymentError: When cash is below the total.
            PersistenceError: When the counter or catalog cannot be saved.
        """
        if self.basket.is_empty():
            raise EmptyBasketError()

        transaction = self.checkout_service.checkout(self.basket, cash_tendered, self.catalog)
        self.basket.clear()

        result = CheckoutResult(transaction=transaction)
        if self.receipt_loader is not None:
            try:
                result.receipt_path = self.receipt_loader.load(transaction)
            except PersistenceError as exc:
                logger.error(
                    "Transaction %06d recorded but its receipt was not saved", transaction.number
                )
                result.artifact_errors.append(str(exc))
        if self.journal_loader is not None:
            try:
                result.journal_path = self.journal_loader.load(transaction)
            except PersistenceError as exc:
                logger.error(
                    "Transaction %06d recorded but its journal entry was not saved",
                    transaction.number,
                )
                result.artifact_errors.append(str(exc))
        return result
