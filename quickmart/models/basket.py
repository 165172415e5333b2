from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from quickmart.models.catalog import CatalogRecord, CustomerClass
from quickmart.models.line_item import LineItem
from quickmart.utils.money import exact_arithmetic

logger = logging.getLogger(__name__)


class Basket(BaseModel):
    """Line items of one customer session.

    Assumptions carried by every basket:
    - the customer class is fixed for the basket's lifetime;
    - there is at most one line per product name and its quantity is positive;
    - stock is checked against the catalog record handed to ``add_item``;
    - aggregates are computed at full precision and rounded only for display.
    """

    model_config = ConfigDict(frozen=True)

    customer_class: CustomerClass = Field(..., description="Pricing tier of the session")
    _lines: dict[str, LineItem] = PrivateAttr(default_factory=dict)

    @property
    def is_member(self) -> bool:
        return self.customer_class is CustomerClass.MEMBER

    def add_item(self, record: CatalogRecord, quantity: int) -> bool:
        """Add ``quantity`` units of ``record``, merging with an existing line.

        Args:
            record: Current catalog record of the product.
            quantity: Units to add, must be positive.

        Returns:
            True when the basket changed, False when stock cannot cover the
            requested (or merged) quantity. A refused add leaves the basket untouched.
        """
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        if not record.has_stock(quantity):
            return False

        existing = self._lines.get(record.name)
        if existing is None:
            self._lines[record.name] = LineItem.create(record, quantity, self.customer_class)
            return True

        merged = existing.quantity + quantity
        if not record.has_stock(merged):
            logger.debug(
                "Refusing merge of %s: %d in basket + %d requested > %d in stock",
                record.name,
                existing.quantity,
                quantity,
                record.stock,
            )
            return False
        # Re-priced from the current record; dict assignment keeps the position.
        self._lines[record.name] = LineItem.create(record, merged, self.customer_class)
        return True

    def remove_item(self, name: str, quantity: int) -> bool:
        """Take ``quantity`` units of ``name`` out of the basket.

        A quantity at or above the line quantity drops the line. Zero is a
        literal decrement by zero; callers that mean "remove all" must say so.

        Returns:
            False when no line exists for ``name``.
        """
        if quantity < 0:
            raise ValueError(f"quantity must not be negative, got {quantity}")
        line = self._lines.get(name)
        if line is None:
            return False
        if quantity >= line.quantity:
            del self._lines[name]
        elif quantity > 0:
            self._lines[name] = line.with_quantity(line.quantity - quantity)
        return True

    def clear(self) -> None:
        self._lines.clear()

    def get(self, name: str) -> LineItem | None:
        return self._lines.get(name)

    @property
    def items(self) -> list[LineItem]:
        """Snapshot of the lines in insertion order."""
        return list(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def subtotal(self) -> Decimal:
        with exact_arithmetic():
            return sum((line.subtotal for line in self._lines.values()), Decimal("0"))

    def tax(self) -> Decimal:
        with exact_arithmetic():
            return sum((line.tax for line in self._lines.values()), Decimal("0"))

    def total(self) -> Decimal:
        with exact_arithmetic():
            return self.subtotal() + self.tax()

    def member_savings(self) -> Decimal:
        if not self.is_member:
            return Decimal("0")
        with exact_arithmetic():
            return sum((line.member_savings for line in self._lines.values()), Decimal("0"))

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())
