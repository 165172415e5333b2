from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from quickmart.exceptions import InsufficientPaymentError
from quickmart.models.basket import Basket
from quickmart.models.transaction import TransactionRecord
from quickmart.repositories.catalog import CatalogStore
from quickmart.services.ledger import TransactionLedger
from quickmart.utils.money import exact_arithmetic

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class CheckoutService(BaseModel):
    """Turn a paid basket into a numbered transaction and commit its stock.

    There is no rollback: once a number is issued, a failure while saving the
    catalog leaves the number consumed and the catalog partly updated. Such a
    ``PersistenceError`` must be treated as fatal by the caller.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    ledger: TransactionLedger
    clock: Clock = Field(default=datetime.now)
    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def checkout(
        self, basket: Basket, cash_tendered: Decimal, catalog_store: CatalogStore
    ) -> TransactionRecord:
        """Check out ``basket`` against ``catalog_store``.

        Args:
            basket: Basket to sell. It is read, never modified.
            cash_tendered: Cash handed over by the customer.
            catalog_store: Catalog whose stock is decremented and saved.

        Returns:
            The completed transaction record.

        Raises:
            InsufficientPaymentError: When cash is below the basket total.
                Nothing is changed in that case.
            PersistenceError: When the counter or the catalog cannot be saved.
        """
        with self._lock:
            total = basket.total()
            if cash_tendered < total:
                raise InsufficientPaymentError(total=total, cash_tendered=cash_tendered)

            number = self.ledger.next()
            lines = tuple(basket.items)

            for line in lines:
                record = catalog_store.get(line.name)
                if record is None:
                    logger.warning(
                        "Transaction %d: %s is no longer in the catalog, stock not updated",
                        number,
                        line.name,
                    )
                    continue
                catalog_store.apply_stock_delta(line.name, max(record.stock - line.quantity, 0))

            catalog_store.save()

            subtotal = basket.subtotal()
            tax = basket.tax()
            with exact_arithmetic():
                change = cash_tendered - total
            transaction = TransactionRecord(
                number=number,
                timestamp=self.clock(),
                customer_class=basket.customer_class,
                line_items=lines,
                subtotal=subtotal,
                tax=tax,
                total=total,
                cash_tendered=cash_tendered,
                change=change,
                member_savings=basket.member_savings(),
            )

        logger.info(
            "Transaction %06d completed: %d items, total %s", number, transaction.total_item_count, total
        )
        return transaction
