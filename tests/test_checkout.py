"""End-to-end tests for the checkout orchestrator."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from quickmart.exceptions import InsufficientPaymentError, PersistenceError
from quickmart.models.basket import Basket
from quickmart.models.catalog import CatalogRecord, CustomerClass
from quickmart.repositories.catalog import CatalogStore
from quickmart.services.checkout import CheckoutService
from quickmart.services.ledger import TransactionLedger
from tests.consts import FIXED_NOW


def _basket(catalog: CatalogStore, customer_class: CustomerClass, **quantities: int) -> Basket:
    basket = Basket(customer_class=customer_class)
    for name, quantity in quantities.items():
        record = catalog.get(name)
        assert record is not None
        assert basket.add_item(record, quantity)
    return basket


def test_checkout_builds_transaction_record(
    catalog: CatalogStore, checkout_service: CheckoutService
) -> None:
    basket = _basket(catalog, CustomerClass.MEMBER, Soda=2, Milk=1)

    record = checkout_service.checkout(basket, Decimal("20.00"), catalog)

    assert record.number == 1
    assert record.timestamp == FIXED_NOW
    assert record.customer_class is CustomerClass.MEMBER
    assert [(line.name, line.quantity) for line in record.line_items] == [("Soda", 2), ("Milk", 1)]
    assert record.subtotal == Decimal("14.23")
    assert record.tax == Decimal("0.7137")
    assert record.total == Decimal("14.9437")
    assert record.cash_tendered == Decimal("20.00")
    assert record.change == Decimal("5.0563")
    assert record.member_savings == Decimal("1.25")
    assert record.total_item_count == 3


def test_checkout_decrements_and_saves_stock(
    catalog: CatalogStore, checkout_service: CheckoutService, inventory_file: Path
) -> None:
    basket = _basket(catalog, CustomerClass.REGULAR, Soda=2)

    checkout_service.checkout(basket, Decimal("12.7587"), catalog)

    soda = catalog.get("Soda")
    assert soda is not None and soda.stock == 8
    assert "Soda: 8, $5.99, $5.49, Taxable" in inventory_file.read_text(encoding="utf-8")


def test_checkout_does_not_modify_basket(
    catalog: CatalogStore, checkout_service: CheckoutService
) -> None:
    basket = _basket(catalog, CustomerClass.REGULAR, Soda=1)

    checkout_service.checkout(basket, Decimal("10"), catalog)

    assert basket.total_item_count() == 1


def test_insufficient_payment_changes_nothing(
    catalog: CatalogStore,
    checkout_service: CheckoutService,
    ledger: TransactionLedger,
    inventory_file: Path,
) -> None:
    before = inventory_file.read_text(encoding="utf-8")
    basket = _basket(catalog, CustomerClass.REGULAR, Soda=2)

    with pytest.raises(InsufficientPaymentError) as exc_info:
        checkout_service.checkout(basket, Decimal("12.75"), catalog)

    assert exc_info.value.total == Decimal("12.7587")
    assert ledger.peek == 1
    soda = catalog.get("Soda")
    assert soda is not None and soda.stock == 10
    assert inventory_file.read_text(encoding="utf-8") == before


def test_consecutive_checkouts_issue_sequential_numbers(
    catalog: CatalogStore, checkout_service: CheckoutService
) -> None:
    numbers = [
        checkout_service.checkout(
            _basket(catalog, CustomerClass.REGULAR, Milk=1), Decimal("5"), catalog
        ).number
        for _ in range(3)
    ]

    assert numbers == [1, 2, 3]
    milk = catalog.get("Milk")
    assert milk is not None and milk.stock == 2


def test_stock_is_clamped_at_zero(
    catalog: CatalogStore, checkout_service: CheckoutService
) -> None:
    """A basket built from a stale record cannot drive stock negative."""

    milk = catalog.get("Milk")
    assert milk is not None
    basket = Basket(customer_class=CustomerClass.REGULAR)
    basket.add_item(milk, 5)
    catalog.apply_stock_delta("Milk", 2)

    checkout_service.checkout(basket, Decimal("100"), catalog)

    milk = catalog.get("Milk")
    assert milk is not None and milk.stock == 0


def test_product_missing_from_catalog_is_skipped(
    catalog: CatalogStore, checkout_service: CheckoutService, soda: CatalogRecord
) -> None:
    stray = soda.model_copy(update={"name": "Stray"})
    basket = Basket(customer_class=CustomerClass.REGULAR)
    basket.add_item(stray, 1)

    record = checkout_service.checkout(basket, Decimal("10"), catalog)

    assert record.number == 1
    assert not catalog.has("Stray")


def test_catalog_save_failure_consumes_number(
    tmp_path: Path, checkout_service: CheckoutService, ledger: TransactionLedger, soda: CatalogRecord
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    catalog = CatalogStore.from_records(blocker / "inventory.txt", [soda])
    basket = Basket(customer_class=CustomerClass.REGULAR)
    basket.add_item(soda, 1)

    with pytest.raises(PersistenceError):
        checkout_service.checkout(basket, Decimal("10"), catalog)

    assert ledger.peek == 2


def test_exact_cash_gives_zero_change(
    catalog: CatalogStore, checkout_service: CheckoutService
) -> None:
    basket = _basket(catalog, CustomerClass.REGULAR, Milk=2)

    record = checkout_service.checkout(basket, Decimal("7.00"), catalog)

    assert record.change == 0
