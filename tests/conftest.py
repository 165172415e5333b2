from __future__ import annotations

import shutil
from decimal import Decimal
from pathlib import Path

import pytest

from quickmart.models.catalog import CatalogRecord
from quickmart.repositories.catalog import CatalogStore
from quickmart.repositories.counter import InMemoryCounterStore
from quickmart.services.checkout import CheckoutService
from quickmart.services.ledger import TransactionLedger
from tests.consts import FIXED_NOW, SAMPLE_INVENTORY


@pytest.fixture
def soda() -> CatalogRecord:
    return CatalogRecord(
        name="Soda",
        stock=10,
        regular_price=Decimal("5.99"),
        member_price=Decimal("5.49"),
        taxable=True,
    )


@pytest.fixture
def milk() -> CatalogRecord:
    return CatalogRecord(
        name="Milk",
        stock=5,
        regular_price=Decimal("3.50"),
        member_price=Decimal("3.25"),
        taxable=False,
    )


@pytest.fixture
def inventory_file(tmp_path: Path) -> Path:
    """Writable copy of the sample catalog."""
    path = tmp_path / "inventory.txt"
    shutil.copyfile(SAMPLE_INVENTORY, path)
    return path


@pytest.fixture
def catalog(inventory_file: Path) -> CatalogStore:
    store = CatalogStore(inventory_file)
    store.load()
    return store


@pytest.fixture
def counter_store() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def ledger(counter_store: InMemoryCounterStore) -> TransactionLedger:
    return TransactionLedger(counter_store)


@pytest.fixture
def checkout_service(ledger: TransactionLedger) -> CheckoutService:
    return CheckoutService(ledger=ledger, clock=lambda: FIXED_NOW)
