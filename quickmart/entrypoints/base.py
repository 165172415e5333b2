import logging

from quickmart.config import StoreConfig
from quickmart.loaders.receipt_loader import ReceiptLoader
from quickmart.loaders.yaml_loader import TransactionYamlLoader
from quickmart.repositories.catalog import CatalogStore
from quickmart.repositories.counter import FileCounterStore
from quickmart.services.checkout import CheckoutService
from quickmart.services.ledger import TransactionLedger
from quickmart.services.session import RegisterSession

logger = logging.getLogger(__name__)


def build_catalog(config: StoreConfig) -> CatalogStore:
    """Create the catalog store and load it from disk.

    Args:
        config: Register file locations.

    Returns:
        CatalogStore: Loaded catalog; skipped lines have already been logged.
    """
    catalog = CatalogStore(config.inventory_file)
    report = catalog.load()
    if not report.ok:
        logger.warning(
            "%d line(s) of %s were skipped", len(report.skipped), config.inventory_file
        )
    return catalog


def build_ledger(config: StoreConfig) -> TransactionLedger:
    return TransactionLedger(FileCounterStore(config.counter_file))


def build_session(config: StoreConfig) -> RegisterSession:
    """Wire a register session from configuration.

    Args:
        config: Register file locations.

    Returns:
        RegisterSession: Session with an empty regular-customer basket.
    """
    journal_loader = (
        TransactionYamlLoader(config.journal_dir) if config.journal_dir is not None else None
    )
    return RegisterSession(
        catalog=build_catalog(config),
        checkout_service=CheckoutService(ledger=build_ledger(config)),
        receipt_loader=ReceiptLoader(config.receipts_dir),
        journal_loader=journal_loader,
    )
