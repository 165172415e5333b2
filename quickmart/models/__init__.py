from .basket import Basket
from .catalog import TAX_RATE, CatalogRecord, CustomerClass, TaxStatus
from .line_item import LineItem
from .transaction import TransactionRecord

__all__ = [
    "Basket",
    "CatalogRecord",
    "CustomerClass",
    "LineItem",
    "TAX_RATE",
    "TaxStatus",
    "TransactionRecord",
]
