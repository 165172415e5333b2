from __future__ import annotations

import logging
from pathlib import Path
from typing import TypedDict

import yaml

from quickmart.exceptions import PersistenceError
from quickmart.loaders.receipt_loader import transaction_file_stem
from quickmart.models.transaction import TransactionRecord

logger = logging.getLogger(__name__)


class LineRow(TypedDict):
    name: str
    quantity: int
    unit_price: str
    subtotal: str
    tax: str
    taxable: bool


class TransactionYAML(TypedDict):
    number: int
    timestamp: str
    customer_class: str
    items: list[LineRow]
    subtotal: str
    tax: str
    total: str
    cash_tendered: str
    change: str
    member_savings: str


class TransactionYamlLoader:
    """Persist transaction records as YAML journal entries.

    Amounts are written as decimal strings at full precision, e.g.:

    number: 42
    timestamp: '2026-10-19T14:03:11'
    customer_class: member
    items:
    - name: Soda
      quantity: 2
      unit_price: '5.49'
      ...
    total: '15.6574'
    """

    def __init__(self, output_dir: str | Path, indent: int = 2) -> None:
        """Create a YAML journal loader.

        Args:
            output_dir: Directory receiving one YAML file per transaction.
            indent: Indentation level for the YAML output.
        """
        self.output_dir: Path = Path(output_dir)
        self.indent: int = indent

    def _to_serializable(self, record: TransactionRecord) -> TransactionYAML:
        """Convert a record into plain Python structures suitable for YAML dumping."""
        items: list[LineRow] = [
            {
                "name": line.name,
                "quantity": line.quantity,
                "unit_price": str(line.unit_price),
                "subtotal": str(line.subtotal),
                "tax": str(line.tax),
                "taxable": line.record.taxable,
            }
            for line in record.line_items
        ]
        payload: TransactionYAML = {
            "number": record.number,
            "timestamp": record.timestamp.isoformat(),
            "customer_class": str(record.customer_class),
            "items": items,
            "subtotal": str(record.subtotal),
            "tax": str(record.tax),
            "total": str(record.total),
            "cash_tendered": str(record.cash_tendered),
            "change": str(record.change),
            "member_savings": str(record.member_savings),
        }
        return payload

    def path_for(self, record: TransactionRecord) -> Path:
        return self.output_dir / f"{transaction_file_stem(record)}.yaml"

    def load(self, record: TransactionRecord) -> Path:
        """Write ``record`` to its journal file and return the path.

        Raises:
            PersistenceError: When the journal entry cannot be written.
        """
        path = self.path_for(record)
        payload = self._to_serializable(record)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(
                    payload,
                    f,
                    allow_unicode=True,
                    sort_keys=False,
                    default_flow_style=False,
                    indent=self.indent,
                )
        except OSError as exc:
            logger.exception("Failed to write transaction journal to %s", path)
            raise PersistenceError(path, "write transaction journal") from exc
        return path
