from __future__ import annotations

import logging
from pathlib import Path

from quickmart.exceptions import PersistenceError
from quickmart.models.transaction import TransactionRecord
from quickmart.services.receipt import ReceiptRenderer, format_transaction_number

logger = logging.getLogger(__name__)


def transaction_file_stem(record: TransactionRecord) -> str:
    """Base file name shared by every artifact of a transaction."""
    return f"transaction_{format_transaction_number(record.number)}_{record.timestamp:%Y%m%d}"


class ReceiptLoader:
    """Persist rendered receipts as text files, one per transaction."""

    def __init__(self, output_dir: str | Path, renderer: ReceiptRenderer | None = None) -> None:
        """Create a receipt loader.

        Args:
            output_dir: Directory receiving ``transaction_<number>_<date>.txt`` files.
            renderer: Receipt renderer; a default one is used when omitted.
        """
        self.output_dir: Path = Path(output_dir)
        self.renderer: ReceiptRenderer = renderer or ReceiptRenderer()

    def path_for(self, record: TransactionRecord) -> Path:
        return self.output_dir / f"{transaction_file_stem(record)}.txt"

    def load(self, record: TransactionRecord) -> Path:
        """Write the receipt of ``record`` and return the file path.

        Raises:
            PersistenceError: When the receipt cannot be written.
        """
        path = self.path_for(record)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                f.write(self.renderer.render(record))
        except OSError as exc:
            logger.exception("Failed to write receipt to %s", path)
            raise PersistenceError(path, "write receipt") from exc
        logger.info("Receipt saved as %s", path)
        return path
