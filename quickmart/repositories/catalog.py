from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Final

from pydantic import BaseModel, Field

from quickmart.exceptions import PersistenceError
from quickmart.models.catalog import CatalogRecord, TaxStatus
from quickmart.services.price_parser import parse_price
from quickmart.utils.money import format_money

logger = logging.getLogger(__name__)

FIELD_SEPARATOR: Final[str] = ", "
FIELD_COUNT: Final[int] = 4


class SkippedLine(BaseModel):
    line_number: int = Field(..., ge=1, description="1-based line in the catalog file")
    text: str = Field(..., description="Raw line content")
    reason: str = Field(..., description="Why the line was not loaded")


class CatalogLoadReport(BaseModel):
    """Outcome of a catalog load.

    Loading is not all-or-nothing: good lines are kept even when other lines
    are skipped, so callers should check ``skipped`` before trusting the file.
    """

    loaded: int = Field(default=0, ge=0, description="Distinct products in the catalog")
    skipped: list[SkippedLine] = Field(default_factory=list)
    duplicates: list[str] = Field(
        default_factory=list, description="Names defined again by a later line; last one wins"
    )

    @property
    def ok(self) -> bool:
        return not self.skipped


def parse_catalog_line(line: str) -> CatalogRecord:
    """Parse ``Name: quantity, $regular, $member, TaxStatus`` into a record.

    Raises:
        ValueError: When the layout, a number or a field constraint is wrong.
            ``MalformedPriceError`` and pydantic's ``ValidationError`` are both
            ``ValueError`` subclasses.
    """
    name, colon, remainder = line.partition(":")
    if not colon:
        raise ValueError("missing ':' after the product name")

    fields = remainder.strip().split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise ValueError(f"expected {FIELD_COUNT} fields, found {len(fields)}")

    quantity_text, regular_text, member_text, tax_text = (f.strip() for f in fields)
    if "_" in quantity_text:
        raise ValueError(f"invalid quantity {quantity_text!r}")
    return CatalogRecord(
        name=name.strip(),
        stock=int(quantity_text),
        regular_price=parse_price(regular_text),
        member_price=parse_price(member_text),
        taxable=tax_text == TaxStatus.TAXABLE,
    )


def format_catalog_line(record: CatalogRecord) -> str:
    """Render a record in the catalog file layout with two-decimal prices."""
    return (
        f"{record.name}: {record.stock}, "
        f"${format_money(record.regular_price)}, "
        f"${format_money(record.member_price)}, "
        f"{record.tax_status}"
    )


class CatalogStore:
    """Product catalog keyed by name and backed by a flat text file.

    Record order follows the file, which gives callers stable 1-based positions.
    """

    def __init__(self, path: str | Path) -> None:
        self.path: Path = Path(path)
        self._records: dict[str, CatalogRecord] = {}

    @classmethod
    def from_records(cls, path: str | Path, records: list[CatalogRecord]) -> CatalogStore:
        store = cls(path)
        for record in records:
            store._records[record.name] = record
        return store

    def load(self) -> CatalogLoadReport:
        """Replace the in-memory catalog with the file contents.

        Blank lines are ignored. Malformed lines are logged and skipped; a
        missing file leaves the catalog empty.

        Raises:
            PersistenceError: When the file exists but cannot be read.
        """
        self._records.clear()
        report = CatalogLoadReport()

        try:
            with self.path.open("r", encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        except FileNotFoundError:
            logger.warning("Catalog file %s does not exist, starting empty", self.path)
            return report
        except (OSError, UnicodeDecodeError) as exc:
            logger.exception("Failed to read catalog from %s", self.path)
            raise PersistenceError(self.path, "read catalog") from exc

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = parse_catalog_line(line)
            except ValueError as exc:
                logger.warning("Skipping catalog line %d (%r): %s", line_number, line, exc)
                report.skipped.append(
                    SkippedLine(line_number=line_number, text=line, reason=str(exc))
                )
                continue
            if record.name in self._records:
                logger.warning(
                    "Catalog line %d redefines %s, replacing the earlier entry",
                    line_number,
                    record.name,
                )
                report.duplicates.append(record.name)
            self._records[record.name] = record

        report.loaded = len(self._records)

        logger.debug(
            "Loaded %d catalog records from %s (%d skipped)",
            report.loaded,
            self.path,
            len(report.skipped),
        )
        return report

    def save(self) -> None:
        """Rewrite the whole file from the current records.

        Prices are written with two decimals, so extra precision read from the
        file is lost.

        Raises:
            PersistenceError: When the file cannot be written.
        """
        text = "".join(f"{format_catalog_line(record)}\n" for record in self._records.values())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as exc:
            logger.exception("Failed to write catalog to %s", self.path)
            raise PersistenceError(self.path, "write catalog") from exc

    def get(self, name: str) -> CatalogRecord | None:
        return self._records.get(name)

    def has(self, name: str) -> bool:
        return name in self._records

    def all(self) -> Iterator[CatalogRecord]:
        """Iterate records in catalog order; each call starts a fresh pass."""
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def apply_stock_delta(self, name: str, new_quantity: int) -> None:
        """Overwrite the stock of ``name`` with ``new_quantity``.

        The caller computes the new quantity; unknown names are ignored.
        """
        record = self._records.get(name)
        if record is None:
            logger.debug("Ignoring stock update for unknown product %s", name)
            return
        self._records[name] = record.with_stock(new_quantity)
