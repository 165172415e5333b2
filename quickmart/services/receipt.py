from typing import Final

from quickmart.models.transaction import TransactionRecord
from quickmart.utils.money import format_money

SEPARATOR: Final[str] = "*" * 36
TAX_LABEL: Final[str] = "TAX (6.5%)"


def format_transaction_number(number: int) -> str:
    return f"{number:06d}"


class ReceiptRenderer:
    """Render a transaction record as the printed receipt text."""

    def render(self, record: TransactionRecord) -> str:
        timestamp = record.timestamp
        lines: list[str] = [
            f"{timestamp:%B} {timestamp.day}, {timestamp.year}",
            f"TRANSACTION: {format_transaction_number(record.number)}",
            "",
            f"{'ITEM':<12} {'QUANTITY':<10} {'UNIT PRICE':<12} {'TOTAL':<8}",
        ]
        for item in record.line_items:
            unit_price = f"${format_money(item.unit_price):<11}"
            line_total = f"${format_money(item.subtotal):<7}"
            lines.append(f"{item.name:<12} {item.quantity:<10} {unit_price} {line_total}")
        lines.extend(
            [
                "",
                SEPARATOR,
                f"TOTAL NUMBER OF ITEMS SOLD: {record.total_item_count}",
                f"SUB-TOTAL: ${format_money(record.subtotal)}",
                f"{TAX_LABEL}: ${format_money(record.tax)}",
                f"TOTAL: ${format_money(record.total)}",
                f"CASH: ${format_money(record.cash_tendered)}",
                f"CHANGE: ${format_money(record.change)}",
                "",
                SEPARATOR,
            ]
        )
        if record.shows_savings:
            lines.append(f"YOU SAVED: ${format_money(record.member_savings)}!")
        return "\n".join(lines) + "\n"
