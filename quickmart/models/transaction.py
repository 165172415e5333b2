from datetime import datetime
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from quickmart.models.catalog import CustomerClass
from quickmart.models.line_item import LineItem
from quickmart.utils.money import exact_arithmetic


class TransactionRecord(BaseModel):
    """Immutable result of a completed checkout. Amounts are unrounded."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., gt=0, description="Sequential transaction number")
    timestamp: datetime = Field(..., description="Moment the transaction was recorded")
    customer_class: CustomerClass = Field(..., description="Pricing tier of the basket")
    line_items: tuple[LineItem, ...] = Field(..., description="Basket lines at checkout")
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    cash_tendered: Decimal
    change: Decimal = Field(..., ge=0)
    member_savings: Decimal

    @model_validator(mode="after")
    def validate_amounts(self) -> Self:
        """Ensure the stored figures agree with each other."""

        with exact_arithmetic():
            if self.total != self.subtotal + self.tax:
                raise ValueError("total must equal subtotal + tax")
            if self.change != self.cash_tendered - self.total:
                raise ValueError("change must equal cash_tendered - total")
        return self

    @property
    def total_item_count(self) -> int:
        return sum(line.quantity for line in self.line_items)

    @property
    def shows_savings(self) -> bool:
        return self.customer_class is CustomerClass.MEMBER and self.member_savings > 0
