from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quickmart.models.catalog import TAX_RATE, CatalogRecord, CustomerClass
from quickmart.utils.money import exact_arithmetic


class LineItem(BaseModel):
    """A product, a quantity and the unit price locked in when it was added."""

    model_config = ConfigDict(frozen=True)

    record: CatalogRecord = Field(..., description="Catalog snapshot taken at add time")
    quantity: int = Field(..., gt=0, description="Units of the product in the basket")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit frozen at add time")

    @classmethod
    def create(
        cls, record: CatalogRecord, quantity: int, customer_class: CustomerClass
    ) -> "LineItem":
        return cls(
            record=record,
            quantity=quantity,
            unit_price=record.price_for(customer_class),
        )

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def subtotal(self) -> Decimal:
        with exact_arithmetic():
            return self.unit_price * self.quantity

    @property
    def tax(self) -> Decimal:
        """Unrounded tax for the line; zero for exempt products."""
        if self.record.taxable:
            with exact_arithmetic():
                return self.subtotal * TAX_RATE
        return Decimal("0")

    @property
    def member_savings(self) -> Decimal:
        with exact_arithmetic():
            return self.record.member_savings * self.quantity

    def with_quantity(self, quantity: int) -> "LineItem":
        return LineItem(record=self.record, quantity=quantity, unit_price=self.unit_price)
