from decimal import Decimal
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from quickmart.utils.money import exact_arithmetic

TAX_RATE: Final[Decimal] = Decimal("0.065")


class CustomerClass(StrEnum):
    """Pricing tier of the customer a basket is opened for."""

    MEMBER = "member"
    REGULAR = "regular"


class TaxStatus(StrEnum):
    """Tax literal used in the catalog file."""

    TAXABLE = "Taxable"
    TAX_EXEMPT = "Tax-Exempt"


class CatalogRecord(BaseModel):
    """One product of the store catalog.

    Records are immutable; a stock change replaces the record in the store.
    ``member_price <= regular_price`` is assumed but deliberately not checked,
    so a violating catalog yields negative member savings instead of a load error.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique, case-sensitive product name")
    stock: int = Field(..., ge=0, description="Units available for sale")
    regular_price: Decimal = Field(..., ge=0, description="Price for regular customers")
    member_price: Decimal = Field(..., ge=0, description="Price for rewards members")
    taxable: bool = Field(..., description="Whether lines of this product accrue sales tax")

    @property
    def tax_status(self) -> TaxStatus:
        return TaxStatus.TAXABLE if self.taxable else TaxStatus.TAX_EXEMPT

    @property
    def member_savings(self) -> Decimal:
        """Per-unit difference between the regular and the member price."""
        with exact_arithmetic():
            return self.regular_price - self.member_price

    def price_for(self, customer_class: CustomerClass) -> Decimal:
        if customer_class is CustomerClass.MEMBER:
            return self.member_price
        return self.regular_price

    def has_stock(self, quantity: int) -> bool:
        return self.stock >= quantity

    def with_stock(self, stock: int) -> "CatalogRecord":
        """Return a copy of this record carrying a new stock count.

        Raises:
            ValueError: When ``stock`` is negative.
        """
        if stock < 0:
            raise ValueError(f"stock must be non-negative, got {stock}")
        return self.model_copy(update={"stock": stock})
