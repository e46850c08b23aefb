"""Price breakdown model shared by all products."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PriceBreakdown(BaseModel):
    """Result of a price calculation.

    All amounts are in major currency units (dollars).
    ``total = max(0, subtotal - discount) + enhancement_total``.
    """

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal = Field(default=Decimal("0"), description="Base price before adjustments")
    discount: Decimal = Field(default=Decimal("0"), description="Member discount applied")
    enhancement_total: Decimal = Field(
        default=Decimal("0"), description="Menu enhancement surcharges"
    )
    total: Decimal = Field(default=Decimal("0"), ge=0, description="Amount charged")
