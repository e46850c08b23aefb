"""Validation results and the flat checkout request sent to Stripe."""

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from greenroom.models.enums import ProductType
from greenroom.models.errors import FieldError
from greenroom.models.metadata import METADATA_MAX_KEYS, OrderPayload, split_metadata_value
from greenroom.models.pricing import PriceBreakdown


class ValidOrder(BaseModel):
    """An eligible order ready to be turned into a checkout request."""

    model_config = ConfigDict(frozen=True)

    product_type: ProductType
    amount: Decimal = Field(..., ge=0)
    breakdown: PriceBreakdown
    payload: OrderPayload
    customer_email: Optional[str] = None


class ValidationResult(BaseModel):
    """Outcome of validating an order draft.

    ``amount`` is always computed, even when the order is not eligible, so
    the form can show a running total.
    """

    model_config = ConfigDict(frozen=True)

    product_type: ProductType
    eligible: bool
    amount: Decimal
    breakdown: PriceBreakdown
    errors: list[FieldError] = Field(default_factory=list)
    order: Optional[ValidOrder] = Field(
        default=None, exclude=True, description="Set only when eligible"
    )


class CheckoutRequest(BaseModel):
    """Flat ``{type, amount, metadata}`` payload for Stripe Checkout.

    Accepts ``type`` or ``productType`` for the product and ``metadata`` or
    ``meta`` for the metadata map. ``amount`` is in major currency units.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_type: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("product_type", "type", "productType"),
    )
    amount: Decimal = Field(..., gt=0, description="Amount in major currency units")
    metadata: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metadata", "meta"),
    )
    customer_email: Optional[str] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_metadata(cls, value):
        if not isinstance(value, dict):
            return value
        # Stripe metadata values are strings; nested values become JSON text
        flat: dict[str, str] = {}
        for key, item in value.items():
            if item is None:
                continue
            if isinstance(item, bool):
                flat[str(key)] = "true" if item else "false"
            elif isinstance(item, (dict, list)):
                flat[str(key)] = json.dumps(item, separators=(",", ":"))
            else:
                flat[str(key)] = str(item)
        split: dict[str, str] = {}
        for key, text in flat.items():
            split.update(split_metadata_value(key, text))
        if len(split.keys() | {"type"}) > METADATA_MAX_KEYS:
            raise ValueError(f"metadata needs more than {METADATA_MAX_KEYS} keys")
        return split

    @property
    def amount_cents(self) -> int:
        """Amount in the smallest currency unit, rounded half up."""
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def stripe_metadata(self) -> dict[str, str]:
        """Metadata with the ``type`` key always set to the product type."""
        return {**self.metadata, "type": self.product_type}


class CheckoutSession(BaseModel):
    """A created Stripe Checkout session."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Hosted checkout URL to redirect the customer to")
    session_id: str = Field(..., description="Stripe Checkout session ID")
