"""Data schemas for API input/output."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Per request line; the service also caps total units per quote
MAX_LINE_QUANTITY = 100
MAX_REQUEST_LINES = 50


class ShippingRequestItem(BaseModel):
    """One requested variant and its quantity."""

    model_config = ConfigDict(populate_by_name=True)

    variant_id: str = Field(alias="variantId", min_length=1, description="Variant identifier")
    quantity: int = Field(gt=0, le=MAX_LINE_QUANTITY, description="Requested quantity")


class ShippingRequest(BaseModel):
    """Schema for a shipping rates request."""

    model_config = ConfigDict(populate_by_name=True)

    address_to: dict[str, Any] = Field(alias="addressTo", description="Destination address (loosely typed)")
    items: List[ShippingRequestItem] = Field(default_factory=list, max_length=MAX_REQUEST_LINES, description="Explicit items; overrides the cart")
    cart_id: Optional[str] = Field(default=None, alias="cartId", description="Cart to resolve items from")


class ShippingRatesResponse(BaseModel):
    """Schema for a shipping rates response."""

    rates: List[dict[str, Any]] = Field(description="Ranked shipping options, cheapest first")
