from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ShippingBox(BaseModel):
    """Box catalog entry with outer dimensions and optimizer cost."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier for the box")
    name: str = Field(description="Human readable box name")
    width: float = Field(gt=0, description="Width of the box")
    length: float = Field(gt=0, description="Length of the box")
    height: float = Field(gt=0, description="Height of the box")
    cost: float = Field(default=1.0, ge=0, description="Packaging cost weight (lower is preferred)")
    max_weight: Optional[float] = Field(
        default=None,
        gt=0,
        description="Maximum total item weight the box may hold")


class PackableItem(BaseModel):
    """One shippable unit type, expanded into `quantity` physical instances."""

    id: str = Field(description="SKU used as item identity within a packing run")
    width: float = Field(gt=0, description="Width of one unit")
    length: float = Field(gt=0, description="Length of one unit")
    height: float = Field(gt=0, description="Height of one unit")
    weight: float = Field(gt=0, description="Weight of one unit")
    quantity: int = Field(gt=0, description="Count of identical units")


class ItemInstance(BaseModel):
    """A single physical unit of a PackableItem."""

    model_config = ConfigDict(frozen=True)

    id: str
    seq: int = Field(ge=0, description="Position of the instance in the expanded input")
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    height: float = Field(gt=0)
    weight: float = Field(gt=0)


class Placement(BaseModel):
    """Placement of an instance inside a box, with its oriented dimensions."""

    item_id: str = Field(description="Identifier of the placed item")
    seq: int = Field(ge=0, description="Sequence number of the placed instance")
    x: float = Field(ge=0, description="X coordinate (along length)")
    y: float = Field(ge=0, description="Y coordinate (along width)")
    z: float = Field(ge=0, description="Z coordinate (along height)")

    # Oriented dimensions after rotation: (L, W, H)
    rotation: Tuple[float, float, float] = Field(
        description="Oriented dimensions (L, W, H) of the placed instance"
    )


class ParcelItem(BaseModel):
    id: str
    quantity: int = Field(gt=0)


class PackedParcel(BaseModel):
    """One output box instance with its grouped contents."""

    box_id: str
    box_name: str
    width: float
    length: float
    height: float
    weight: float = Field(description="Sum of contained unit weights, rounded to 2 decimals")
    items: list[ParcelItem] = Field(default_factory=list)
    fill_rate: float = 0.0


class PackingResult(BaseModel):
    """Detailed packer output: parcels plus anything that fit no box."""

    parcels: list[PackedParcel] = Field(default_factory=list)
    unpacked: list[ItemInstance] = Field(default_factory=list)


class Address(BaseModel):
    """Canonical shipping endpoint. Optional fields are empty strings, never None."""

    name: str
    company: str = ""
    street1: str
    street2: str = ""
    city: str
    state: str = ""
    zip: str
    country: str
    phone: str = ""
    email: str = ""


class ProviderParcel(BaseModel):
    """Parcel in the rate provider's wire format (all values are strings)."""

    length: str
    width: str
    height: str
    distance_unit: str
    weight: str
    mass_unit: str


class CustomsItem(BaseModel):
    description: str
    quantity: int = Field(gt=0)
    net_weight: str
    mass_unit: str
    value_amount: str
    value_currency: str
    origin_country: str
    hs_code: Optional[str] = None


class CustomsDeclaration(BaseModel):
    contents_type: Literal["MERCHANDISE"] = "MERCHANDISE"
    contents_explanation: str
    non_delivery_option: Literal["RETURN"] = "RETURN"
    certify: bool = True
    certify_signer: str
    commercial_invoice: bool = True
    incoterm: Literal["DDP", "DDU"]
    items: list[CustomsItem]


class ServiceLevel(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    token: Optional[str] = None


class ShippingRate(BaseModel):
    """One carrier quote. Provider-specific extra fields are preserved."""

    model_config = ConfigDict(extra="allow")

    object_id: Optional[str] = None
    amount: str
    currency: str
    provider: str = ""
    servicelevel: ServiceLevel = Field(default_factory=ServiceLevel)
    duration_terms: Optional[str] = None
    days: Optional[int] = None
    display_name: Optional[str] = None
    display_time: Optional[str] = None


class CalculateRatesResult(BaseModel):
    parcels: list[ProviderParcel]
    rates: list[ShippingRate]
    customs_declaration: Optional[CustomsDeclaration] = None
    packing_result: list[PackedParcel]


# Catalog records supplied by the catalog store. Shipping fields are optional
# because the store may not have them configured; the pipeline checks them.

class Dimensions(BaseModel):
    width: Optional[float] = None
    length: Optional[float] = None
    height: Optional[float] = None


class ShippingOrigin(BaseModel):
    """Warehouse or supplier location that ships a product."""

    name: str
    address: Optional[dict[str, Any]] = None
    incoterm: Optional[str] = None


class Product(BaseModel):
    id: str
    name: Optional[str] = Field(default=None, description="Translated product name")
    weight: Optional[float] = None
    dimensions: Optional[Dimensions] = None
    origin_country: Optional[str] = None
    hs_code: Optional[str] = None
    export_explanation: Optional[str] = None
    shipping_origin: Optional[ShippingOrigin] = None


class Pricing(BaseModel):
    price: Optional[Decimal] = None
    currency: Optional[str] = None


class Variant(BaseModel):
    id: str
    sku: str
    weight: Optional[float] = None
    dimensions: Optional[Dimensions] = None
    pricing: Optional[Pricing] = None
    product: Product


class ShippingItem(BaseModel):
    variant: Variant
    quantity: int = Field(gt=0)
