from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from parcel_optimizer.config import ShippingSettings
from parcel_optimizer.models import (
    Dimensions,
    Pricing,
    Product,
    ShippingItem,
    ShippingOrigin,
    Variant,
)

WAREHOUSE_ADDRESS: dict[str, Any] = {
    "street1": "100 Rue Industrielle",
    "city": "Montreal",
    "state": "QC",
    "postalCode": "H2X 1Y4",
    "country": "CA",
    "phone": "+15145550100",
}

CA_DESTINATION: dict[str, Any] = {
    "name": "John Doe",
    "street1": "123 Test St",
    "city": "Montreal",
    "state": "QC",
    "zip": "H1H 1H1",
    "country": "CA",
}

FR_DESTINATION: dict[str, Any] = {
    "name": "Jeanne Martin",
    "street1": "10 Rue de Rivoli",
    "city": "Paris",
    "zip": "75001",
    "country": "fr",
}


def make_item(
    sku: str = "SKU-A",
    quantity: int = 1,
    *,
    weight: float | None = 1.0,
    dims: tuple[float, float, float] | None = (20.0, 15.0, 10.0),
    product_weight: float | None = None,
    product_dims: tuple[float, float, float] | None = None,
    price: str | None = "25.00",
    currency: str | None = "CAD",
    name: str | None = "Ceramic Mug",
    origin_country: str | None = "CA",
    hs_code: str | None = "6912.00",
    export_explanation: str | None = "Handmade ceramic tableware",
    incoterm: str | None = "DDP",
    origin: ShippingOrigin | None | str = "default",
) -> ShippingItem:
    """Build a ShippingItem; dims are (width, length, height)."""

    def _dims(values: tuple[float, float, float] | None) -> Dimensions | None:
        if values is None:
            return None
        w, l, h = values
        return Dimensions(width=w, length=l, height=h)

    if origin == "default":
        origin = ShippingOrigin(name="Acme Warehouse", address=dict(WAREHOUSE_ADDRESS), incoterm=incoterm)

    product = Product(
        id=f"prod-{sku}",
        name=name,
        weight=product_weight,
        dimensions=_dims(product_dims),
        origin_country=origin_country,
        hs_code=hs_code,
        export_explanation=export_explanation,
        shipping_origin=origin,
    )
    variant = Variant(
        id=f"var-{sku}",
        sku=sku,
        weight=weight,
        dimensions=_dims(dims),
        pricing=Pricing(price=Decimal(price), currency=currency) if price is not None else Pricing(currency=currency),
        product=product,
    )
    return ShippingItem(variant=variant, quantity=quantity)


@pytest.fixture
def settings() -> ShippingSettings:
    return ShippingSettings()


@pytest.fixture
def ups_only_settings() -> ShippingSettings:
    return ShippingSettings(providers_filter=("ups",))
