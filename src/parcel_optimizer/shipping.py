"""Shipping rate orchestration: address -> origin -> packing -> customs -> rates."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from parcel_optimizer.addresses import validate_address
from parcel_optimizer.catalog import CatalogStore
from parcel_optimizer.config import ShippingSettings
from parcel_optimizer.customs import CustomsService
from parcel_optimizer.errors import NoSuitableBoxError, RequestTooLargeError, ShippingDataMissingError
from parcel_optimizer.io.schemas import ShippingRequest
from parcel_optimizer.models import (
    Address,
    CalculateRatesResult,
    PackableItem,
    PackedParcel,
    ProviderParcel,
    ShippingItem,
    ShippingRate,
)
from parcel_optimizer.packing.packer import BoxPacker
from parcel_optimizer.providers.base import RateProvider
from parcel_optimizer.rates import RateFilter

logger = logging.getLogger(__name__)

SUPPORTED_INCOTERMS = ("DDP", "DDU")


def format_number(value: float) -> str:
    """Render a number as a plain decimal string: 40.0 -> '40', 2.5 -> '2.5'."""
    return format(Decimal(str(value)).normalize(), "f")


class ShippingService:
    """
    Orchestrates a rate calculation.

    Steps run strictly in order so invalid input never reaches the
    rate provider; each step may fail the whole request.
    """

    def __init__(
        self,
        settings: ShippingSettings,
        rate_provider: RateProvider,
        catalog_store: Optional[CatalogStore] = None,
        packer: Optional[BoxPacker] = None,
        customs: Optional[CustomsService] = None,
        rate_filter: Optional[RateFilter] = None,
    ):
        self.settings = settings
        self.rate_provider = rate_provider
        self.catalog_store = catalog_store
        self.packer = packer or BoxPacker(list(settings.box_catalog))
        self.customs = customs or CustomsService(mass_unit=settings.mass_unit)
        self.rate_filter = rate_filter or RateFilter(settings)

    def validate_address(self, data: Any, source: str) -> Address:
        return validate_address(data, source, self.settings.state_required_countries)

    def get_shipping_rates(
        self,
        cart_id: Optional[str],
        request: ShippingRequest,
        timeout: Optional[float] = None,
    ) -> list[ShippingRate]:
        """Resolve items from the request or cart, quote, then filter and rank."""
        logger.info(f"Shipping rates request received (cart_id={cart_id}, items={len(request.items)})")

        address_to = self.validate_address(request.address_to, "Destination Address")

        if self.catalog_store is None:
            raise RuntimeError("ShippingService has no catalog store configured")
        shipping_items = self.catalog_store.resolve_items(cart_id, request.items)
        if not shipping_items:
            raise ShippingDataMissingError("No shipping items found.")

        result = self.calculate_rates(address_to, shipping_items, timeout=timeout)
        return self.filter_and_label_rates(result.rates)

    def calculate_rates(
        self,
        address_to: Any,
        items: list[ShippingItem],
        timeout: Optional[float] = None,
    ) -> CalculateRatesResult:
        if not items:
            raise ShippingDataMissingError("No shipping items found.")

        address_to = self.validate_address(address_to, "Destination Address")
        origin_address, incoterm = self.resolve_origin(items)

        packable_items = self.build_packable_items(items)
        units = sum(p.quantity for p in packable_items)
        if units > self.settings.max_units:
            raise RequestTooLargeError(
                f"Too many units to quote in one request: {units} (limit {self.settings.max_units})."
            )

        packed = self.packer.pack(packable_items)
        if not packed:
            skus = ", ".join(sorted({p.id for p in packable_items}))
            logger.error(f"No suitable box found in catalog for SKUs: {skus}")
            raise NoSuitableBoxError("No suitable box found for the items in our catalog.")

        parcels = self.to_provider_parcels(packed)
        customs_declaration = self.customs.prepare_declaration(
            origin_address, address_to, items, incoterm
        )

        logger.info(
            f"Calling rate provider: {origin_address.country} -> {address_to.country}, "
            f"parcels={len(parcels)}, customs={customs_declaration is not None}"
        )
        try:
            rates = self.rate_provider.get_rates(
                origin_address,
                address_to,
                parcels,
                customs_declaration,
                timeout=timeout,
            )
        except Exception as e:
            logger.error(f"Rate provider call failed: {e}", exc_info=True)
            raise
        logger.info(f"Rate provider responded with {len(rates)} rate(s)")

        return CalculateRatesResult(
            parcels=parcels,
            rates=rates,
            customs_declaration=customs_declaration,
            packing_result=packed,
        )

    def resolve_origin(self, items: list[ShippingItem]) -> tuple[Address, str]:
        """Origin address and incoterm from the first item's shipping origin. No defaults."""
        product = items[0].variant.product
        origin = product.shipping_origin
        if origin is None:
            raise ShippingDataMissingError(
                f"Shipping origin missing for product {product.name or product.id}. "
                "Please configure a shipping origin for this product."
            )

        if not origin.address or not isinstance(origin.address, dict):
            raise ShippingDataMissingError(
                f"Origin address is invalid or missing for location: {origin.name}."
            )

        origin_address = self.validate_address(
            {**origin.address, "name": origin.name},
            f"Shipping Origin: {origin.name}",
        )

        incoterm = (origin.incoterm or "").strip().upper()
        if not incoterm:
            raise ShippingDataMissingError(
                f"Incoterm is missing for shipping origin: {origin.name}. "
                "Please configure an Incoterm (DDP/DDU) for this location."
            )
        if incoterm not in SUPPORTED_INCOTERMS:
            raise ShippingDataMissingError(
                f"Unsupported incoterm '{origin.incoterm}' for shipping origin: {origin.name}."
            )
        return origin_address, incoterm

    @staticmethod
    def build_packable_items(items: list[ShippingItem]) -> list[PackableItem]:
        packable: list[PackableItem] = []
        for item in items:
            variant = item.variant
            product = variant.product
            weight = variant.weight if variant.weight else product.weight
            dims = variant.dimensions or product.dimensions

            if not weight or weight <= 0 or dims is None or not all(
                d is not None and d > 0 for d in (dims.width, dims.length, dims.height)
            ):
                raise ShippingDataMissingError(f"Missing dimensions or weight for SKU: {variant.sku}")

            packable.append(PackableItem(
                id=variant.sku,
                width=float(dims.width),
                length=float(dims.length),
                height=float(dims.height),
                weight=float(weight),
                quantity=item.quantity,
            ))
        return packable

    def to_provider_parcels(self, parcels: list[PackedParcel]) -> list[ProviderParcel]:
        return [
            ProviderParcel(
                length=format_number(p.length),
                width=format_number(p.width),
                height=format_number(p.height),
                distance_unit=self.settings.distance_unit,
                weight=format_number(p.weight),
                mass_unit=self.settings.mass_unit,
            )
            for p in parcels
        ]

    def filter_and_label_rates(self, raw_rates: list[ShippingRate]) -> list[ShippingRate]:
        return self.rate_filter.filter_and_label_rates(raw_rates)
