"""Customs declarations for international shipments."""

from __future__ import annotations

import logging

from parcel_optimizer.errors import ShippingDataMissingError
from parcel_optimizer.models import Address, CustomsDeclaration, CustomsItem, ShippingItem

logger = logging.getLogger(__name__)


def _unit_weight(item: ShippingItem) -> float | None:
    variant = item.variant
    return variant.weight if variant.weight else variant.product.weight


class CustomsService:
    """
    Builds customs declarations.

    Customs forms are legally binding, so missing data fails the whole
    request instead of producing a partial declaration.
    """

    def __init__(self, mass_unit: str = "kg"):
        self.mass_unit = mass_unit

    def prepare_declaration(
        self,
        origin_address: Address,
        address_to: Address,
        items: list[ShippingItem],
        origin_incoterm: str,
    ) -> CustomsDeclaration | None:
        """Return a declaration for cross-border shipments, None for domestic ones."""
        if address_to.country == origin_address.country:
            return None

        if not origin_address.name:
            raise ShippingDataMissingError(
                "Missing sender name for customs declaration. Please check logistics settings."
            )

        incoterm = (origin_incoterm or "").strip().upper()
        if incoterm not in ("DDP", "DDU"):
            raise ShippingDataMissingError(
                f"Unsupported incoterm '{origin_incoterm}' for customs declaration. Expected DDP or DDU."
            )

        if not items:
            raise ShippingDataMissingError("No shipping items found.")

        export_explanation = (items[0].variant.product.export_explanation or "").strip()
        if not export_explanation:
            raise ShippingDataMissingError("Missing export explanation for international shipment.")

        customs_items = [self._customs_item(item) for item in items]

        logger.info(
            f"customs declaration prepared: {origin_address.country} -> {address_to.country}, "
            f"{len(customs_items)} item(s), incoterm={incoterm}"
        )

        return CustomsDeclaration(
            contents_explanation=export_explanation,
            certify_signer=origin_address.name,
            incoterm=incoterm,
            items=customs_items,
        )

    def _customs_item(self, item: ShippingItem) -> CustomsItem:
        variant = item.variant
        product = variant.product
        sku = variant.sku

        description = (product.name or "").strip()
        if not description:
            raise ShippingDataMissingError(f"Missing description for customs (SKU: {sku})")

        pricing = variant.pricing
        if pricing is None or pricing.price is None:
            raise ShippingDataMissingError(f"Missing price for customs declaration (SKU: {sku})")

        if not product.origin_country:
            raise ShippingDataMissingError(f"Missing origin country for customs (SKU: {sku})")

        if not pricing.currency:
            raise ShippingDataMissingError(f"Missing currency for customs (SKU: {sku})")

        weight = _unit_weight(item)
        if not weight:
            raise ShippingDataMissingError(f"Missing weight for customs (SKU: {sku})")

        return CustomsItem(
            description=description,
            quantity=item.quantity,
            net_weight=str(weight),
            mass_unit=self.mass_unit,
            value_amount=str(pricing.price),
            value_currency=pricing.currency.upper(),
            origin_country=product.origin_country.upper(),
            hs_code=product.hs_code or None,
        )
