"""Catalog store: resolves cart lines or explicit variant lists into shipping items."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

from parcel_optimizer.errors import NotFoundError
from parcel_optimizer.io.schemas import ShippingRequestItem
from parcel_optimizer.models import ShippingItem, Variant


class CatalogStore(ABC):
    """Source of variant/product records needed for shipping calculations."""

    @abstractmethod
    def get_variants(self, variant_ids: list[str]) -> dict[str, Variant]:
        """Return the known variants among variant_ids, keyed by id."""
        raise NotImplementedError

    @abstractmethod
    def get_cart_lines(self, cart_id: str) -> list[ShippingRequestItem]:
        """Return a cart's lines, or an empty list for an unknown cart."""
        raise NotImplementedError

    def resolve_items(
        self,
        cart_id: str | None = None,
        manual_items: list[ShippingRequestItem] | None = None,
    ) -> list[ShippingItem]:
        """
        Resolve shipping items from an explicit item list or, failing that, a cart.

        Manual items take precedence over the cart. Unknown variants raise
        NotFoundError; an unknown or empty cart resolves to no items.
        """
        if manual_items:
            lines = list(manual_items)
        elif cart_id:
            lines = self.get_cart_lines(cart_id)
        else:
            return []

        variants = self.get_variants([line.variant_id for line in lines])
        items: list[ShippingItem] = []
        for line in lines:
            variant = variants.get(line.variant_id)
            if variant is None:
                raise NotFoundError(f"Variant not found: {line.variant_id}")
            items.append(ShippingItem(variant=variant, quantity=line.quantity))
        return items


class InMemoryCatalogStore(CatalogStore):
    def __init__(
        self,
        variants: list[Variant] | None = None,
        carts: dict[str, list[ShippingRequestItem]] | None = None,
    ):
        self._variants = {v.id: v for v in variants or []}
        self._carts = dict(carts or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryCatalogStore":
        """
        Load a store from a JSON file shaped like:
            {"variants": [...], "carts": {"cart_id": [{"variant_id": ..., "quantity": ...}]}}
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        variants = [Variant(**v) for v in data.get("variants", [])]
        carts = {
            cart_id: [ShippingRequestItem(**line) for line in lines]
            for cart_id, lines in data.get("carts", {}).items()
        }
        return cls(variants=variants, carts=carts)

    def get_variants(self, variant_ids: list[str]) -> dict[str, Variant]:
        return {vid: self._variants[vid] for vid in variant_ids if vid in self._variants}

    def get_cart_lines(self, cart_id: str) -> list[ShippingRequestItem]:
        return list(self._carts.get(cart_id, []))
