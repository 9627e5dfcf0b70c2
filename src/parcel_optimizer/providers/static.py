"""Static rate provider returning a fixed set of rates."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from parcel_optimizer.models import Address, CustomsDeclaration, ProviderParcel, ShippingRate
from parcel_optimizer.providers.base import RateProvider


class StaticRateProvider(RateProvider):
    def __init__(self, rates: list[ShippingRate]):
        self.rates = list(rates)
        self.calls: list[dict] = []

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticRateProvider":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        raw = data.get("rates", []) if isinstance(data, dict) else data
        return cls([ShippingRate(**r) for r in raw])

    def get_rates(
        self,
        origin: Address,
        destination: Address,
        parcels: list[ProviderParcel],
        customs_declaration: Optional[CustomsDeclaration] = None,
        timeout: Optional[float] = None,
    ) -> list[ShippingRate]:
        self.calls.append({
            "origin": origin,
            "destination": destination,
            "parcels": parcels,
            "customs_declaration": customs_declaration,
            "timeout": timeout,
        })
        return [r.model_copy() for r in self.rates]
