"""Rate provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from parcel_optimizer.models import Address, CustomsDeclaration, ProviderParcel, ShippingRate


class RateProvider(ABC):
    """External carrier rate-shopping API."""

    @abstractmethod
    def get_rates(
        self,
        origin: Address,
        destination: Address,
        parcels: list[ProviderParcel],
        customs_declaration: Optional[CustomsDeclaration] = None,
        timeout: Optional[float] = None,
    ) -> list[ShippingRate]:
        """Quote rates. Raises RateProviderError on transport or provider failure."""
        raise NotImplementedError
