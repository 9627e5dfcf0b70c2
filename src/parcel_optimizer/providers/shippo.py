"""Shippo rate provider over the REST API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import certifi
import httpx
from pydantic import ValidationError

from parcel_optimizer.errors import ConfigurationError, RateProviderError
from parcel_optimizer.models import Address, CustomsDeclaration, ProviderParcel, ShippingRate
from parcel_optimizer.providers.base import RateProvider

logger = logging.getLogger(__name__)


def shippo_address(address: Address) -> dict[str, Any]:
    return address.model_dump()


def shippo_customs(declaration: CustomsDeclaration) -> dict[str, Any]:
    payload = declaration.model_dump(exclude={"items"})
    payload["items"] = []
    for item in declaration.items:
        entry = item.model_dump(exclude={"hs_code"})
        if item.hs_code:
            entry["tariff_number"] = item.hs_code
        payload["items"].append(entry)
    return payload


def parse_rate(raw: dict[str, Any]) -> ShippingRate:
    """Map a Shippo rate object onto ShippingRate (estimated_days -> days)."""
    data = dict(raw)
    if data.get("days") is None and data.get("estimated_days") is not None:
        data["days"] = data["estimated_days"]
    data["amount"] = str(data.get("amount", ""))
    servicelevel = dict(data.get("servicelevel") or {})
    servicelevel["name"] = servicelevel.get("name") or ""
    data["servicelevel"] = servicelevel
    return ShippingRate(**data)


class ShippoRateProvider(RateProvider):
    """
    Creates a synchronous Shippo shipment and returns its rates.

    No retries: a failed call raises RateProviderError and fails the quote.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.goshippo.com",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        if not api_key:
            raise ConfigurationError("SHIPPO_API_KEY is not defined")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout, verify=certifi.where())
        self._headers = {
            "Authorization": f"ShippoToken {api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(
        self,
        origin: Address,
        destination: Address,
        parcels: list[ProviderParcel],
        customs_declaration: Optional[CustomsDeclaration] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "address_from": shippo_address(origin),
            "address_to": shippo_address(destination),
            "parcels": [p.model_dump() for p in parcels],
            "async": False,
        }
        if customs_declaration is not None:
            payload["customs_declaration"] = shippo_customs(customs_declaration)
        return payload

    def get_rates(
        self,
        origin: Address,
        destination: Address,
        parcels: list[ProviderParcel],
        customs_declaration: Optional[CustomsDeclaration] = None,
        timeout: Optional[float] = None,
    ) -> list[ShippingRate]:
        payload = self.build_payload(origin, destination, parcels, customs_declaration)
        try:
            response = self._client.post(
                f"{self.base_url}/shipments/",
                json=payload,
                headers=self._headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise RateProviderError(f"Shipping carrier integration timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:300]
            raise RateProviderError(
                f"Shipping carrier integration failed: HTTP {e.response.status_code} {detail}"
            ) from e
        except httpx.HTTPError as e:
            raise RateProviderError(f"Shipping carrier integration failed: {e}") from e

        try:
            shipment = response.json()
        except ValueError as e:
            raise RateProviderError("Shipping carrier integration returned invalid JSON") from e

        if not isinstance(shipment, dict):
            raise RateProviderError("Shipping carrier integration returned an unexpected payload")
        try:
            rates = [parse_rate(r) for r in shipment.get("rates") or []]
        except (ValidationError, TypeError, ValueError) as e:
            raise RateProviderError(f"Shipping carrier integration returned a malformed rate: {e}") from e
        logger.info(f"Shippo shipment {shipment.get('object_id')} returned {len(rates)} rate(s)")
        return rates

    def close(self) -> None:
        self._client.close()
