"""Process-wide shipping configuration; loads .env locally via python-dotenv."""

from __future__ import annotations

import json
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from parcel_optimizer.boxes import DEFAULT_BOX_CATALOG
from parcel_optimizer.models import ShippingBox

# Units per 1 USD
DEFAULT_EXCHANGE_RATES: dict[str, float] = {
    "USD": 1.0,
    "CAD": 1.37,
    "EUR": 0.92,
}


class TierStrategy(BaseModel):
    """Keyword rules and display label for one service tier."""

    model_config = ConfigDict(frozen=True)

    label: str
    keywords: tuple[str, ...] = Field(description="Case-insensitive substrings that qualify a service level")
    excludes: tuple[str, ...] = Field(default=(), description="Case-insensitive substrings that disqualify it")

    def matches(self, service_name: str) -> bool:
        name = (service_name or "").lower()
        return (
            any(k.lower() in name for k in self.keywords)
            and not any(k.lower() in name for k in self.excludes)
        )


DEFAULT_STANDARD = TierStrategy(
    label="Standard",
    keywords=("standard", "ground", "regular", "economy", "expedited parcel"),
    excludes=("express", "overnight", "priority", "next day"),
)

DEFAULT_EXPRESS = TierStrategy(
    label="Express",
    keywords=("express", "priority", "overnight", "next day", "xpresspost", "2nd day"),
    excludes=("economy", "ground"),
)


class ShippingSettings(BaseModel):
    """Read-only configuration shared by packer, filter and orchestrator."""

    model_config = ConfigDict(frozen=True)

    site_currency: str = "CAD"
    providers_filter: tuple[str, ...] = ()
    distance_unit: str = "cm"
    mass_unit: str = "kg"
    standard: TierStrategy = DEFAULT_STANDARD
    express: TierStrategy = DEFAULT_EXPRESS
    box_catalog: tuple[ShippingBox, ...] = tuple(DEFAULT_BOX_CATALOG)
    exchange_rates: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_EXCHANGE_RATES))
    state_required_countries: tuple[str, ...] = ("CA", "US")
    max_units: int = Field(default=500, gt=0, description="Most units packed for one quote")
    shippo_api_key: str | None = None
    shippo_base_url: str = "https://api.goshippo.com"
    shippo_timeout: float = Field(default=30.0, gt=0)
    catalog_path: str | None = None


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def load_settings() -> ShippingSettings:
    """Build settings from the environment (and a local .env when present)."""
    load_dotenv()

    kwargs: dict = {}

    if os.getenv("SITE_CURRENCY"):
        kwargs["site_currency"] = os.environ["SITE_CURRENCY"].strip().upper()
    if os.getenv("SHIPPING_PROVIDERS_FILTER") is not None:
        kwargs["providers_filter"] = _split_csv(os.getenv("SHIPPING_PROVIDERS_FILTER"))
    if os.getenv("SHIPPING_DISTANCE_UNIT"):
        kwargs["distance_unit"] = os.environ["SHIPPING_DISTANCE_UNIT"].strip()
    if os.getenv("SHIPPING_MASS_UNIT"):
        kwargs["mass_unit"] = os.environ["SHIPPING_MASS_UNIT"].strip()
    if os.getenv("SHIPPING_STATE_REQUIRED_COUNTRIES") is not None:
        kwargs["state_required_countries"] = tuple(
            c.upper() for c in _split_csv(os.getenv("SHIPPING_STATE_REQUIRED_COUNTRIES"))
        )

    if os.getenv("SHIPPING_MAX_UNITS"):
        kwargs["max_units"] = int(os.environ["SHIPPING_MAX_UNITS"])

    catalog_json = os.getenv("SHIPPING_BOX_CATALOG")
    if catalog_json:
        kwargs["box_catalog"] = tuple(ShippingBox(**b) for b in json.loads(catalog_json))

    rates_json = os.getenv("EXCHANGE_RATES")
    if rates_json:
        kwargs["exchange_rates"] = {k.upper(): float(v) for k, v in json.loads(rates_json).items()}

    kwargs["shippo_api_key"] = os.getenv("SHIPPO_API_KEY") or None
    if os.getenv("SHIPPO_BASE_URL"):
        kwargs["shippo_base_url"] = os.environ["SHIPPO_BASE_URL"].rstrip("/")
    if os.getenv("SHIPPO_TIMEOUT"):
        kwargs["shippo_timeout"] = float(os.environ["SHIPPO_TIMEOUT"])
    kwargs["catalog_path"] = os.getenv("CATALOG_PATH") or None

    return ShippingSettings(**kwargs)
