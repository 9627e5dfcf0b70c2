from __future__ import annotations

import json

import pytest

from parcel_optimizer.config import DEFAULT_EXPRESS, DEFAULT_STANDARD, ShippingSettings, load_settings

ENV_VARS = (
    "SITE_CURRENCY",
    "SHIPPING_PROVIDERS_FILTER",
    "SHIPPING_DISTANCE_UNIT",
    "SHIPPING_MASS_UNIT",
    "SHIPPING_STATE_REQUIRED_COUNTRIES",
    "SHIPPING_MAX_UNITS",
    "SHIPPING_BOX_CATALOG",
    "EXCHANGE_RATES",
    "SHIPPO_API_KEY",
    "SHIPPO_BASE_URL",
    "SHIPPO_TIMEOUT",
    "CATALOG_PATH",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    settings = load_settings()

    assert settings == ShippingSettings()
    assert settings.site_currency == "CAD"
    assert settings.providers_filter == ()
    assert settings.state_required_countries == ("CA", "US")
    assert [b.id for b in settings.box_catalog] == ["BOX_XS", "BOX_S", "BOX_M", "BOX_L", "BOX_XL"]


def test_environment_overrides(clean_env) -> None:
    clean_env.setenv("SITE_CURRENCY", "usd")
    clean_env.setenv("SHIPPING_PROVIDERS_FILTER", "UPS, Canada Post ,")
    clean_env.setenv("SHIPPING_MASS_UNIT", "lb")
    clean_env.setenv("SHIPPING_STATE_REQUIRED_COUNTRIES", "us,au")
    clean_env.setenv("SHIPPING_BOX_CATALOG", json.dumps([
        {"id": "ONLY", "name": "Only Box", "width": 10, "length": 10, "height": 10, "cost": 1},
    ]))
    clean_env.setenv("EXCHANGE_RATES", json.dumps({"usd": 1, "gbp": 0.79}))
    clean_env.setenv("SHIPPO_API_KEY", "shippo_live_x")
    clean_env.setenv("SHIPPO_BASE_URL", "https://shippo.test/")
    clean_env.setenv("SHIPPO_TIMEOUT", "12.5")
    clean_env.setenv("SHIPPING_MAX_UNITS", "80")

    settings = load_settings()

    assert settings.site_currency == "USD"
    assert settings.providers_filter == ("UPS", "Canada Post")
    assert settings.mass_unit == "lb"
    assert settings.distance_unit == "cm"
    assert settings.state_required_countries == ("US", "AU")
    assert [b.id for b in settings.box_catalog] == ["ONLY"]
    assert settings.exchange_rates == {"USD": 1.0, "GBP": 0.79}
    assert settings.shippo_api_key == "shippo_live_x"
    assert settings.shippo_base_url == "https://shippo.test"
    assert settings.shippo_timeout == 12.5
    assert settings.max_units == 80


def test_tier_strategies_match_case_insensitively() -> None:
    assert DEFAULT_STANDARD.matches("UPS GROUND")
    assert not DEFAULT_STANDARD.matches("Priority Mail")
    assert DEFAULT_EXPRESS.matches("Priority Mail")
    assert not DEFAULT_EXPRESS.matches("Priority Mail Ground")
