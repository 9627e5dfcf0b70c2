from __future__ import annotations

import logging

from parcel_optimizer.config import ShippingSettings, TierStrategy
from parcel_optimizer.models import ShippingRate
from parcel_optimizer.rates import RateFilter, display_time


def rate(provider: str, service: str, amount: str, currency: str = "CAD", **extra) -> ShippingRate:
    return ShippingRate(
        provider=provider,
        servicelevel={"name": service, "token": service.lower().replace(" ", "_")},
        amount=amount,
        currency=currency,
        **extra,
    )


def summarize(rates: list[ShippingRate]) -> list[tuple[str, str, str | None]]:
    return [(r.provider, r.amount, r.display_name) for r in rates]


def test_filters_provider_classifies_and_ranks(ups_only_settings) -> None:
    raw = [
        rate("UPS", "Standard", "12.00"),
        rate("UPS", "Express", "25.00"),
        rate("FedEx", "Ground", "8.00"),
    ]

    result = RateFilter(ups_only_settings).filter_and_label_rates(raw)

    assert [r.amount for r in result] == ["12.00", "25.00"]
    assert [r.display_name for r in result] == ["Standard", "Express"]
    assert all(r.provider == "UPS" for r in result)


def test_at_most_one_rate_per_tier_and_it_is_the_cheapest(settings) -> None:
    raw = [
        rate("UPS", "UPS Ground", "14.10"),
        rate("Canada Post", "Regular Parcel", "11.25"),
        rate("Purolator", "Purolator Ground", "11.90"),
        rate("Canada Post", "Xpresspost", "22.40"),
        rate("UPS", "UPS Express Saver", "31.00"),
        rate("FedEx", "FedEx Priority Overnight", "19.99"),
    ]

    result = RateFilter(settings).filter_and_label_rates(raw)

    assert summarize(result) == [
        ("Canada Post", "11.25", "Standard"),
        ("FedEx", "19.99", "Express"),
    ]


def test_first_seen_wins_on_equal_price(settings) -> None:
    raw = [
        rate("UPS", "Ground", "10.00", object_id="first"),
        rate("FedEx", "Ground", "10.00", object_id="second"),
    ]

    result = RateFilter(settings).filter_and_label_rates(raw)

    assert [r.object_id for r in result] == ["first"]


def test_standard_is_checked_before_express() -> None:
    # Matches both "standard" and "2nd day" with no exclusion either way
    settings = ShippingSettings()
    result = RateFilter(settings).filter_and_label_rates([rate("UPS", "Standard 2nd Day", "15.00")])

    assert [r.display_name for r in result] == ["Standard"]


def test_exclusions_reject_ambiguous_service_names(settings) -> None:
    raw = [
        rate("UPS", "Ground Express", "9.00"),  # standard excluded by "express", express excluded by "ground"
        rate("DHL", "Economy Select", "8.00"),
    ]

    result = RateFilter(settings).filter_and_label_rates(raw)

    assert summarize(result) == [("DHL", "8.00", "Standard")]


def test_unclassified_rates_are_dropped(settings) -> None:
    raw = [rate("UPS", "Worldwide Saver", "40.00"), rate("USPS", "Media Mail", "3.00")]

    assert RateFilter(settings).filter_and_label_rates(raw) == []


def test_rates_are_converted_to_site_currency(settings) -> None:
    raw = [
        rate("USPS", "Ground Advantage", "10.00", currency="USD"),
        rate("Canada Post", "Regular Parcel", "13.80", currency="CAD"),
    ]

    result = RateFilter(settings).filter_and_label_rates(raw)

    # 10 USD * 1.37 = 13.70 CAD, which beats 13.80 CAD
    assert len(result) == 1
    assert result[0].provider == "USPS"
    assert result[0].amount == "13.70"
    assert result[0].currency == "CAD"


def test_rate_with_unknown_currency_is_dropped(settings, caplog) -> None:
    raw = [
        rate("Royal Mail", "Standard", "1.00", currency="GBP"),
        rate("Canada Post", "Regular Parcel", "13.80"),
    ]

    with caplog.at_level(logging.WARNING):
        result = RateFilter(settings).filter_and_label_rates(raw)

    assert [r.provider for r in result] == ["Canada Post"]
    assert "Currency conversion failed" in caplog.text


def test_rate_with_unparseable_amount_is_dropped(settings) -> None:
    raw = [rate("UPS", "Ground", "n/a"), rate("FedEx", "Ground", "20.00")]

    assert [r.provider for r in RateFilter(settings).filter_and_label_rates(raw)] == ["FedEx"]


def test_provider_filter_is_case_insensitive_substring() -> None:
    settings = ShippingSettings(providers_filter=("canada post", "UPS"))
    raw = [
        rate("Canada Post", "Regular Parcel", "11.00"),
        rate("ups", "Express", "30.00"),
        rate("FedEx", "Ground", "5.00"),
    ]

    result = RateFilter(settings).filter_and_label_rates(raw)

    assert [r.provider for r in result] == ["Canada Post", "ups"]


def test_empty_provider_filter_allows_all(settings) -> None:
    result = RateFilter(settings).filter_and_label_rates([rate("Anything Co", "Ground", "5.00")])

    assert len(result) == 1


def test_inputs_are_not_mutated(settings) -> None:
    raw = [rate("USPS", "Priority Mail", "10.00", currency="USD", duration_terms="1-3 days")]
    before = [r.model_dump() for r in raw]

    result = RateFilter(settings).filter_and_label_rates(raw)

    assert [r.model_dump() for r in raw] == before
    assert result[0] is not raw[0]
    assert result[0].display_name == "Express"
    assert result[0].display_time == "1-3 days"


def test_filtering_is_idempotent(settings) -> None:
    raw = [
        rate("UPS", "Ground", "14.00"),
        rate("UPS", "Next Day Air", "45.00", currency="USD"),
        rate("Canada Post", "Regular Parcel", "12.00"),
    ]
    rate_filter = RateFilter(settings)

    once = rate_filter.filter_and_label_rates(raw)
    twice = rate_filter.filter_and_label_rates(once)

    assert [r.model_dump() for r in twice] == [r.model_dump() for r in once]


def test_provider_extra_fields_survive(settings) -> None:
    raw = [rate("UPS", "Ground", "9.00", attributes=["CHEAPEST"], carrier_account="acc_1")]

    result = RateFilter(settings).filter_and_label_rates(raw)

    dumped = result[0].model_dump()
    assert dumped["attributes"] == ["CHEAPEST"]
    assert dumped["carrier_account"] == "acc_1"


def test_display_time_prefers_duration_terms() -> None:
    assert display_time(rate("UPS", "Ground", "1", duration_terms="3-5 days", days=4)) == "3-5 days"
    assert display_time(rate("UPS", "Ground", "1", days=4)) == "4"
    assert display_time(rate("UPS", "Ground", "1")) is None


def test_ups_only_ground_and_express_saver(ups_only_settings) -> None:
    raw = [
        rate("UPS", "UPS Ground", "12.00"),
        rate("UPS", "UPS Express Saver", "25.00"),
        rate("DHL", "DHL Ground", "8.00"),
    ]

    result = RateFilter(ups_only_settings).filter_and_label_rates(raw)

    assert [(r.amount, r.display_name) for r in result] == [("12.00", "Standard"), ("25.00", "Express")]


def test_configured_keywords_match_regardless_of_case() -> None:
    settings = ShippingSettings(
        standard=TierStrategy(label="Economy", keywords=("Ground",), excludes=("Express",)),
        express=TierStrategy(label="Fast", keywords=("Express",)),
    )
    raw = [rate("UPS", "ups ground", "10.00"), rate("UPS", "UPS EXPRESS", "20.00")]

    result = RateFilter(settings).filter_and_label_rates(raw)

    assert [r.display_name for r in result] == ["Economy", "Fast"]
