"""Post-processing of raw carrier rates: filter, convert, classify, rank."""

from __future__ import annotations

import logging
from decimal import Decimal

from parcel_optimizer.config import ShippingSettings, TierStrategy
from parcel_optimizer.currency import convert_currency, to_decimal
from parcel_optimizer.errors import CurrencyConversionError
from parcel_optimizer.models import ShippingRate

logger = logging.getLogger(__name__)


def display_time(rate: ShippingRate) -> str | None:
    if rate.duration_terms:
        return rate.duration_terms
    if rate.days:
        return str(rate.days)
    return None


class RateFilter:
    """
    Reduces raw carrier rates to at most one "standard" and one "express" option.

    For each rate, in order received:
      1. drop providers outside the allow-list (case-insensitive substring)
      2. convert to the site currency; drop the rate if conversion fails
      3. classify by service level keywords; standard wins over express
      4. keep the cheapest rate per tier (first seen wins on ties)
    The survivors are labeled and sorted by price. Inputs are never mutated.
    """

    def __init__(self, settings: ShippingSettings):
        self.settings = settings

    def filter_and_label_rates(self, raw_rates: list[ShippingRate]) -> list[ShippingRate]:
        best: dict[str, tuple[Decimal, ShippingRate]] = {}
        tiers: list[tuple[str, TierStrategy]] = [
            ("standard", self.settings.standard),
            ("express", self.settings.express),
        ]

        logger.info(f"Processing {len(raw_rates)} raw shipping rate(s)")
        for rate in raw_rates:
            service = rate.servicelevel.name if rate.servicelevel else ""
            logger.debug(
                f"raw rate provider={rate.provider} service={service} "
                f"amount={rate.amount} currency={rate.currency}"
            )

            if not self._provider_allowed(rate.provider):
                continue

            converted = self._convert(rate)
            if converted is None:
                continue
            price, normalized = converted

            tier = next((name for name, strategy in tiers if strategy.matches(service)), None)
            if tier is None:
                continue

            current = best.get(tier)
            if current is None or price < current[0]:
                strategy = self.settings.standard if tier == "standard" else self.settings.express
                best[tier] = (
                    price,
                    normalized.model_copy(update={
                        "display_name": strategy.label,
                        "display_time": display_time(normalized),
                    }),
                )

        ranked = sorted(best.values(), key=lambda pair: pair[0])
        return [rate for _, rate in ranked]

    def _provider_allowed(self, provider: str | None) -> bool:
        allow_list = self.settings.providers_filter
        if not allow_list:
            return True
        name = (provider or "").lower()
        return any(p.lower() in name for p in allow_list)

    def _convert(self, rate: ShippingRate) -> tuple[Decimal, ShippingRate] | None:
        target = self.settings.site_currency
        try:
            if (rate.currency or "").upper() == target.upper():
                return to_decimal(rate.amount), rate
            price = convert_currency(rate.amount, rate.currency, target, self.settings.exchange_rates)
        except CurrencyConversionError as e:
            logger.warning(
                f"Currency conversion failed ({rate.currency} -> {target}) for "
                f"{rate.provider} rate {rate.object_id or ''}: {e}. Skipping rate."
            )
            return None
        return price, rate.model_copy(update={"amount": f"{price:.2f}", "currency": target})
