"""Address normalization and strict validation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Iterable

from parcel_optimizer.errors import ShippingDataMissingError
from parcel_optimizer.models import Address

REQUIRED_FIELDS = ("street1", "city", "country", "zip", "name")

_ZIP_ALIASES = ("zip", "zipCode", "postalCode", "postal_code")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_address(
    data: Any,
    source: str,
    state_required_countries: Iterable[str] = (),
) -> Address:
    """
    Normalize a loosely-typed address and enforce required fields.

    Accepts the shapes seen upstream (Stripe ``line1``, ``postalCode`` from
    the database, ``firstName``/``lastName``) and returns a canonical
    Address. Fails naming ``source`` and the first missing field.
    """
    if isinstance(data, Address):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        raise ShippingDataMissingError(f"Invalid address data from {source}")

    d = dict(data)
    normalized: dict[str, str] = {key: _text(d.get(key)) for key in Address.model_fields}

    if not normalized["zip"]:
        normalized["zip"] = next((_text(d.get(k)) for k in _ZIP_ALIASES if _text(d.get(k))), "")
    if not normalized["street1"]:
        normalized["street1"] = _text(d.get("line1"))
    if not normalized["street2"]:
        normalized["street2"] = _text(d.get("line2"))
    if not normalized["name"] and (d.get("firstName") or d.get("lastName")):
        normalized["name"] = f"{_text(d.get('firstName'))} {_text(d.get('lastName'))}".strip()

    normalized["zip"] = re.sub(r"\s+", "", normalized["zip"])
    normalized["country"] = normalized["country"].upper()

    for field in REQUIRED_FIELDS:
        if not normalized[field]:
            raise ShippingDataMissingError(
                f"Incomplete address from {source}. Missing required field: {field}."
            )

    required_state = {c.upper() for c in state_required_countries}
    if normalized["country"] in required_state and not normalized["state"]:
        raise ShippingDataMissingError(
            f"State/Province is required for {normalized['country']} addresses in {source}. "
            f"Missing required field: state."
        )

    return Address(**normalized)
