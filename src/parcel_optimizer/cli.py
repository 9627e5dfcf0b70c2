from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from parcel_optimizer.config import ShippingSettings, load_settings
from parcel_optimizer.errors import ShippingError
from parcel_optimizer.models import PackableItem, ShippingItem
from parcel_optimizer.packing.packer import BoxPacker
from parcel_optimizer.providers.base import RateProvider
from parcel_optimizer.providers.shippo import ShippoRateProvider
from parcel_optimizer.providers.static import StaticRateProvider
from parcel_optimizer.shipping import ShippingService

logger = logging.getLogger(__name__)


def load_input(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Input must be a JSON object")
    return data


def write_plan(plan: dict[str, Any], output_path: str | Path) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(plan, indent=2, sort_keys=True), encoding="utf-8")
    print(f"✅ Plan written to {path}")


def run_pack(data: dict[str, Any], settings: ShippingSettings) -> dict[str, Any]:
    """
    Pack {"items": [{"id", "width", "length", "height", "weight", "quantity"}]}
    against the configured box catalog.
    """
    items = [PackableItem(**i) for i in data.get("items", [])]
    result = BoxPacker(list(settings.box_catalog)).pack_detailed(items)
    return {
        "parcels": [p.model_dump() for p in result.parcels],
        "unpacked": [{"id": i.id, "seq": i.seq} for i in result.unpacked],
        "summary": {
            "units_requested": sum(i.quantity for i in items),
            "units_unpacked": len(result.unpacked),
            "parcel_count": len(result.parcels),
            "total_weight": round(sum(p.weight for p in result.parcels), 2),
            "box_cost": sum(
                b.cost for p in result.parcels for b in settings.box_catalog if b.id == p.box_id
            ),
        },
    }


def build_provider(settings: ShippingSettings, offline_rates: Path | None) -> RateProvider:
    if offline_rates is not None:
        return StaticRateProvider.from_json(offline_rates)
    return ShippoRateProvider(
        api_key=settings.shippo_api_key or "",
        base_url=settings.shippo_base_url,
        timeout=settings.shippo_timeout,
    )


def run_rates(data: dict[str, Any], settings: ShippingSettings, provider: RateProvider) -> dict[str, Any]:
    """
    Quote {"address_to": {...}, "items": [ShippingItem...]} and rank the rates.
    """
    items = [ShippingItem(**i) for i in data.get("items", [])]
    service = ShippingService(settings, provider)
    result = service.calculate_rates(data.get("address_to"), items)
    ranked = service.filter_and_label_rates(result.rates)
    return {
        "parcels": [p.model_dump() for p in result.parcels],
        "packing_result": [p.model_dump() for p in result.packing_result],
        "customs_declaration": (
            result.customs_declaration.model_dump() if result.customs_declaration else None
        ),
        "raw_rate_count": len(result.rates),
        "rates": [r.model_dump(exclude_none=True) for r in ranked],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="parcel-optimizer", description="Box packing and shipping rates")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    pack = sub.add_parser("pack", help="Pack items into catalog boxes")
    pack.add_argument("input", type=Path, help="JSON file with an 'items' list")
    pack.add_argument("--output", type=Path, default=None, help="Write the plan to this path")

    rates = sub.add_parser("rates", help="Quote and rank shipping rates")
    rates.add_argument("input", type=Path, help="JSON file with 'address_to' and 'items'")
    rates.add_argument("--offline", type=Path, default=None, metavar="RATES_JSON",
                       help="Use raw rates from this file instead of calling Shippo")
    rates.add_argument("--output", type=Path, default=None, help="Write the result to this path")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    data = load_input(args.input)

    try:
        if args.command == "pack":
            result = run_pack(data, settings)
        else:
            result = run_rates(data, settings, build_provider(settings, args.offline))
    except ShippingError as e:
        logger.error(f"{e.code}: {e.message}")
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1

    if args.output:
        write_plan(result, args.output)
    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
