from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from parcel_optimizer.models import Placement, ShippingBox


def placement_volume(p: Placement) -> float:
    L, W, H = p.rotation  # rotation is (L,W,H)
    return float(L) * float(W) * float(H)


def box_volume(box: ShippingBox) -> float:
    return float(box.length) * float(box.width) * float(box.height)


def compute_metrics(box: ShippingBox, placements: list[Placement]) -> tuple[float, float, float]:
    used_volume = sum(placement_volume(p) for p in placements)
    volume = box_volume(box)
    fill_rate = 0.0 if volume == 0 else used_volume / volume
    return used_volume, volume, fill_rate


def round_weight(value: float) -> float:
    """Round half-up to 2 decimals (2.675 -> 2.68, not banker's rounding)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
