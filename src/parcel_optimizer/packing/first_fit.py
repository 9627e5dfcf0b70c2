# src/parcel_optimizer/packing/first_fit.py

from __future__ import annotations

from dataclasses import dataclass, field

from parcel_optimizer.geometry import EPSILON, Bounds, can_place_bounds
from parcel_optimizer.metrics import compute_metrics
from parcel_optimizer.models import ItemInstance, Placement, ShippingBox
from parcel_optimizer.packing.heuristics import instance_order_key


@dataclass
class BoxFill:
    """Result of filling a single box."""

    box: ShippingBox
    placements: list[Placement] = field(default_factory=list)
    packed: list[ItemInstance] = field(default_factory=list)
    unpacked: list[ItemInstance] = field(default_factory=list)
    used_volume: float = 0.0
    box_volume: float = 0.0
    fill_rate: float = 0.0
    total_weight: float = 0.0


def instance_volume(instance: ItemInstance) -> float:
    return float(instance.length) * float(instance.width) * float(instance.height)


def rotations_6(instance: ItemInstance) -> list[tuple[float, float, float, int]]:
    """
    Return the distinct axis-aligned orientations plus a rotation code 0..5.
    rotation code meaning:
      0:(L,W,H) 1:(L,H,W) 2:(W,L,H) 3:(W,H,L) 4:(H,L,W) 5:(H,W,L)
    """
    L, W, H = float(instance.length), float(instance.width), float(instance.height)
    dims = [
        (L, W, H, 0),
        (L, H, W, 1),
        (W, L, H, 2),
        (W, H, L, 3),
        (H, L, W, 4),
        (H, W, L, 5),
    ]
    # cubes and square prisms repeat orientations
    seen = set()
    out: list[tuple[float, float, float, int]] = []
    for a, b, c, r in dims:
        key = (a, b, c)
        if key not in seen:
            seen.add(key)
            out.append((a, b, c, r))
    return out


Point = tuple[float, float, float]


def _point_order(point: Point) -> tuple[float, float, float]:
    # (z, y, x): floor first
    return (point[2], point[1], point[0])


def _occupied(point: Point, bounds: Bounds) -> bool:
    """Nothing with positive size can start at a point inside placed bounds."""
    px, py, pz = point
    x1, y1, z1, x2, y2, z2 = bounds
    return (
        x1 - EPSILON <= px < x2 - EPSILON
        and y1 - EPSILON <= py < y2 - EPSILON
        and z1 - EPSILON <= pz < z2 - EPSILON
    )


def _outside(point: Point, box: ShippingBox) -> bool:
    px, py, pz = point
    return (
        px >= float(box.length) - EPSILON
        or py >= float(box.width) - EPSILON
        or pz >= float(box.height) - EPSILON
    )


def update_candidate_points(
    points: list[Point],
    placed: Bounds,
    occupied: list[Bounds],
    box: ShippingBox,
) -> list[Point]:
    """
    Extreme-points style candidates, maintained incrementally:
      drop points the new placement covers,
      add (x+L, y, z), (x, y+W, z), (x, y, z+H) of the new placement
      unless they are outside the box or already covered.
    Returned sorted by (z, y, x).
    """
    x1, y1, z1, x2, y2, z2 = placed
    kept = {p for p in points if not _occupied(p, placed)}

    for p in ((x2, y1, z1), (x1, y2, z1), (x1, y1, z2)):
        if p in kept or _outside(p, box):
            continue
        if any(_occupied(p, other) for other in occupied):
            continue
        kept.add(p)

    return sorted(kept, key=_point_order)


def pack_into_box(box: ShippingBox, instances: list[ItemInstance]) -> BoxFill:
    """
    First-fit packer that accepts the FIRST feasible placement for each instance.
    - Largest volume first, ties broken by id then input sequence
    - Explores candidate points + 6 rotations
    - Respects the box's max_weight when set
    - Deterministic (no randomness)
    """
    ordered = sorted(instances, key=instance_order_key)

    points: list[Point] = [(0.0, 0.0, 0.0)]
    occupied: list[Bounds] = []
    placements: list[Placement] = []
    packed: list[ItemInstance] = []
    unpacked: list[ItemInstance] = []
    current_weight = 0.0

    for instance in ordered:
        if box.max_weight is not None and current_weight + float(instance.weight) > box.max_weight:
            unpacked.append(instance)
            continue

        orientations = rotations_6(instance)
        found: tuple[Bounds, tuple[float, float, float]] | None = None
        for (x, y, z) in points:
            for (l, w, h, _rot_code) in orientations:
                bounds = (x, y, z, x + l, y + w, z + h)
                if can_place_bounds(bounds, box, occupied):
                    found = (bounds, (l, w, h))
                    break
            if found is not None:
                break

        if found is None:
            unpacked.append(instance)
            continue

        bounds, rotation = found
        x, y, z = bounds[:3]
        occupied.append(bounds)
        placements.append(Placement(
            item_id=instance.id,
            seq=instance.seq,
            x=x,
            y=y,
            z=z,
            rotation=rotation,
        ))
        packed.append(instance)
        current_weight += float(instance.weight)
        points = update_candidate_points(points, bounds, occupied, box)

    used_volume, volume, fill_rate = compute_metrics(box, placements)

    return BoxFill(
        box=box,
        placements=placements,
        packed=packed,
        unpacked=unpacked,
        used_volume=used_volume,
        box_volume=volume,
        fill_rate=fill_rate,
        total_weight=current_weight,
    )
