"""Geometry utilities for box packing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Placement, ShippingBox

# Absorbs float noise from summed coordinates (2.2 + 2.2 + 2.2 != 6.6)
EPSILON = 1e-9

Bounds = tuple[float, float, float, float, float, float]


def boxes_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1, within EPSILON) is NOT considered overlap.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (
        (ax1 < bx2 - EPSILON and ax2 > bx1 + EPSILON)
        and (ay1 < by2 - EPSILON and ay2 > by1 + EPSILON)
        and (az1 < bz2 - EPSILON and az2 > bz1 + EPSILON)
    )


def placement_bounds(placement: "Placement") -> Bounds:
    L, W, H = placement.rotation
    x, y, z = float(placement.x), float(placement.y), float(placement.z)
    return (x, y, z, x + float(L), y + float(W), z + float(H))


def fits_inside(bounds: Bounds, box: "ShippingBox") -> bool:
    """Bounds lie within the box (x along length, y along width, z along height)."""
    _, _, _, x2, y2, z2 = bounds
    return (
        x2 <= float(box.length) + EPSILON
        and y2 <= float(box.width) + EPSILON
        and z2 <= float(box.height) + EPSILON
    )


def can_place_bounds(bounds: Bounds, box: "ShippingBox", occupied: list[Bounds]) -> bool:
    if not fits_inside(bounds, box):
        return False
    return not any(boxes_overlap(bounds, other) for other in occupied)


def can_place(placement: "Placement", box: "ShippingBox", existing_placements: list["Placement"]) -> bool:
    """
    Check if an instance can be placed at the given position:
    - inside box bounds (x along length, y along width, z along height)
    - no overlap with existing placements
    """
    return can_place_bounds(
        placement_bounds(placement),
        box,
        [placement_bounds(p) for p in existing_placements],
    )
