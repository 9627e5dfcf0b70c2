"""Ordering heuristics for the packer.

Box tie-break rule: lowest cost, then smallest volume, then catalog order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from parcel_optimizer.metrics import box_volume
from parcel_optimizer.models import ItemInstance, ShippingBox

if TYPE_CHECKING:
    from parcel_optimizer.packing.first_fit import BoxFill


def instance_order_key(instance: ItemInstance) -> tuple[float, str, int]:
    # Largest first; id and seq keep the order stable across runs
    volume = float(instance.length) * float(instance.width) * float(instance.height)
    return (-volume, instance.id, instance.seq)


def box_preference_key(box: ShippingBox, catalog_index: int) -> tuple[float, float, int]:
    return (float(box.cost), box_volume(box), catalog_index)


def partial_fill_key(fill: "BoxFill", catalog_index: int) -> tuple[float, int, float, float, int]:
    """
    Rank boxes that cannot hold everything that remains.

    Prefer the most packed volume, then the most instances, then the
    regular box preference.
    """
    cost, volume, index = box_preference_key(fill.box, catalog_index)
    return (-fill.used_volume, -len(fill.packed), cost, volume, index)
