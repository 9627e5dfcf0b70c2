"""Multi-box 3D packer: picks boxes from a fixed catalog for a set of items."""

from __future__ import annotations

import logging

from parcel_optimizer.metrics import round_weight
from parcel_optimizer.models import (
    ItemInstance,
    PackableItem,
    PackedParcel,
    PackingResult,
    ParcelItem,
    ShippingBox,
)
from parcel_optimizer.packing.constraints import fits_alone
from parcel_optimizer.packing.first_fit import BoxFill, pack_into_box
from parcel_optimizer.packing.heuristics import box_preference_key, partial_fill_key

logger = logging.getLogger(__name__)


def expand_instances(items: list[PackableItem]) -> list[ItemInstance]:
    """One ItemInstance per unit of quantity, numbered in input order."""
    instances: list[ItemInstance] = []
    for item in items:
        for _ in range(item.quantity):
            instances.append(ItemInstance(
                id=item.id,
                seq=len(instances),
                width=item.width,
                length=item.length,
                height=item.height,
                weight=item.weight,
            ))
    return instances


class BoxPacker:
    """
    Greedy first-fit-decreasing packer over a box catalog.

    Each round tries every catalog box against the remaining instances:
      - if some boxes take everything, the cheapest of them wins
      - otherwise the box holding the most volume wins
    A final pass moves every parcel into the cheapest box that still holds
    all of its contents.
    """

    def __init__(self, catalog: list[ShippingBox]):
        if not catalog:
            raise ValueError("Box catalog must contain at least one box")
        self.catalog = list(catalog)
        self._ranked = sorted(
            enumerate(self.catalog),
            key=lambda pair: box_preference_key(pair[1], pair[0]),
        )

    def pack(self, items: list[PackableItem]) -> list[PackedParcel]:
        """
        Pack items and return the parcels.

        Returns an empty list when items is empty, and also when any unit
        fits no box in the catalog (a partial result is never returned).
        """
        result = self.pack_detailed(items)
        if result.unpacked:
            skus = sorted({i.id for i in result.unpacked})
            logger.warning(
                f"{len(result.unpacked)} unit(s) fit no catalog box (SKUs: {', '.join(skus)})"
            )
            return []
        return result.parcels

    def pack_detailed(self, items: list[PackableItem]) -> PackingResult:
        instances = expand_instances(items)
        if not instances:
            return PackingResult()

        unfit = [i for i in instances if not any(fits_alone(i, box) for box in self.catalog)]
        unfit_seqs = {i.seq for i in unfit}
        remaining = [i for i in instances if i.seq not in unfit_seqs]

        fills: list[BoxFill] = []
        while remaining:
            fill = self._choose_box(remaining)
            # Progress guard: stop if nothing could be placed anywhere
            if fill is None:
                break
            fills.append(fill)
            remaining = fill.unpacked

        parcels = [self._to_parcel(self._downsize(fill)) for fill in fills]
        unpacked = sorted(unfit + remaining, key=lambda i: i.seq)

        logger.debug(
            f"packed {len(instances) - len(unpacked)}/{len(instances)} units "
            f"into {len(parcels)} parcel(s)"
        )
        return PackingResult(parcels=parcels, unpacked=unpacked)

    def _choose_box(self, remaining: list[ItemInstance]) -> BoxFill | None:
        fills = [(index, pack_into_box(box, remaining)) for index, box in enumerate(self.catalog)]

        complete = [(index, fill) for index, fill in fills if not fill.unpacked]
        if complete:
            return min(complete, key=lambda pair: box_preference_key(pair[1].box, pair[0]))[1]

        partial = [(index, fill) for index, fill in fills if fill.packed]
        if not partial:
            return None
        return min(partial, key=lambda pair: partial_fill_key(pair[1], pair[0]))[1]

    def _downsize(self, fill: BoxFill) -> BoxFill:
        current_index = self.catalog.index(fill.box)
        current_key = box_preference_key(fill.box, current_index)
        for index, box in self._ranked:
            if box_preference_key(box, index) >= current_key:
                break
            candidate = pack_into_box(box, fill.packed)
            if not candidate.unpacked:
                return candidate
        return fill

    @staticmethod
    def _to_parcel(fill: BoxFill) -> PackedParcel:
        counts: dict[str, int] = {}
        for instance in fill.packed:
            counts[instance.id] = counts.get(instance.id, 0) + 1

        return PackedParcel(
            box_id=fill.box.id,
            box_name=fill.box.name,
            width=fill.box.width,
            length=fill.box.length,
            height=fill.box.height,
            weight=round_weight(sum(float(i.weight) for i in fill.packed)),
            items=[ParcelItem(id=item_id, quantity=qty) for item_id, qty in counts.items()],
            fill_rate=fill.fill_rate,
        )
