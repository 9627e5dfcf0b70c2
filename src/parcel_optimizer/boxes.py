# src/parcel_optimizer/boxes.py
from __future__ import annotations

from parcel_optimizer.models import ShippingBox

# Outer dims in centimeters, ordered smallest to largest.
DEFAULT_BOX_CATALOG: list[ShippingBox] = [
    ShippingBox(id="BOX_XS", name="Extra Small Box", width=15.0, length=20.0, height=10.0, cost=1.0, max_weight=5.0),
    ShippingBox(id="BOX_S", name="Small Box", width=25.0, length=30.0, height=15.0, cost=2.0, max_weight=10.0),
    ShippingBox(id="BOX_M", name="Medium Box", width=30.0, length=40.0, height=25.0, cost=3.0, max_weight=20.0),
    ShippingBox(id="BOX_L", name="Large Box", width=40.0, length=50.0, height=35.0, cost=5.0, max_weight=30.0),
    ShippingBox(id="BOX_XL", name="Extra Large Box", width=50.0, length=60.0, height=50.0, cost=8.0, max_weight=30.0),
]


def get_box(box_id: str, catalog: list[ShippingBox] | None = None) -> ShippingBox:
    boxes = DEFAULT_BOX_CATALOG if catalog is None else catalog
    key = box_id.strip().upper()
    for box in boxes:
        if box.id.upper() == key:
            return box
    raise ValueError(f"Unknown box '{box_id}'. Valid: {sorted(b.id for b in boxes)}")
