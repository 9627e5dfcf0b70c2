from __future__ import annotations

from parcel_optimizer.geometry import boxes_overlap, can_place
from parcel_optimizer.models import Placement, ShippingBox


def test_boxes_overlap_overlapping() -> None:
    """Test that overlapping boxes are detected."""
    # Box a: (0, 0, 0) to (2, 2, 2)
    a = (0.0, 0.0, 0.0, 2.0, 2.0, 2.0)
    # Box b: (1, 1, 1) to (3, 3, 3) - overlaps with a
    b = (1.0, 1.0, 1.0, 3.0, 3.0, 3.0)

    assert boxes_overlap(a, b) is True


def test_boxes_overlap_not_overlapping() -> None:
    """Test that non-overlapping boxes are detected."""
    a = (0.0, 0.0, 0.0, 1.0, 1.0, 1.0)
    b = (2.0, 2.0, 2.0, 3.0, 3.0, 3.0)

    assert boxes_overlap(a, b) is False


def test_touching_faces_do_not_overlap() -> None:
    a = (0.0, 0.0, 0.0, 1.0, 1.0, 1.0)
    b = (1.0, 0.0, 0.0, 2.0, 1.0, 1.0)

    assert boxes_overlap(a, b) is False


def test_can_place_respects_box_bounds() -> None:
    box = ShippingBox(id="B", name="Box", length=10, width=5, height=4)
    inside = Placement(item_id="A", seq=0, x=0, y=0, z=0, rotation=(10, 5, 4))
    too_tall = Placement(item_id="A", seq=0, x=0, y=0, z=1, rotation=(10, 5, 4))

    assert can_place(inside, box, []) is True
    assert can_place(too_tall, box, []) is False


def test_can_place_rejects_overlap_with_existing() -> None:
    box = ShippingBox(id="B", name="Box", length=10, width=10, height=10)
    existing = [Placement(item_id="A", seq=0, x=0, y=0, z=0, rotation=(5, 5, 5))]
    overlapping = Placement(item_id="B", seq=1, x=4, y=0, z=0, rotation=(5, 5, 5))
    adjacent = Placement(item_id="B", seq=1, x=5, y=0, z=0, rotation=(5, 5, 5))

    assert can_place(overlapping, box, existing) is False
    assert can_place(adjacent, box, existing) is True


def test_float_noise_at_shared_faces_is_not_overlap() -> None:
    a = (0.0, 0.0, 0.0, 2.2 + 2.2, 2.2, 2.2)
    b = (4.4, 0.0, 0.0, 6.6, 2.2, 2.2)

    assert boxes_overlap(a, b) is False


def test_can_place_tolerates_float_noise_at_box_edge() -> None:
    box = ShippingBox(id="B", name="Box", length=6.6, width=2.2, height=2.2)
    # 4.4 + 2.2 == 6.6000000000000005
    last = Placement(item_id="A", seq=2, x=4.4, y=0, z=0, rotation=(2.2, 2.2, 2.2))

    assert can_place(last, box, []) is True
