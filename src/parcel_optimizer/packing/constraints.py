"""Constraints for packing optimization."""

from __future__ import annotations

from parcel_optimizer.geometry import EPSILON
from parcel_optimizer.metrics import box_volume
from parcel_optimizer.models import ItemInstance, ShippingBox


class Constraint:
    """Base class for packing constraints."""

    def check(self, instances: list[ItemInstance], box: ShippingBox) -> bool:
        """
        Check if instances satisfy the constraint in the box.

        Args:
            instances: Instances to check
            box: Box to check against

        Returns:
            True if constraint is satisfied, False otherwise
        """
        raise NotImplementedError


class VolumeConstraint(Constraint):
    """Total instance volume doesn't exceed box volume."""

    def check(self, instances: list[ItemInstance], box: ShippingBox) -> bool:
        total_volume = sum(i.length * i.width * i.height for i in instances)
        return total_volume <= box_volume(box) + EPSILON


class WeightConstraint(Constraint):
    """Total weight doesn't exceed the box's max_weight (unbounded when unset)."""

    def check(self, instances: list[ItemInstance], box: ShippingBox) -> bool:
        if box.max_weight is None:
            return True
        return sum(i.weight for i in instances) <= box.max_weight


class DimensionConstraint(Constraint):
    """Every instance fits the box in at least one orientation."""

    def check(self, instances: list[ItemInstance], box: ShippingBox) -> bool:
        box_dims = sorted((box.length, box.width, box.height))
        for instance in instances:
            dims = sorted((instance.length, instance.width, instance.height))
            if any(d > b + EPSILON for d, b in zip(dims, box_dims)):
                return False
        return True


DEFAULT_CONSTRAINTS: tuple[Constraint, ...] = (
    DimensionConstraint(),
    WeightConstraint(),
    VolumeConstraint(),
)


def fits_alone(instance: ItemInstance, box: ShippingBox) -> bool:
    """Whether a single instance could go into an empty box at all."""
    return all(c.check([instance], box) for c in DEFAULT_CONSTRAINTS)
