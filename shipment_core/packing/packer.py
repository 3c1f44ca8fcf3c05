"""Multi-box packing using First Fit Decreasing (FFD) on volume and weight."""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from .box import Box
from .item import Item

_logger = logging.getLogger(__name__)


@dataclass
class PackedBox:
    """A box with the units assigned to it."""

    box: Box
    items: List[Item] = field(default_factory=list)

    @property
    def total_item_weight(self) -> int:
        return sum(item.weight for item in self.items)

    @property
    def total_weight(self) -> int:
        """Items plus the empty box."""
        return self.total_item_weight + self.box.empty_weight

    @property
    def used_volume(self) -> int:
        return sum(item.volume for item in self.items)

    @property
    def remaining_volume(self) -> int:
        return self.box.volume - self.used_volume

    def can_hold(self, item: Item) -> bool:
        if not self.box.fits(item):
            return False
        if item.volume > self.remaining_volume:
            return False
        if self.box.max_load and self.total_item_weight + item.weight > self.box.max_load:
            return False
        return True


@dataclass
class PackingResult:
    packed_boxes: List[PackedBox] = field(default_factory=list)
    unpacked_items: List[Item] = field(default_factory=list)
    success: bool = True
    error_message: Optional[str] = None

    @property
    def box_count(self) -> int:
        return len(self.packed_boxes)


class Packer:
    """Distribute items over the fewest boxes possible.

    Every item is expanded into single units by its ``quantity``. Units that
    do not fit into any available box are reported as unpacked instead of
    failing the whole run.
    """

    def __init__(self, items: List[Item], boxes: List[Box]):
        self.items = items
        self.boxes = boxes

    def pack(self) -> PackingResult:
        if not self.items:
            return PackingResult(success=False, error_message="No items to pack")

        if not self.boxes:
            return PackingResult(success=False, error_message="No packaging configured")

        units: List[Item] = []
        for item in self.items:
            units.extend([item] * max(int(getattr(item, "quantity", 1) or 0), 0))

        units.sort(key=lambda u: (u.volume, u.weight), reverse=True)
        sorted_boxes = sorted(self.boxes, key=lambda b: (b.volume, b.priority))

        packed_boxes: List[PackedBox] = []
        unpacked: List[Item] = []

        for unit in units:
            target = next((pb for pb in packed_boxes if pb.can_hold(unit)), None)

            if target is None:
                box = next((b for b in sorted_boxes if b.fits(unit)), None)
                if box is None:
                    _logger.warning(
                        "Unit %s (%sx%sx%smm, %sg) fits no packaging",
                        unit.description,
                        unit.width,
                        unit.length,
                        unit.depth,
                        unit.weight,
                    )
                    unpacked.append(unit)
                    continue
                target = PackedBox(box=box)
                packed_boxes.append(target)

            target.items.append(unit)

        _logger.info(
            "Packing complete: %d units -> %d boxes (unpacked: %d)",
            len(units),
            len(packed_boxes),
            len(unpacked),
        )
        for i, pb in enumerate(packed_boxes, 1):
            _logger.debug(
                "  Box %d: %s (%dg, %d/%dmm3) items=%d",
                i,
                pb.box.name,
                pb.total_weight,
                pb.used_volume,
                pb.box.volume,
                len(pb.items),
            )

        return PackingResult(
            packed_boxes=packed_boxes,
            unpacked_items=unpacked,
            success=not unpacked,
            error_message=f"{len(unpacked)} unit(s) exceed all packaging" if unpacked else None,
        )
