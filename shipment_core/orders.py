"""Orders as seen by the shipment core, and the shipments attached to them."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import config
from .store import ShipmentStore

_logger = logging.getLogger(__name__)


@dataclass
class OrderLine:
    id: int
    order_id: int
    quantity: int = 1
    refunded_quantity: int = 0
    needs_shipping: bool = True
    product: Any = None

    @property
    def shippable_quantity(self) -> int:
        return max(self.quantity - abs(self.refunded_quantity), 0)


@dataclass
class Order:
    """Host order, or refund when ``is_refund`` is set (``parent_id`` then
    points at the refunded order)."""

    id: int
    number: str = ""
    status: str = "pending"
    items: Dict[int, OrderLine] = field(default_factory=dict)
    parent_id: int = 0
    is_refund: bool = False
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ShipmentItem:
    id: int
    order_item_id: int
    quantity: int = 1


@dataclass
class Shipment:
    id: int
    order_id: int
    status: str = "draft"
    type: str = "simple"
    tracking_id: str = ""
    shipment_number: str = ""
    order_number: str = ""
    has_label: bool = False
    items: List[ShipmentItem] = field(default_factory=list)

    def is_editable(self) -> bool:
        return self.status in config.EDITABLE_SHIPMENT_STATUSES and not self.has_label

    def is_shipped(self) -> bool:
        return self.status in config.SHIPPED_SHIPMENT_STATUSES

    def get_item_by_order_item_id(self, order_item_id: int) -> Optional[ShipmentItem]:
        for item in self.items:
            if item.order_item_id == order_item_id:
                return item
        return None

    def remove_item(self, item_id: int) -> bool:
        for item in self.items:
            if item.id == item_id:
                self.items.remove(item)
                return True
        return False

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class ShipmentOrder:
    """All shipments of one order.

    Removals are queued and only reach the store on ``save()``.
    """

    def __init__(self, order: Order, shipments: List[Shipment], store: ShipmentStore):
        self.order = order
        self.shipments = list(shipments)
        self.store = store
        self._removed: List[Shipment] = []

    def get_order(self) -> Order:
        return self.order

    def get_shipments(self) -> List[Shipment]:
        return list(self.shipments)

    def get_simple_shipments(self) -> List[Shipment]:
        return [s for s in self.shipments if s.type == "simple"]

    def get_shipment(self, shipment_id: int) -> Optional[Shipment]:
        return next((s for s in self.shipments if s.id == shipment_id), None)

    def remove_shipment(self, shipment_id: int) -> bool:
        shipment = self.get_shipment(shipment_id)
        if shipment is None:
            return False
        self.shipments.remove(shipment)
        self._removed.append(shipment)
        return True

    def save(self):
        for shipment in self._removed:
            self.store.delete_shipment(shipment)
        if self._removed:
            _logger.info("Order %s: removed %d shipment(s)", self.order.id, len(self._removed))
        self._removed = []

        for shipment in self.shipments:
            self.store.save_shipment(shipment)

    def _quantity_held_elsewhere(self, order_item_id: int, shipment: Shipment) -> int:
        held = 0
        for other in self.get_simple_shipments():
            if other is shipment:
                continue
            item = other.get_item_by_order_item_id(order_item_id)
            if item:
                held += item.quantity
        return held

    def validate_shipments(self):
        """Bring editable shipments back in line with the order."""
        for shipment in self.get_simple_shipments():
            if not shipment.is_editable():
                continue

            for item in list(shipment.items):
                line = self.order.items.get(item.order_item_id)
                if line is None or not line.needs_shipping:
                    shipment.remove_item(item.id)
                    continue

                available = line.shippable_quantity - self._quantity_held_elsewhere(line.id, shipment)
                if item.quantity > available:
                    item.quantity = max(available, 0)
                if item.quantity <= 0:
                    shipment.remove_item(item.id)

            if not shipment.items:
                self.remove_shipment(shipment.id)

        self.save()

    def get_shippable_item_count(self) -> int:
        return sum(line.shippable_quantity for line in self.order.items.values() if line.needs_shipping)

    def get_shipped_item_count(self) -> int:
        return sum(s.get_item_count() for s in self.get_simple_shipments() if s.is_shipped())

    def is_shipped(self) -> bool:
        shippable = self.get_shippable_item_count()
        if shippable <= 0:
            return False
        return self.get_shipped_item_count() >= shippable
