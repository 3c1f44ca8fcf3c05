"""Keeps shipments in sync with their order.

The host calls the entry points of ``ShipmentValidator`` whenever an order,
one of its items or one of its refunds changes, or connects them to an
``EventDispatcher`` through ``register``. Everything that used to live in
request globals is carried by an explicit ``RequestContext``.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Set

from . import config
from .hooks import EventDispatcher
from .options import Options
from .orders import Order, OrderLine, Shipment, ShipmentOrder
from .store import OrderStore

_logger = logging.getLogger(__name__)

SHIPPED_DATE_META = "date_shipped"


@dataclass
class RequestContext:
    """State of the request that triggered the events."""

    screen: str = ""
    doing_ajax: bool = False
    saving_post: bool = False
    params: Dict[str, Any] = field(default_factory=dict)
    edit_screens: Iterable[str] = config.ORDER_EDIT_SCREENS
    admin_action_marker: str = config.ADMIN_ORDER_ACTION_MARKER
    orders_being_saved: Set[int] = field(default_factory=set)
    pending_validation: Set[int] = field(default_factory=set)
    new_orders: Set[int] = field(default_factory=set)

    def is_order_edit_screen(self) -> bool:
        return bool(self.screen) and self.screen in self.edit_screens

    def is_admin_order_save(self) -> bool:
        """Admin order adjustments (add/remove item, save) trigger a
        validation on the order itself, item hooks are redundant then."""
        if self.saving_post:
            return True
        action = str(self.params.get("action") or "")
        return (
            self.doing_ajax
            and bool(action)
            and "order_id" in self.params
            and self.admin_action_marker in action
        )


def is_edit_lock_save(changes: Optional[Dict[str, Any]]) -> bool:
    """A save that only refreshes the edit lock."""
    return not changes or (len(changes) == 1 and "date_modified" in changes)


class ShipmentValidator:
    def __init__(
        self,
        get_shipment_order: Callable[[int], Optional[ShipmentOrder]],
        options: Options,
        order_store: Optional[OrderStore] = None,
        events: Optional[EventDispatcher] = None,
        clock: Callable[[], float] = time.time,
        request: Optional[RequestContext] = None,
    ):
        self.get_shipment_order = get_shipment_order
        self.options = options
        self.order_store = order_store
        self.events = events if events is not None else EventDispatcher()
        self.clock = clock
        # Used by callers that do not pass their own, e.g. dispatched events
        self.request = request if request is not None else RequestContext()

    def _request(self, request: Optional[RequestContext]) -> RequestContext:
        return request if request is not None else self.request

    def _validate(self, order_id) -> bool:
        if not order_id:
            return False
        shipment_order = self.get_shipment_order(order_id)
        if shipment_order is None:
            return False
        _logger.debug("Validating shipments of order %s", order_id)
        shipment_order.validate_shipments()
        return True

    # Order items

    def order_item_created(self, order_id: int, order_item: Optional[OrderLine] = None) -> bool:
        return self._validate(order_id)

    def order_item_updated(self, order_item: OrderLine, request: Optional[RequestContext] = None) -> bool:
        request = self._request(request)
        if request.is_admin_order_save():
            return False
        order_id = getattr(order_item, "order_id", None)
        if order_id is None or order_id in request.orders_being_saved:
            return False
        return self._validate(order_id)

    def order_item_deleted(self, order_item_id: int, order_id: int) -> bool:
        try:
            shipment_order = self.get_shipment_order(order_id) if order_id else None
            if shipment_order is None:
                return False

            for shipment in shipment_order.get_shipments():
                if not shipment.is_editable():
                    continue
                item = shipment.get_item_by_order_item_id(order_item_id)
                if item:
                    shipment.remove_item(item.id)

            shipment_order.save()
            return True
        except Exception:  # pylint: disable=broad-except
            _logger.exception("Failed to remove order item %s from shipments", order_item_id)
            return False

    # Orders

    def before_order_save(self, order: Order, changes: Optional[Dict[str, Any]], request: Optional[RequestContext] = None) -> bool:
        """Returns whether the save will trigger a validation."""
        request = self._request(request)
        request.orders_being_saved.add(order.id)

        if request.is_order_edit_screen() and is_edit_lock_save(changes):
            _logger.debug("Order %s: edit-lock save, skipping validation", order.id)
            return False

        request.pending_validation.add(order.id)
        return True

    def order_updated(self, order_id: int, request: Optional[RequestContext] = None) -> bool:
        request = self._request(request)
        if order_id not in request.pending_validation:
            return False
        request.pending_validation.discard(order_id)
        return self._validate(order_id)

    def new_order(self, order_id: int, request: Optional[RequestContext] = None):
        request = self._request(request)
        request.new_orders.add(order_id)

    def after_order_save(self, order: Order, request: Optional[RequestContext] = None) -> bool:
        request = self._request(request)
        if order.id not in request.new_orders:
            return False
        request.new_orders.discard(order.id)
        return self._validate(order.id)

    def order_status_changed(self, order_id: int, status: str) -> int:
        """Delete editable shipments of cancelled orders."""
        if status not in config.CANCELLED_ORDER_STATUSES:
            return 0
        shipment_order = self.get_shipment_order(order_id)
        if shipment_order is None:
            return 0

        removed = 0
        for shipment in shipment_order.get_shipments():
            if shipment.is_editable():
                shipment_order.remove_shipment(shipment.id)
                removed += 1
        shipment_order.save()

        if removed:
            _logger.info("Order %s %s: deleted %d editable shipment(s)", order_id, status, removed)
        return removed

    def order_deleted(self, order_id: int) -> int:
        shipment_order = self.get_shipment_order(order_id)
        if shipment_order is None:
            return 0

        removed = 0
        for shipment in shipment_order.get_shipments():
            if shipment.is_editable():
                shipment_order.remove_shipment(shipment.id)
                removed += 1
        shipment_order.save()
        return removed

    # Refunds

    def refund_updated(self, refund: Order) -> bool:
        if refund.parent_id <= 0:
            return False
        return self._validate(refund.parent_id)

    def refund_deleted(self, refund_id: int, parent_order_id: int) -> bool:
        """The parent has to be looked up by the host before the refund is gone."""
        if not parent_order_id:
            _logger.debug("Refund %s deleted without parent order", refund_id)
            return False
        return self._validate(parent_order_id)

    # Shipments and providers

    def shipment_status_changing(self, shipment: Shipment, new_status: str = ""):
        if shipment.type == "simple":
            self.check_order_shipped(shipment.order_id)

    def check_order_shipped(self, order_id: int) -> Optional[bool]:
        shipment_order = self.get_shipment_order(order_id)
        if shipment_order is None:
            return None

        if shipment_order.is_shipped():
            self.events.emit("order_shipped", order_id)
            if self.order_store is not None:
                self.order_store.update_meta(order_id, SHIPPED_DATE_META, int(self.clock()))
            return True

        if self.order_store is not None:
            self.order_store.delete_meta(order_id, SHIPPED_DATE_META)
        return False

    def shipping_provider_deactivated(self, provider) -> bool:
        default_provider = self.options.get(config.DEFAULT_PROVIDER_OPTION, "")
        if default_provider and default_provider == provider.get_name():
            self.options.set(config.DEFAULT_PROVIDER_OPTION, "")
            _logger.info("Default shipping provider %s deactivated, unsetting default", default_provider)
            return True
        return False

    def register(self, events: EventDispatcher):
        """Connect every entry point to the host's events."""
        events.connect("order_item_created", self.order_item_created)
        events.connect("order_item_updated", self.order_item_updated)
        events.connect("order_item_deleted", self.order_item_deleted)
        events.connect("before_order_save", self.before_order_save)
        events.connect("order_updated", self.order_updated)
        events.connect("new_order", self.new_order)
        events.connect("after_order_save", self.after_order_save, priority=300)
        events.connect("order_deleted", self.order_deleted)
        for status in config.CANCELLED_ORDER_STATUSES:
            events.connect(f"order_status_{status}", lambda order_id, s=status: self.order_status_changed(order_id, s))
        events.connect("refund_updated", self.refund_updated)
        events.connect("refund_deleted", self.refund_deleted)
        events.connect("shipment_before_status_change", self.shipment_status_changing, priority=5)
        events.connect("shipping_provider_deactivated", self.shipping_provider_deactivated)
