import pytest

from shipment_core.hooks import EventDispatcher
from shipment_core.orders import Order, Shipment, ShipmentItem, ShipmentOrder
from shipment_core.providers import ShippingProvider
from shipment_core.validation import RequestContext, ShipmentValidator, is_edit_lock_save

EDIT_SCREEN = "woocommerce_page_wc-orders"


class RecordingShipmentOrder(ShipmentOrder):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.validations = 0

    def validate_shipments(self):
        self.validations += 1
        super().validate_shipments()


@pytest.fixture
def shipment_order(order, shipment_store):
    shipments = [
        Shipment(id=10, order_id=100, status="draft", items=[ShipmentItem(id=1, order_item_id=1, quantity=2)]),
        Shipment(id=11, order_id=100, status="shipped", items=[ShipmentItem(id=2, order_item_id=2, quantity=1)]),
    ]
    return RecordingShipmentOrder(order, shipments, shipment_store)


@pytest.fixture
def events():
    return EventDispatcher()


@pytest.fixture
def validator(shipment_order, options, order_store, events):
    orders = {100: shipment_order}
    return ShipmentValidator(orders.get, options, order_store=order_store, events=events, clock=lambda: 1700000000.5)


@pytest.mark.parametrize(
    "changes,expected",
    [(None, True), ({}, True), ({"date_modified": 1}, True), ({"date_modified": 1, "status": "x"}, False), ({"status": "x"}, False)],
)
def test_is_edit_lock_save(changes, expected):
    assert is_edit_lock_save(changes) is expected


@pytest.mark.parametrize("changes", [{}, {"date_modified": "2024-01-01"}])
def test_edit_lock_save_skips_validation(validator, order, shipment_order, changes):
    request = RequestContext(screen=EDIT_SCREEN)

    assert validator.before_order_save(order, changes, request) is False
    assert validator.order_updated(order.id, request) is False
    assert shipment_order.validations == 0


def test_real_change_validates(validator, order, shipment_order):
    request = RequestContext(screen=EDIT_SCREEN)

    assert validator.before_order_save(order, {"date_modified": "2024-01-01", "billing_email": "a@b.c"}, request)
    assert validator.order_updated(order.id, request)
    assert shipment_order.validations == 1

    # Only once per save
    assert validator.order_updated(order.id, request) is False


def test_timestamp_only_save_outside_edit_screen_validates(validator, order, shipment_order):
    request = RequestContext()
    assert validator.before_order_save(order, {"date_modified": "2024-01-01"}, request)
    validator.order_updated(order.id, request)
    assert shipment_order.validations == 1


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"saving_post": True},
        {"doing_ajax": True, "params": {"action": "woocommerce_add_order_item", "order_id": "100"}},
    ],
)
def test_item_update_suppressed_during_admin_order_save(validator, order, shipment_order, request_kwargs):
    request = RequestContext(**request_kwargs)

    assert validator.order_item_updated(order.items[1], request) is False
    assert shipment_order.validations == 0


def test_item_update_outside_admin_save_validates(validator, order, shipment_order):
    ajax = RequestContext(doing_ajax=True, params={"action": "heartbeat", "order_id": "100"})

    assert validator.order_item_updated(order.items[1], ajax)
    assert validator.order_item_updated(order.items[1])
    assert shipment_order.validations == 2


def test_item_update_suppressed_while_order_is_saved(validator, order, shipment_order):
    request = RequestContext()
    validator.before_order_save(order, {"status": "completed"}, request)

    assert validator.order_item_updated(order.items[1], request) is False
    validator.order_updated(order.id, request)
    assert shipment_order.validations == 1


def test_item_created_validates(validator, shipment_order):
    assert validator.order_item_created(100)
    assert not validator.order_item_created(999)
    assert shipment_order.validations == 1


def test_item_deleted_only_touches_editable_shipments(validator, shipment_order):
    shipment_order.shipments.append(
        Shipment(id=12, order_id=100, status="shipped", items=[ShipmentItem(id=3, order_item_id=1, quantity=1)])
    )

    assert validator.order_item_deleted(1, 100)

    assert shipment_order.get_shipment(10).items == []
    assert len(shipment_order.get_shipment(12).items) == 1


def test_item_deleted_swallows_host_errors(options):
    def broken(order_id):
        raise RuntimeError("database gone")

    assert ShipmentValidator(broken, options).order_item_deleted(1, 100) is False


def test_new_order_validates_after_save(validator, order, shipment_order):
    request = RequestContext()
    validator.new_order(order.id, request)

    assert validator.after_order_save(order, request)
    assert validator.after_order_save(order, request) is False
    assert shipment_order.validations == 1


def test_order_deleted_keeps_non_editable_shipments(validator, shipment_order, shipment_store):
    assert validator.order_deleted(100) == 1

    assert [s.id for s in shipment_order.get_shipments()] == [11]
    assert shipment_store.deleted == [10]
    assert 11 in shipment_store.saved


@pytest.mark.parametrize("status", ["cancelled", "failed", "refunded"])
def test_cancelling_status_deletes_editable_shipments(validator, shipment_order, shipment_store, status):
    assert validator.order_status_changed(100, status) == 1
    assert shipment_store.deleted == [10]


def test_other_status_keeps_shipments(validator, shipment_order):
    assert validator.order_status_changed(100, "completed") == 0
    assert len(shipment_order.get_shipments()) == 2


def test_refund_deleted_revalidates_parent(validator, order, shipment_order):
    order.items[1].refunded_quantity = 2
    order.items[2].refunded_quantity = 1

    assert validator.refund_deleted(500, parent_order_id=100)

    assert shipment_order.validations == 1
    # Editable shipment emptied by the refund is removed, the shipped one stays
    assert [s.id for s in shipment_order.get_shipments()] == [11]
    assert shipment_order.get_shipment(11).items[0].quantity == 1


def test_refund_deleted_without_parent(validator, shipment_order):
    assert validator.refund_deleted(500, parent_order_id=0) is False
    assert shipment_order.validations == 0


def test_refund_updated(validator, shipment_order):
    assert validator.refund_updated(Order(id=501, is_refund=True, parent_id=0)) is False
    assert validator.refund_updated(Order(id=501, is_refund=True, parent_id=100))
    assert shipment_order.validations == 1


def test_order_shipped(validator, shipment_order, order_store, events):
    shipped = []
    events.connect("order_shipped", shipped.append)

    shipment = shipment_order.get_shipment(10)
    shipment.status = "shipped"
    validator.shipment_status_changing(shipment, "shipped")

    assert shipped == [100]
    assert order_store.meta[100]["date_shipped"] == 1700000000

    shipment.status = "processing"
    assert validator.check_order_shipped(100) is False
    assert "date_shipped" not in order_store.meta[100]


def test_return_shipments_do_not_check_shipped(validator, order_store):
    validator.shipment_status_changing(Shipment(id=20, order_id=100, type="return", status="shipped"))
    assert order_store.meta == {}


def test_deactivating_default_provider_clears_default(validator, provider_store, options, events):
    validator.register(events)

    ShippingProvider("hermes", store=provider_store, events=events).deactivate()
    assert options.get("default_shipping_provider") == "dhl"

    ShippingProvider("dhl", store=provider_store, events=events).deactivate()
    assert options.get("default_shipping_provider") == ""


def test_registered_status_events(validator, events, shipment_store):
    validator.register(events)

    events.emit("order_status_failed", 100)

    assert shipment_store.deleted == [10]


def test_dispatched_order_save_validates(validator, events, order, shipment_order):
    validator.register(events)

    events.emit("before_order_save", order, {"status": "completed"})
    events.emit("order_updated", order.id)
    assert shipment_order.validations == 1

    events.emit("new_order", order.id)
    events.emit("after_order_save", order)
    assert shipment_order.validations == 2


def test_dispatched_item_update_suppressed_while_order_is_saved(validator, events, order, shipment_order):
    validator.register(events)

    events.emit("before_order_save", order, {"status": "completed"})
    events.emit("order_item_updated", order.items[1])
    assert shipment_order.validations == 0


def test_dispatched_edit_lock_save_skips_validation(options, events, order, shipment_order):
    validator = ShipmentValidator({100: shipment_order}.get, options, request=RequestContext(screen=EDIT_SCREEN))
    validator.register(events)

    events.emit("before_order_save", order, {"date_modified": "2024-01-01"})
    events.emit("order_updated", order.id)
    assert shipment_order.validations == 0
