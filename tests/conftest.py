import pytest

from shipment_core.options import MemoryOptions
from shipment_core.orders import Order, OrderLine, Shipment, ShipmentItem, ShipmentOrder
from shipment_core.store import MemoryOrderStore, MemoryProviderStore, MemoryShipmentStore


@pytest.fixture
def provider_store():
    return MemoryProviderStore(
        [
            {
                "activated": True,
                "title": "DHL",
                "name": "dhl",
                "description": "",
                "tracking_url_placeholder": "https://track.example.com/?id={tracking_id}&order={order_number}",
                "tracking_desc_placeholder": "{shipping_provider}: {tracking_id}",
            },
            {"activated": True, "title": "Hermes", "name": "hermes"},
        ]
    )


@pytest.fixture
def options():
    return MemoryOptions({"default_shipping_provider": "dhl"})


@pytest.fixture
def shipment_store():
    return MemoryShipmentStore()


@pytest.fixture
def order_store():
    return MemoryOrderStore()


@pytest.fixture
def order():
    return Order(
        id=100,
        number="1001",
        status="processing",
        items={
            1: OrderLine(id=1, order_id=100, quantity=2),
            2: OrderLine(id=2, order_id=100, quantity=1),
        },
    )


@pytest.fixture
def shipment_order(order, shipment_store):
    shipments = [
        Shipment(id=10, order_id=100, status="draft", items=[ShipmentItem(id=1, order_item_id=1, quantity=2)]),
        Shipment(id=11, order_id=100, status="shipped", items=[ShipmentItem(id=2, order_item_id=2, quantity=1)]),
    ]
    return ShipmentOrder(order, shipments, shipment_store)
