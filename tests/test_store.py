import pytest

from shipment_core.exceptions import ProviderNotFoundError
from shipment_core.options import MemoryOptions, Options
from shipment_core.store import MemoryProviderStore, OrderStore, ProviderStore, ShipmentStore


@pytest.mark.parametrize("interface", [ProviderStore, ShipmentStore, OrderStore, Options])
def test_interfaces_are_abstract(interface):
    with pytest.raises(TypeError):
        interface()


def test_partial_store_cannot_be_built():
    class ReadOnlyStore(ProviderStore):
        def read(self, provider_id):
            return {}

    with pytest.raises(TypeError):
        ReadOnlyStore()


def test_memory_provider_store():
    store = MemoryProviderStore([{"name": "dhl"}, {"name": "ups"}])

    assert store.find_by_name("ups") == 2
    assert store.find_by_name("fedex") is None

    store.update(1, {"title": "DHL"})
    assert store.read(1) == {"name": "dhl", "title": "DHL"}

    store.delete(1)
    with pytest.raises(ProviderNotFoundError):
        store.read(1)


def test_memory_options():
    options = MemoryOptions({"a": 1})
    options.set("b", 2)

    assert options.get("a") == 1
    assert options.get("b") == 2
    assert options.get("c", "x") == "x"
