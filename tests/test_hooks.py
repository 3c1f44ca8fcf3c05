from shipment_core.hooks import EventDispatcher, FilterRegistry


def test_filters_run_by_priority_then_registration():
    filters = FilterRegistry()
    filters.add("title", lambda value: value + "b")
    filters.add("title", lambda value: value + "a", priority=5)
    filters.add("title", lambda value: value + "c")

    assert filters.apply("title", "") == "abc"
    assert filters.apply("unknown", "x") == "x"


def test_filter_removal():
    filters = FilterRegistry()

    def shout(value):
        return value.upper()

    filters.add("title", shout)
    assert filters.remove("title", shout)
    assert not filters.remove("title", shout)
    assert not filters.has("title")
    assert filters.apply("title", "dhl") == "dhl"


def test_listener_may_disconnect_itself():
    events = EventDispatcher()
    calls = []

    def once(order_id):
        calls.append(order_id)
        events.disconnect("order_updated", once)

    events.connect("order_updated", once)
    events.connect("order_updated", lambda order_id: calls.append(-order_id))

    events.emit("order_updated", 3)
    events.emit("order_updated", 4)

    assert calls == [3, -3, -4]
