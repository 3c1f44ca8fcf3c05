import pytest

from shipment_core.exceptions import InvalidItemError
from shipment_core.packing import Box, CartItem, OrderItem, Packer, Product
from shipment_core.packing.item import Item


def _line(product, quantity=2, **totals):
    line = {
        "data": product,
        "quantity": quantity,
        "line_total": 20.0,
        "line_subtotal": 24.0,
        "line_tax": 3.8,
        "line_subtotal_tax": 4.56,
    }
    line.update(totals)
    return line


@pytest.fixture
def product():
    return Product(id=7, sku="MUG-1", width="10", length="12.5", height="8", weight="0.25")


def test_cart_item_dimensions_in_mm_and_grams(product):
    item = CartItem(_line(product))

    assert (item.width, item.length, item.depth) == (100, 125, 80)
    assert item.weight == 250
    assert item.description == "MUG-1"
    assert item.id == 7


def test_cart_item_totals_per_unit(product):
    item = CartItem(_line(product))
    assert item.total == 10.0
    assert item.subtotal == 12.0


def test_cart_item_totals_including_taxes(product):
    item = CartItem(_line(product), incl_taxes=True)
    assert item.total == pytest.approx(11.9)
    assert item.subtotal == pytest.approx(14.28)


def test_zero_quantity_yields_zero_totals(product):
    item = CartItem(_line(product, quantity=0))
    assert item.total == 0
    assert item.subtotal == 0


def test_missing_dimensions_default_to_zero():
    item = CartItem(_line(Product(id=3, width="", length=None, height="", weight="")))
    assert (item.width, item.length, item.depth, item.weight) == (0, 0, 0, 0)
    assert item.description == "3"


def test_conversion_truncates_instead_of_rounding():
    # 2in = 50.8mm, 0.9999kg = 999.9g
    item = CartItem(
        _line(Product(id=1, width="2", length="2", height="2", weight="0.9999")),
        dimension_unit="in",
    )
    assert item.width == 50
    assert item.weight == 999


@pytest.mark.parametrize("data", [None, {"id": 7}, "product"])
def test_non_product_reference_fails(data):
    with pytest.raises(InvalidItemError):
        CartItem(_line(data))


def test_non_mapping_line_fails(product):
    with pytest.raises(InvalidItemError):
        CartItem([product])


def test_order_item(product):
    item = OrderItem({"product": product, "quantity": 4, "total": 10, "total_tax": 2, "subtotal": 12})

    assert item.total == 2.5
    assert item.subtotal == 3.0
    assert OrderItem({"product": product, "quantity": 4, "total": 10, "total_tax": 2}, incl_taxes=True).total == 3.0


def test_box_fits_with_rotation():
    box = Box(box_id=1, name="S", width=130, length=90, depth=110, max_load=1000)
    item = CartItem(_line(Product(id=1, width="12.5", length="10", height="8", weight="0.5")))

    assert box.fits(item)
    assert not Box(box_id=2, name="Flat", width=200, length=200, depth=50).fits(item)
    assert not Box(box_id=3, name="Light", width=200, length=200, depth=200, max_load=100).fits(item)


def test_packer_prefers_smallest_box(product):
    boxes = [
        Box(box_id=1, name="Large", width=400, length=400, depth=400),
        Box(box_id=2, name="Small", width=150, length=150, depth=150),
    ]
    result = Packer([CartItem(_line(product, quantity=1))], boxes).pack()

    assert result.success
    assert result.box_count == 1
    assert result.packed_boxes[0].box.name == "Small"


def test_packer_opens_new_box_when_load_exceeded(product):
    box = Box(box_id=1, name="M", width=300, length=300, depth=300, empty_weight=100, max_load=600)
    result = Packer([CartItem(_line(product, quantity=3))], [box]).pack()

    assert result.box_count == 2
    assert [len(pb.items) for pb in result.packed_boxes] == [2, 1]
    assert result.packed_boxes[0].total_weight == 600


def test_packer_reports_units_that_fit_nowhere(product):
    huge = CartItem(_line(Product(id=9, width="100", length="100", height="100", weight="1"), quantity=1))
    box = Box(box_id=1, name="S", width=150, length=150, depth=150)

    result = Packer([CartItem(_line(product, quantity=1)), huge], [box]).pack()

    assert not result.success
    assert result.unpacked_items == [huge]
    assert result.box_count == 1


def test_packer_without_items_or_boxes(product):
    assert not Packer([], [Box(box_id=1, name="S", width=1, length=1, depth=1)]).pack().success
    assert not Packer([CartItem(_line(product))], []).pack().success


def test_item_needs_a_product_loader():
    class Bare(Item):
        pass

    with pytest.raises(TypeError):
        Bare({"product": Product(id=1)})
