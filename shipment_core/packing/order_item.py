from collections.abc import Mapping
from typing import Any

from .. import config
from .item import Item


class OrderItem(Item):
    """An order line to be packed, e.g. when splitting an order into shipments."""

    def __init__(
        self,
        item: Mapping,
        incl_taxes: bool = False,
        dimension_unit: str = config.DIMENSION_UNIT,
        weight_unit: str = config.WEIGHT_UNIT,
    ):
        super().__init__(item, dimension_unit=dimension_unit, weight_unit=weight_unit)

        total = float(item.get("total") or 0)
        subtotal = float(item.get("subtotal") or 0)

        if incl_taxes:
            total += float(item.get("total_tax") or 0)
            subtotal += float(item.get("subtotal_tax") or 0)

        self.quantity = int(item.get("quantity") or 0)
        self.total = self._per_unit(total, self.quantity)
        self.subtotal = self._per_unit(subtotal, self.quantity)

    def _load_product(self) -> Any:
        if not isinstance(self.reference, Mapping):
            return None
        return self.reference.get("product")

    @property
    def order_item(self) -> Mapping:
        return self.reference
