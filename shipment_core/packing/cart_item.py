from collections.abc import Mapping
from typing import Any

from .. import config
from .item import Item


class CartItem(Item):
    """A cart line to be packed.

    The cart line is a mapping holding the product under ``data`` together
    with ``quantity``, ``line_total``, ``line_subtotal``, ``line_tax`` and
    ``line_subtotal_tax``. Totals are stored per unit.
    """

    def __init__(
        self,
        item: Mapping,
        incl_taxes: bool = False,
        dimension_unit: str = config.DIMENSION_UNIT,
        weight_unit: str = config.WEIGHT_UNIT,
    ):
        super().__init__(item, dimension_unit=dimension_unit, weight_unit=weight_unit)

        line_total = float(item.get("line_total") or 0)
        line_subtotal = float(item.get("line_subtotal") or 0)

        if incl_taxes:
            line_total += float(item.get("line_tax") or 0)
            line_subtotal += float(item.get("line_subtotal_tax") or 0)

        self.quantity = int(item.get("quantity") or 0)
        self.total = self._per_unit(line_total, self.quantity)
        self.subtotal = self._per_unit(line_subtotal, self.quantity)

    def _load_product(self) -> Any:
        if not isinstance(self.reference, Mapping):
            return None
        return self.reference.get("data")

    @property
    def cart_item(self) -> Mapping:
        return self.reference
