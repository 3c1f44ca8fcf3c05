from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union

from .. import config
from ..exceptions import InvalidItemError
from ..units import format_decimal, get_dimension, get_weight


@dataclass
class Product:
    """Host product as seen by the packer. Raw fields are in store units."""

    id: int
    sku: str = ""
    width: Union[str, float, None] = ""
    length: Union[str, float, None] = ""
    height: Union[str, float, None] = ""
    weight: Union[str, float, None] = ""


class Item(ABC):
    """Base class for anything that can be put in a box.

    Subclasses extract the product from their reference and compute
    dimensions (mm), weight (g) and per-unit prices once at construction.
    """

    def __init__(self, reference: Any, dimension_unit: str = config.DIMENSION_UNIT, weight_unit: str = config.WEIGHT_UNIT):
        self.reference = reference
        self.dimension_unit = dimension_unit
        self.weight_unit = weight_unit
        self.product: Optional[Product] = self._load_product()

        if not isinstance(self.product, Product):
            raise InvalidItemError("Invalid item")

        self.width = self._to_mm(self.product.width)
        self.length = self._to_mm(self.product.length)
        self.depth = self._to_mm(self.product.height)
        self.weight = int(get_weight(format_decimal(self.product.weight), "g", self.weight_unit))
        self.total = 0.0
        self.subtotal = 0.0

    @abstractmethod
    def _load_product(self):
        """Return the Product behind the reference, or anything else when there is none."""

    def _to_mm(self, raw) -> int:
        return int(get_dimension(format_decimal(raw), "mm", self.dimension_unit))

    @staticmethod
    def _per_unit(amount: float, quantity) -> float:
        quantity = float(quantity or 0)
        return amount / quantity if quantity > 0 else 0

    @property
    def id(self) -> int:
        return self.product.id

    @property
    def description(self) -> str:
        """SKU, falling back to the product id."""
        if self.product.sku:
            return self.product.sku
        return str(self.product.id)

    @property
    def volume(self) -> int:
        return self.width * self.length * self.depth

    def __repr__(self):
        return (
            f"<{type(self).__name__} {self.description} "
            f"{self.width}x{self.length}x{self.depth}mm {self.weight}g>"
        )
