from .box import Box
from .cart_item import CartItem
from .item import Item, Product
from .order_item import OrderItem
from .packer import PackedBox, Packer, PackingResult

__all__ = [
    "Box",
    "CartItem",
    "Item",
    "OrderItem",
    "PackedBox",
    "Packer",
    "PackingResult",
    "Product",
]
