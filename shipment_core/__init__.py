"""Shipment tracking, shipping providers and packing for e-commerce orders."""

from .exceptions import InvalidItemError, ProviderNotFoundError, ShipmentError, UnitError
from .hooks import EventDispatcher, FilterRegistry
from .options import MemoryOptions, Options
from .orders import Order, OrderLine, Shipment, ShipmentItem, ShipmentOrder
from .providers import ProviderKind, ProviderRegistry, ShippingProvider, ShippingProviderIntegration
from .validation import RequestContext, ShipmentValidator

__version__ = "0.1.0"

__all__ = [
    "EventDispatcher",
    "FilterRegistry",
    "InvalidItemError",
    "MemoryOptions",
    "Options",
    "Order",
    "OrderLine",
    "ProviderKind",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "RequestContext",
    "Shipment",
    "ShipmentError",
    "ShipmentItem",
    "ShipmentOrder",
    "ShipmentValidator",
    "ShippingProvider",
    "ShippingProviderIntegration",
    "UnitError",
]
