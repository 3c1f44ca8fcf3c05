class ShipmentError(Exception):
    """Base error for the shipment core."""


class InvalidItemError(ShipmentError):
    """A packable item was built from something that is not a product."""


class UnitError(ShipmentError):
    """Unknown dimension or weight unit."""


class ProviderNotFoundError(ShipmentError):
    """The provider record no longer exists in the store."""
