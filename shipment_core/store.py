"""Storage interfaces implemented by the host.

The host framework owns persistence. The core only needs to load and save
flat records, which is what these interfaces describe. The in-memory
implementations back standalone use and tests.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import ProviderNotFoundError

_logger = logging.getLogger(__name__)


class ProviderStore(ABC):
    @abstractmethod
    def read(self, provider_id: int) -> Dict[str, Any]:
        """Return the stored fields or raise ProviderNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[int]:
        raise NotImplementedError

    @abstractmethod
    def all(self) -> List[Tuple[int, Dict[str, Any]]]:
        raise NotImplementedError

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> int:
        raise NotImplementedError

    @abstractmethod
    def update(self, provider_id: int, changes: Dict[str, Any]):
        raise NotImplementedError

    @abstractmethod
    def delete(self, provider_id: int):
        raise NotImplementedError


class MemoryProviderStore(ProviderStore):
    def __init__(self, rows: Iterable[Dict[str, Any]] = ()):
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._ids = itertools.count(1)
        for row in rows:
            self.create(row)

    def read(self, provider_id: int) -> Dict[str, Any]:
        try:
            return dict(self._rows[provider_id])
        except KeyError:
            raise ProviderNotFoundError(f"Shipping provider {provider_id} not found") from None

    def find_by_name(self, name: str) -> Optional[int]:
        for provider_id, row in self._rows.items():
            if row.get("name") == name:
                return provider_id
        return None

    def all(self) -> List[Tuple[int, Dict[str, Any]]]:
        return [(provider_id, dict(row)) for provider_id, row in self._rows.items()]

    def create(self, data: Dict[str, Any]) -> int:
        provider_id = next(self._ids)
        self._rows[provider_id] = dict(data)
        return provider_id

    def update(self, provider_id: int, changes: Dict[str, Any]):
        if provider_id not in self._rows:
            raise ProviderNotFoundError(f"Shipping provider {provider_id} not found")
        self._rows[provider_id].update(changes)

    def delete(self, provider_id: int):
        self._rows.pop(provider_id, None)


class ShipmentStore(ABC):
    """Persists the shipments of an order."""

    @abstractmethod
    def save_shipment(self, shipment):
        raise NotImplementedError

    @abstractmethod
    def delete_shipment(self, shipment):
        raise NotImplementedError


class OrderStore(ABC):
    """Order metadata written by the core, e.g. the shipped date."""

    @abstractmethod
    def update_meta(self, order_id: int, key: str, value: Any):
        raise NotImplementedError

    @abstractmethod
    def delete_meta(self, order_id: int, key: str):
        raise NotImplementedError


class MemoryShipmentStore(ShipmentStore):
    def __init__(self):
        self.saved: Dict[int, Any] = {}
        self.deleted: List[int] = []

    def save_shipment(self, shipment):
        self.saved[shipment.id] = shipment

    def delete_shipment(self, shipment):
        _logger.debug("Deleting shipment %s", shipment.id)
        self.saved.pop(shipment.id, None)
        self.deleted.append(shipment.id)


class MemoryOrderStore(OrderStore):
    def __init__(self):
        self.meta: Dict[int, Dict[str, Any]] = {}

    def update_meta(self, order_id: int, key: str, value: Any):
        self.meta.setdefault(order_id, {})[key] = value

    def delete_meta(self, order_id: int, key: str):
        self.meta.get(order_id, {}).pop(key, None)
