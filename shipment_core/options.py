from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Options(ABC):
    """Key/value settings owned by the host."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any):
        raise NotImplementedError


class MemoryOptions(Options):
    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values = dict(values or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any):
        self.values[key] = value
