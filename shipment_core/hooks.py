"""Named extension points and events.

Both registries are ordinary objects created by the host and handed to the
components that need them.
"""

import itertools
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Tuple

_logger = logging.getLogger(__name__)

_Entry = Tuple[int, int, Callable]


class _Registry:
    def __init__(self):
        self._callbacks: Dict[str, List[_Entry]] = defaultdict(list)
        self._counter = itertools.count()

    def _add(self, name: str, callback: Callable, priority: int = 10):
        self._callbacks[name].append((priority, next(self._counter), callback))
        self._callbacks[name].sort(key=lambda e: (e[0], e[1]))

    def _remove(self, name: str, callback: Callable, priority=None) -> bool:
        entries = self._callbacks.get(name, [])
        for entry in entries:
            if entry[2] == callback and (priority is None or entry[0] == priority):
                entries.remove(entry)
                return True
        return False

    def _iter(self, name: str):
        # Copy so callbacks may unregister themselves while running
        return [entry[2] for entry in self._callbacks.get(name, [])]

    def has(self, name: str) -> bool:
        return bool(self._callbacks.get(name))


class FilterRegistry(_Registry):
    """Callbacks that may replace a value, e.g. a tracking url."""

    def add(self, name: str, callback: Callable, priority: int = 10):
        self._add(name, callback, priority)

    def remove(self, name: str, callback: Callable, priority=None) -> bool:
        return self._remove(name, callback, priority)

    def apply(self, name: str, value: Any, *args) -> Any:
        for callback in self._iter(name):
            value = callback(value, *args)
        return value


class EventDispatcher(_Registry):
    """Callbacks notified about something that happened."""

    def connect(self, name: str, callback: Callable, priority: int = 10):
        self._add(name, callback, priority)

    def disconnect(self, name: str, callback: Callable, priority=None) -> bool:
        return self._remove(name, callback, priority)

    def emit(self, name: str, *args):
        callbacks = self._iter(name)
        if callbacks:
            _logger.debug("Event %s -> %d listener(s)", name, len(callbacks))
        for callback in callbacks:
            callback(*args)
