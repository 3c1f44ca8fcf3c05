"""Shipping providers and their tracking templates."""

import enum
import logging
from typing import Any, Dict, List, Optional, Type
from urllib.parse import urlencode

from . import config
from .exceptions import ProviderNotFoundError
from .hooks import EventDispatcher, FilterRegistry
from .options import Options
from .store import ProviderStore

_logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("yes", "true", "1", "on")


def string_to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


class ProviderKind(enum.Enum):
    MANUAL = "manual"
    INTEGRATION = "integration"


class ShippingProvider:
    """A shipping provider configured through the admin UI.

    Pass an id, a slug or another provider to load an existing record. If
    the record is gone the instance falls back to an unsaved, empty one.
    Code-defined integrations subclass this with ``kind = INTEGRATION``; those
    are read-only and reject every write.
    """

    kind = ProviderKind.MANUAL

    defaults: Dict[str, Any] = {
        "activated": True,
        "title": "",
        "name": "",
        "description": "",
        "tracking_url_placeholder": "",
        "tracking_desc_placeholder": "",
    }

    def __init__(
        self,
        data=0,
        store: Optional[ProviderStore] = None,
        filters: Optional[FilterRegistry] = None,
        events: Optional[EventDispatcher] = None,
    ):
        self.store = store
        self.filters = filters if filters is not None else FilterRegistry()
        self.events = events if events is not None else EventDispatcher()
        self.id = 0
        self.object_read = False
        self._data: Dict[str, Any] = dict(self.defaults)
        self._changes: Dict[str, Any] = {}

        if isinstance(data, ShippingProvider):
            self.id = abs(int(data.id))
        elif isinstance(data, int) or (isinstance(data, str) and data.isdigit()):
            self.id = int(data)
        elif isinstance(data, str) and data and store is not None:
            self.id = store.find_by_name(data) or 0
            if not self.id:
                _logger.warning("Shipping provider %s not found", data)

        if self.id:
            self.read()
        self.object_read = True

    def read(self):
        try:
            if self.store is None:
                raise ProviderNotFoundError("No provider store configured")
            row = self.store.read(self.id)
        except ProviderNotFoundError:
            _logger.warning("Shipping provider %s not found, resetting", self.id)
            self.id = 0
            self._data = dict(self.defaults)
            self._changes = {}
            return
        # Loading is not a write, integrations get their stored state too.
        for key, value in row.items():
            if key in self._data:
                self._data[key] = string_to_bool(value) if key == "activated" else value

    def is_manual_integration(self) -> bool:
        return self.kind is ProviderKind.MANUAL

    def supports_labels(self, label_type: str) -> bool:
        return False

    def get_changes(self) -> Dict[str, Any]:
        return dict(self._changes)

    def get_data(self) -> Dict[str, Any]:
        data = dict(self._data)
        data.update(self._changes)
        return data

    # Props

    def get_prop(self, prop: str, context: str = "view"):
        value = self._changes.get(prop, self._data.get(prop))
        if context == "view":
            value = self.filters.apply(self.get_hook_prefix() + prop, value, self)
        return value

    def set_prop(self, prop: str, value) -> bool:
        if not self.is_manual_integration():
            _logger.debug("Ignoring %s change on integration %s", prop, self.get_name("edit"))
            return False

        if self.object_read:
            if value != self._data.get(prop):
                self._changes[prop] = value
            else:
                self._changes.pop(prop, None)
        else:
            self._data[prop] = value
        return True

    def get_hook_name(self) -> str:
        return self._data.get("name") or ""

    def get_hook_prefix(self) -> str:
        name = self.get_hook_name()
        suffix = f"{name}_" if name else ""
        return f"shipping_provider_{suffix}get_"

    def is_activated(self) -> bool:
        return self.get_activated() is True

    def get_activated(self, context: str = "view"):
        return self.get_prop("activated", context)

    def get_title(self, context: str = "view") -> str:
        return self.get_prop("title", context)

    def get_name(self, context: str = "view") -> str:
        return self.get_prop("name", context)

    def get_description(self, context: str = "view") -> str:
        desc = self.get_prop("description", context)
        if context == "view" and not desc:
            return "-"
        return desc

    def get_tracking_url_placeholder(self, context: str = "view") -> str:
        return self.get_prop("tracking_url_placeholder", context)

    def get_tracking_desc_placeholder(self, context: str = "view") -> str:
        return self.get_prop("tracking_desc_placeholder", context)

    def set_activated(self, is_activated) -> bool:
        return self.set_prop("activated", string_to_bool(is_activated))

    def set_title(self, title: str) -> bool:
        return self.set_prop("title", title)

    def set_name(self, name: str) -> bool:
        return self.set_prop("name", name)

    def set_description(self, description: str) -> bool:
        return self.set_prop("description", description)

    def set_tracking_url_placeholder(self, placeholder: str) -> bool:
        return self.set_prop("tracking_url_placeholder", placeholder)

    def set_tracking_desc_placeholder(self, placeholder: str) -> bool:
        return self.set_prop("tracking_desc_placeholder", placeholder)

    def set_props(self, props: Dict[str, Any]) -> bool:
        ok = True
        for prop, value in props.items():
            setter = getattr(self, f"set_{prop}", None)
            if setter is None:
                continue
            ok = setter(value) and ok
        return ok

    def activate(self):
        self.set_activated(True)
        return self.save()

    def deactivate(self):
        self.set_activated(False)
        return self.save()

    # Persistence

    def save(self):
        """Persist pending changes. Returns the id, or False when rejected."""
        if not self.is_manual_integration():
            _logger.warning("Refusing to save shipping provider integration %s", self.get_name("edit"))
            return False
        if self.store is None:
            return False

        changes = self.get_changes()
        is_update = bool(self.id)
        if is_update:
            self.store.update(self.id, changes)
        else:
            self.id = self.store.create(self.get_data())

        self._data.update(self._changes)
        self._changes = {}
        _logger.info("Saved shipping provider %s (%s)", self.get_name("edit"), self.id)

        if is_update and "activated" in changes:
            event = "shipping_provider_activated" if changes["activated"] else "shipping_provider_deactivated"
            self.events.emit(event, self)
        return self.id

    def delete(self) -> bool:
        if not self.is_manual_integration() or not self.id or self.store is None:
            return False
        self.store.delete(self.id)
        _logger.info("Deleted shipping provider %s (%s)", self.get_name("edit"), self.id)
        self.id = 0
        return True

    # Tracking

    def get_edit_link(self, admin_url: str) -> str:
        if self.id <= 0:
            return ""
        query = urlencode({"section": "provider", "provider": self.get_name()})
        return f"{admin_url}?{query}"

    def get_tracking_placeholders(self, shipment=None) -> Dict[str, str]:
        placeholders = {
            "{shipment_number}": str(shipment.shipment_number) if shipment else "",
            "{order_number}": str(shipment.order_number) if shipment else "",
            "{tracking_id}": shipment.tracking_id if shipment else "",
            "{shipping_provider}": self.get_title(),
        }
        return self.filters.apply(self.get_hook_prefix() + "tracking_placeholders", placeholders, self, shipment)

    def _replace_placeholders(self, template: str, shipment) -> str:
        for placeholder, value in self.get_tracking_placeholders(shipment).items():
            template = template.replace(placeholder, str(value or ""))
        return template

    def get_tracking_url(self, shipment) -> str:
        tracking_url = ""
        template = self.get_tracking_url_placeholder()
        if template and shipment.tracking_id:
            tracking_url = self._replace_placeholders(template, shipment)
        return self.filters.apply(self.get_hook_prefix() + "tracking_url", tracking_url, shipment, self)

    def get_tracking_desc(self, shipment) -> str:
        tracking_desc = ""
        template = self.get_tracking_desc_placeholder()
        if template and shipment.tracking_id:
            tracking_desc = self._replace_placeholders(template, shipment)
        return self.filters.apply(self.get_hook_prefix() + "tracking_desc", tracking_desc, shipment, self)

    def get_settings(self) -> List[Dict[str, Any]]:
        placeholders = ", ".join(self.get_tracking_placeholders().keys())
        settings = [
            {"title": "", "type": "title", "id": "shipping_provider_options"},
            {
                "title": "Title",
                "desc_tip": "Choose a title for the shipping provider.",
                "id": "shipping_provider_title",
                "value": self.get_title("edit"),
                "default": "",
                "type": "text",
            },
            {
                "title": "Description",
                "desc_tip": "Choose a description for the shipping provider.",
                "id": "shipping_provider_description",
                "value": self.get_description("edit"),
                "default": "",
                "type": "textarea",
            },
            {
                "title": "Tracking URL",
                "desc": f"Placeholders available for the tracking URL: {placeholders}",
                "id": "shipping_provider_tracking_url_placeholder",
                "placeholder": config.TRACKING_URL_EXAMPLE,
                "value": self.get_tracking_url_placeholder("edit"),
                "default": "",
                "type": "text",
            },
            {
                "title": "Tracking description",
                "desc": f"Placeholders available for the tracking description: {placeholders}",
                "id": "shipping_provider_tracking_desc_placeholder",
                "placeholder": "",
                "value": self.get_tracking_desc_placeholder("edit"),
                "default": config.DEFAULT_TRACKING_DESC,
                "type": "textarea",
            },
            {"type": "sectionend", "id": "shipping_provider_options"},
        ]
        return self.filters.apply(self.get_hook_prefix() + "settings", settings, self)

    def __repr__(self):
        return f"<{type(self).__name__} {self.get_name('edit')!r} id={self.id}>"


class ShippingProviderIntegration(ShippingProvider):
    """Base for providers defined in code. Subclasses set ``defaults``."""

    kind = ProviderKind.INTEGRATION

    def __init__(self, data=0, store=None, filters=None, events=None):
        if not data:
            data = self.defaults.get("name") or 0
        super().__init__(data, store=store, filters=filters, events=events)


class ProviderRegistry:
    """Looks up providers, integrations first, manual records otherwise."""

    def __init__(
        self,
        store: ProviderStore,
        options: Options,
        filters: Optional[FilterRegistry] = None,
        events: Optional[EventDispatcher] = None,
    ):
        self.store = store
        self.options = options
        self.filters = filters if filters is not None else FilterRegistry()
        self.events = events if events is not None else EventDispatcher()
        self._integrations: Dict[str, Type[ShippingProviderIntegration]] = {}

    def register(self, integration: Type[ShippingProviderIntegration]):
        name = integration.defaults.get("name")
        if not name:
            raise ValueError("Integrations need a name")
        self._integrations[name] = integration
        return integration

    def _build(self, cls, data) -> ShippingProvider:
        return cls(data, store=self.store, filters=self.filters, events=self.events)

    def get(self, key) -> Optional[ShippingProvider]:
        if isinstance(key, ShippingProvider):
            return key
        if isinstance(key, str) and key in self._integrations:
            return self._build(self._integrations[key], key)

        provider = self._build(ShippingProvider, key)
        if not provider.id:
            return None
        name = provider.get_name("edit")
        if name in self._integrations:
            return self._build(self._integrations[name], name)
        return provider

    def get_all(self, activated_only: bool = False) -> List[ShippingProvider]:
        providers: Dict[str, ShippingProvider] = {}
        for provider_id, row in self.store.all():
            name = row.get("name") or str(provider_id)
            if name not in self._integrations:
                providers[name] = self._build(ShippingProvider, provider_id)
        for name, cls in self._integrations.items():
            providers[name] = self._build(cls, name)

        result = list(providers.values())
        if activated_only:
            result = [p for p in result if p.is_activated()]
        return result

    def get_default(self) -> str:
        return self.options.get(config.DEFAULT_PROVIDER_OPTION, "") or ""

    def set_default(self, name: str):
        self.options.set(config.DEFAULT_PROVIDER_OPTION, name or "")
