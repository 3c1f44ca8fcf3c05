"""Glue between the Odoo ORM and shipment_core."""

import logging
from datetime import datetime, timezone

from shipment_core import config
from shipment_core.exceptions import ProviderNotFoundError
from shipment_core.hooks import EventDispatcher
from shipment_core.options import Options
from shipment_core.orders import Order, OrderLine, Shipment, ShipmentItem, ShipmentOrder
from shipment_core.providers import ProviderRegistry
from shipment_core.store import OrderStore, ProviderStore, ShipmentStore
from shipment_core.validation import RequestContext, ShipmentValidator

_logger = logging.getLogger(__name__)

PARAM_PREFIX = "shipment_tracking."
ORDER_FORM_SCREEN = "sale.order.form"
PROVIDER_FIELDS = [
    "activated",
    "title",
    "name",
    "description",
    "tracking_url_placeholder",
    "tracking_desc_placeholder",
]

# Context keys
CTX_SKIP_VALIDATION = "shipment_skip_validation"
CTX_ORDER_SAVE = "shipment_order_save"
CTX_SCREEN = "shipment_screen"


class IrConfigOptions(Options):
    """``ir.config_parameter`` backed options, prefixed with the module name."""

    def __init__(self, env):
        self.env = env

    def get(self, key, default=None):
        value = self.env["ir.config_parameter"].sudo().get_param(PARAM_PREFIX + key)
        return default if value in (None, False) else value

    def set(self, key, value):
        self.env["ir.config_parameter"].sudo().set_param(PARAM_PREFIX + key, value or False)


class OdooProviderStore(ProviderStore):
    def __init__(self, env):
        self.model = env["shipment.provider"].sudo()

    def read(self, provider_id):
        record = self.model.browse(provider_id).exists()
        if not record:
            raise ProviderNotFoundError(f"Shipping provider {provider_id} not found")
        row = record.read(PROVIDER_FIELDS)[0]
        row.pop("id", None)
        return {key: (value or "") if key != "activated" else value for key, value in row.items()}

    def find_by_name(self, name):
        record = self.model.with_context(active_test=False).search([("name", "=", name)], limit=1)
        return record.id or None

    def all(self):
        records = self.model.with_context(active_test=False).search([])
        return [(record.id, {"name": record.name}) for record in records]

    def create(self, data):
        return self.model.create(data).id

    def update(self, provider_id, changes):
        if changes:
            self.model.browse(provider_id).write(changes)

    def delete(self, provider_id):
        self.model.browse(provider_id).unlink()


class OdooShipmentStore(ShipmentStore):
    def __init__(self, env):
        self.env = env

    def save_shipment(self, shipment):
        record = self.env["shipment.shipment"].browse(shipment.id).exists()
        if not record:
            return
        quantities = {item.id: item.quantity for item in shipment.items}
        stale = record.item_ids.filtered(lambda i: i.id not in quantities)
        if stale:
            stale.unlink()
        for item in record.item_ids:
            if item.quantity != quantities[item.id]:
                item.quantity = quantities[item.id]

    def delete_shipment(self, shipment):
        record = self.env["shipment.shipment"].browse(shipment.id).exists()
        if record:
            _logger.info("Removing shipment %s of order %s", record.name, shipment.order_id)
            record.unlink()


class OdooOrderStore(OrderStore):
    def __init__(self, env):
        self.env = env

    def _order(self, order_id):
        return self.env["sale.order"].browse(order_id).exists().with_context(**{CTX_SKIP_VALIDATION: True})

    def update_meta(self, order_id, key, value):
        if key == "date_shipped":
            value = datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None)  # Odoo expects naive UTC
        self._order(order_id).write({key: value})

    def delete_meta(self, order_id, key):
        order = self._order(order_id)
        if order and order[key]:
            order.write({key: False})


def unit_count(line, quantity) -> int:
    """Shipments count whole units. Fractional quantities are rounded down and logged."""
    units = int(quantity)
    if quantity != units:
        _logger.warning(
            "Order %s, line %s: fractional quantity %s counted as %d unit(s)",
            line.order_id.name, line.id, quantity, units,
        )
    return units


def refunded_quantity(line) -> float:
    refund_lines = line.invoice_lines.filtered(
        lambda l: l.move_id.move_type == "out_refund" and l.move_id.state != "cancel"
    )
    return sum(refund_lines.mapped("quantity"))


def line_needs_shipping(line) -> bool:
    return bool(line.product_id) and not line.display_type and line.product_id.type != "service"


def to_core_order(order) -> Order:
    lines = {}
    for line in order.order_line:
        if line.display_type:
            continue
        lines[line.id] = OrderLine(
            id=line.id,
            order_id=order.id,
            quantity=unit_count(line, line.product_uom_qty),
            refunded_quantity=unit_count(line, refunded_quantity(line)),
            needs_shipping=line_needs_shipping(line),
            product=line.product_id.id,
        )
    return Order(id=order.id, number=order.name, status=order.state, items=lines)


def to_core_shipment(shipment) -> Shipment:
    return Shipment(
        id=shipment.id,
        order_id=shipment.order_id.id,
        status=shipment.state,
        type=shipment.type,
        tracking_id=shipment.tracking_id or "",
        shipment_number=shipment.name or str(shipment.id),
        order_number=shipment.order_id.name or "",
        has_label=shipment.has_label,
        items=[
            ShipmentItem(id=item.id, order_item_id=item.order_line_id.id, quantity=int(item.quantity))
            for item in shipment.item_ids
        ],
    )


def store_weight_unit(env) -> str:
    return env["ir.config_parameter"].sudo().get_param(PARAM_PREFIX + "weight_unit") or config.WEIGHT_UNIT


def store_dimension_unit(env) -> str:
    return env["ir.config_parameter"].sudo().get_param(PARAM_PREFIX + "dimension_unit") or config.DIMENSION_UNIT


def get_shipment_order(env, order_id):
    order = env["sale.order"].sudo().browse(order_id).exists()
    if not order or not order.shipment_ids:
        return None
    shipments = [to_core_shipment(s) for s in order.shipment_ids]
    return ShipmentOrder(to_core_order(order), shipments, OdooShipmentStore(env.sudo()))


def request_context(env) -> RequestContext:
    ctx = env.context
    return RequestContext(
        screen=ctx.get(CTX_SCREEN, ""),
        saving_post=bool(ctx.get(CTX_ORDER_SAVE)),
        edit_screens=(ORDER_FORM_SCREEN,),
    )


def build_events(env):
    """Dispatcher wired with the shipment validator for this environment."""
    events = EventDispatcher()
    build_validator(env, events)
    return events


def build_validator(env, events=None) -> ShipmentValidator:
    events = events if events is not None else EventDispatcher()
    validator = ShipmentValidator(
        lambda order_id: get_shipment_order(env, order_id),
        IrConfigOptions(env),
        order_store=OdooOrderStore(env.sudo()),
        events=events,
    )
    validator.register(events)
    return validator


def build_registry(env) -> ProviderRegistry:
    model = env["shipment.provider"]
    registry = ProviderRegistry(
        OdooProviderStore(env),
        IrConfigOptions(env),
        filters=model._shipment_filters(),
        events=build_events(env),
    )
    for integration in model._shipment_provider_integrations():
        registry.register(integration)
    return registry
