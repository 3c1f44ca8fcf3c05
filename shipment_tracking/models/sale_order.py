import logging
from collections import Counter

from odoo import api, exceptions, fields, models

from shipment_core.exceptions import InvalidItemError
from shipment_core.orders import Order
from shipment_core.packing import OrderItem, Packer

from ..services import shipment_service
from ..services.shipment_service import CTX_ORDER_SAVE, CTX_SKIP_VALIDATION

_logger = logging.getLogger(__name__)


class SaleOrder(models.Model):
    _inherit = "sale.order"

    shipment_ids = fields.One2many("shipment.shipment", "order_id", string="Shipments")
    shipment_count = fields.Integer(compute="_compute_shipment_count")
    date_shipped = fields.Datetime(readonly=True, copy=False, help="Set once every shippable unit has shipped")

    @api.depends("shipment_ids")
    def _compute_shipment_count(self):
        for order in self:
            order.shipment_count = len(order.shipment_ids)

    @api.model_create_multi
    def create(self, vals_list):
        orders = super().create(vals_list)
        if not self.env.context.get(CTX_SKIP_VALIDATION):
            validator = shipment_service.build_validator(self.env)
            request = shipment_service.request_context(self.env)
            for order in orders:
                validator.new_order(order.id, request)
                validator.after_order_save(Order(id=order.id), request)
        return orders

    def write(self, vals):
        if self.env.context.get(CTX_SKIP_VALIDATION):
            return super().write(vals)

        validator = shipment_service.build_validator(self.env)
        request = shipment_service.request_context(self.env)
        changes = {("date_modified" if key == "write_date" else key): value for key, value in vals.items()}
        for order in self:
            validator.before_order_save(Order(id=order.id, status=order.state), changes, request)

        # Line writes triggered by this save are covered by the order validation
        res = super(SaleOrder, self.with_context(**{CTX_ORDER_SAVE: True})).write(vals)

        for order in self:
            validator.order_updated(order.id, request)
            if vals.get("state") == "cancel":
                validator.order_status_changed(order.id, "cancelled")
        return res

    def web_save(self, *args, **kwargs):
        # Saves from the order form view, see the edit-lock check in before_order_save
        screen = {shipment_service.CTX_SCREEN: shipment_service.ORDER_FORM_SCREEN}
        return super(SaleOrder, self.with_context(**screen)).web_save(*args, **kwargs)

    def unlink(self):
        validator = shipment_service.build_validator(self.env)
        for order in self:
            validator.order_deleted(order.id)
        return super().unlink()

    def action_view_shipments(self):
        self.ensure_one()
        return {
            "type": "ir.actions.act_window",
            "name": "Shipments",
            "res_model": "shipment.shipment",
            "view_mode": "tree,form",
            "domain": [("order_id", "=", self.id)],
            "context": {"default_order_id": self.id},
        }

    # Packing

    def _get_quantity_left_for_shipping(self, line) -> int:
        shippable = shipment_service.unit_count(line, line.product_uom_qty) - shipment_service.unit_count(
            line, shipment_service.refunded_quantity(line)
        )
        held = sum(
            item.quantity
            for item in self.shipment_ids.filtered(lambda s: s.type == "simple").item_ids
            if item.order_line_id == line
        )
        return max(shippable - held, 0)

    def _get_packable_items(self):
        dimension_unit = shipment_service.store_dimension_unit(self.env)
        weight_unit = shipment_service.store_weight_unit(self.env)

        items = []
        for line in self.order_line.filtered(shipment_service.line_needs_shipping):
            quantity = self._get_quantity_left_for_shipping(line)
            if quantity <= 0:
                continue
            try:
                item = OrderItem(
                    {
                        "product": line.product_id._to_core_product(),
                        "line_id": line.id,
                        "quantity": quantity,
                        "total": line.price_subtotal,
                        "subtotal": line.price_subtotal,
                        "total_tax": line.price_tax,
                        "subtotal_tax": line.price_tax,
                    },
                    dimension_unit=dimension_unit,
                    weight_unit=weight_unit,
                )
            except InvalidItemError:
                _logger.warning("Order %s: line %s cannot be packed, skipping", self.id, line.id)
                continue
            items.append(item)
        return items

    def action_create_shipments(self):
        """Pack what is left to ship into the active packaging, one draft shipment per box."""
        for order in self:
            order._create_shipments()
        return True

    def _create_shipments(self):
        self.ensure_one()
        packagings = self.env["shipment.packaging"].search([("active", "=", True)])
        result = Packer(self._get_packable_items(), [p._to_core_box() for p in packagings]).pack()

        if not result.packed_boxes:
            raise exceptions.UserError(result.error_message or "Nothing left to ship")
        if result.unpacked_items:
            _logger.warning("Order %s: %s", self.id, result.error_message)

        default_provider = self.env["shipment.provider"].search(
            [("name", "=", shipment_service.IrConfigOptions(self.env).get("default_shipping_provider", ""))],
            limit=1,
        )
        shipments = self.env["shipment.shipment"]
        for packed in result.packed_boxes:
            per_line = Counter(item.order_item["line_id"] for item in packed.items)
            lines = self.env["sale.order.line"].browse(list(per_line))
            shipments |= shipments.with_context(**{CTX_SKIP_VALIDATION: True}).create(
                {
                    "order_id": self.id,
                    "packaging_id": packed.box.box_id,
                    "provider_id": default_provider.id or False,
                    "item_ids": [
                        (0, 0, {"order_line_id": line.id, "product_id": line.product_id.id, "quantity": per_line[line.id]})
                        for line in lines
                    ],
                }
            )
        _logger.info("Order %s: created %d shipment(s)", self.id, len(shipments))
        return shipments
