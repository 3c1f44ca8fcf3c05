import logging
import uuid

from odoo import api, exceptions, fields, models

from shipment_core import config
from shipment_core.units import get_weight

from ..services import shipment_service

_logger = logging.getLogger(__name__)

SHIPMENT_STATES = [
    ("draft", "Draft"),
    ("processing", "Processing"),
    ("ready-for-shipping", "Ready for shipping"),
    ("shipped", "Shipped"),
    ("delivered", "Delivered"),
    ("returned", "Returned"),
]


class Shipment(models.Model):
    """A parcel shipped for all or part of a sales order."""

    _name = "shipment.shipment"
    _description = "Shipment"
    _order = "id desc"

    name = fields.Char(string="Shipment Number", compute="_compute_name")
    # Finalized shipments outlive their order
    order_id = fields.Many2one("sale.order", string="Order", ondelete="set null", index=True)
    type = fields.Selection([("simple", "Shipment"), ("return", "Return")], default="simple", required=True)
    state = fields.Selection(SHIPMENT_STATES, default="draft", required=True, string="Status")
    provider_id = fields.Many2one("shipment.provider", string="Shipping Provider")
    packaging_id = fields.Many2one("shipment.packaging", string="Packaging")
    tracking_id = fields.Char(string="Tracking Number")
    has_label = fields.Boolean(help="A label has been bought, the shipment is final.")
    item_ids = fields.One2many("shipment.item", "shipment_id", string="Items")
    weight = fields.Float(compute="_compute_weight", help="Content plus packaging (g)")
    is_editable = fields.Boolean(compute="_compute_is_editable")
    tracking_url = fields.Char(compute="_compute_tracking")
    tracking_desc = fields.Text(compute="_compute_tracking")
    access_token = fields.Char(copy=False, default=lambda self: uuid.uuid4().hex)

    def _compute_name(self):
        for rec in self:
            rec.name = str(rec.id) if isinstance(rec.id, int) else False

    @api.depends("state", "has_label")
    def _compute_is_editable(self):
        for rec in self:
            rec.is_editable = rec.state in config.EDITABLE_SHIPMENT_STATES and not rec.has_label

    @api.depends("item_ids.quantity", "item_ids.product_id.weight", "packaging_id.box_weight")
    def _compute_weight(self):
        # product weight is in the store weight unit, the same one packing reads
        weight_unit = shipment_service.store_weight_unit(self.env)
        for rec in self:
            content = sum(get_weight(i.product_id.weight or 0.0, "g", weight_unit) * i.quantity for i in rec.item_ids)
            rec.weight = content + (rec.packaging_id.box_weight or 0.0)

    @api.depends("provider_id", "tracking_id", "order_id.name")
    def _compute_tracking(self):
        for rec in self:
            if rec.provider_id and isinstance(rec.id, int):
                rec.tracking_url = rec.provider_id.get_tracking_url(rec)
                rec.tracking_desc = rec.provider_id.get_tracking_desc(rec)
            else:
                rec.tracking_url = False
                rec.tracking_desc = False

    def write(self, vals):
        changed = self.filtered(lambda s: "state" in vals and s.state != vals["state"])
        res = super().write(vals)
        if changed:
            validator = shipment_service.build_validator(self.env)
            for rec in changed:
                validator.shipment_status_changing(shipment_service.to_core_shipment(rec), rec.state)
        return res

    def unlink(self):
        if any(rec.has_label for rec in self):
            raise exceptions.UserError("Shipments with a label cannot be deleted.")
        return super().unlink()

    def action_mark_shipped(self):
        self.write({"state": "shipped"})

    def action_mark_delivered(self):
        self.write({"state": "delivered"})


class ShipmentItem(models.Model):
    _name = "shipment.item"
    _description = "Shipment Item"

    shipment_id = fields.Many2one("shipment.shipment", required=True, ondelete="cascade", index=True)
    order_line_id = fields.Many2one("sale.order.line", ondelete="set null", index=True)
    product_id = fields.Many2one("product.product", required=True)
    quantity = fields.Integer(default=1)

    @api.constrains("quantity")
    def _check_quantity(self):
        for rec in self:
            if rec.quantity < 0:
                raise exceptions.ValidationError("Item quantity cannot be negative.")
