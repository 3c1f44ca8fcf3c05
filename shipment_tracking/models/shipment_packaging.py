from odoo import api, fields, models

from shipment_core.packing import Box


class ShipmentPackaging(models.Model):
    """Boxes available for packing shipments."""

    _name = "shipment.packaging"
    _description = "Shipment Packaging"
    _order = "priority, volume, id"

    name = fields.Char(required=True)
    length = fields.Integer(help="Inner length (mm)")
    width = fields.Integer(help="Inner width (mm)")
    height = fields.Integer(help="Inner height (mm)")
    max_weight = fields.Integer(help="Max load (g), 0 for no limit")
    box_weight = fields.Integer(help="Empty box weight (g)")
    volume = fields.Integer(compute="_compute_volume", store=True, help="Inner volume (mm³)")
    active = fields.Boolean(default=True)
    priority = fields.Integer(default=100, help="Lower = preferred when volumes are equal")

    @api.depends("length", "width", "height")
    def _compute_volume(self):
        for rec in self:
            rec.volume = (rec.length or 0) * (rec.width or 0) * (rec.height or 0)

    def _to_core_box(self) -> Box:
        self.ensure_one()
        return Box(
            box_id=self.id,
            name=self.name,
            width=self.width or 0,
            length=self.length or 0,
            depth=self.height or 0,
            empty_weight=self.box_weight or 0,
            max_load=self.max_weight or 0,
            priority=self.priority,
        )
