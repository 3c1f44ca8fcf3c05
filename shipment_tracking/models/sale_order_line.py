from odoo import api, models

from shipment_core.orders import OrderLine

from ..services import shipment_service
from ..services.shipment_service import CTX_SKIP_VALIDATION


class SaleOrderLine(models.Model):
    _inherit = "sale.order.line"

    @api.model_create_multi
    def create(self, vals_list):
        lines = super().create(vals_list)
        if not self.env.context.get(CTX_SKIP_VALIDATION):
            validator = shipment_service.build_validator(self.env)
            for order_id in set(lines.mapped("order_id").ids):
                validator.order_item_created(order_id)
        return lines

    def write(self, vals):
        res = super().write(vals)
        if not self.env.context.get(CTX_SKIP_VALIDATION):
            validator = shipment_service.build_validator(self.env)
            request = shipment_service.request_context(self.env)
            for line in self:
                quantity = shipment_service.unit_count(line, line.product_uom_qty)
                validator.order_item_updated(OrderLine(id=line.id, order_id=line.order_id.id, quantity=quantity), request)
        return res

    def unlink(self):
        validator = shipment_service.build_validator(self.env)
        for line in self:
            validator.order_item_deleted(line.id, line.order_id.id)
        return super().unlink()
