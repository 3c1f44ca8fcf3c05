from odoo import models

from shipment_core.orders import Order

from ..services import shipment_service


class AccountMove(models.Model):
    """Credit notes act as refunds of the sales orders they were invoiced from."""

    _inherit = "account.move"

    def _get_refunded_sale_orders(self):
        self.ensure_one()
        if self.move_type != "out_refund":
            return self.env["sale.order"]
        return self.line_ids.sale_line_ids.order_id

    def write(self, vals):
        res = super().write(vals)
        refunds = self.filtered(lambda m: m.move_type == "out_refund")
        if refunds:
            validator = shipment_service.build_validator(self.env)
            for refund in refunds:
                for order in refund._get_refunded_sale_orders():
                    validator.refund_updated(Order(id=refund.id, is_refund=True, parent_id=order.id))
        return res

    def unlink(self):
        # Parents have to be resolved while the credit note still exists
        parents = {move.id: move._get_refunded_sale_orders().ids for move in self}
        res = super().unlink()
        validator = shipment_service.build_validator(self.env)
        for refund_id, order_ids in parents.items():
            for order_id in order_ids:
                validator.refund_deleted(refund_id, order_id)
        return res
