from odoo import api, fields, models

UNITS_OF_LENGTH = [("mm", "mm"), ("cm", "cm"), ("m", "m"), ("in", "in"), ("yd", "yd")]
UNITS_OF_WEIGHT = [("g", "g"), ("kg", "kg"), ("lbs", "lbs"), ("oz", "oz")]


class ResConfigSettings(models.TransientModel):
    _inherit = 'res.config.settings'

    shipment_dimension_unit = fields.Selection(UNITS_OF_LENGTH, config_parameter='shipment_tracking.dimension_unit', string="Dimension Unit", default="cm")
    shipment_weight_unit = fields.Selection(UNITS_OF_WEIGHT, config_parameter='shipment_tracking.weight_unit', string="Weight Unit", default="kg")
    shipment_default_provider_id = fields.Many2one('shipment.provider', string="Default Shipping Provider", domain=[('activated', '=', True)])

    @api.model
    def get_values(self):
        res = super().get_values()
        name = self.env['ir.config_parameter'].sudo().get_param('shipment_tracking.default_shipping_provider')
        provider = self.env['shipment.provider'].search([('name', '=', name)], limit=1) if name else False
        res['shipment_default_provider_id'] = provider.id if provider else False
        return res

    def set_values(self):
        super().set_values()
        self.env['ir.config_parameter'].sudo().set_param(
            'shipment_tracking.default_shipping_provider', self.shipment_default_provider_id.name or ''
        )
