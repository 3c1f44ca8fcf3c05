from odoo import fields, models

from shipment_core.packing import Product


class ProductTemplate(models.Model):
    _inherit = "product.template"

    shipping_length = fields.Float(help="Packed length, in the store dimension unit")
    shipping_width = fields.Float(help="Packed width, in the store dimension unit")
    shipping_height = fields.Float(help="Packed height, in the store dimension unit")


class ProductProduct(models.Model):
    _inherit = "product.product"

    def _to_core_product(self) -> Product:
        self.ensure_one()
        return Product(
            id=self.id,
            sku=self.default_code or "",
            width=self.shipping_width or "",
            length=self.shipping_length or "",
            height=self.shipping_height or "",
            weight=self.weight or "",
        )
