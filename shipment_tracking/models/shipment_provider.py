import logging

from odoo import api, exceptions, fields, models

from shipment_core.hooks import FilterRegistry
from shipment_core.providers import ShippingProvider

from ..services import shipment_service

_logger = logging.getLogger(__name__)


class ShipmentProvider(models.Model):
    """Shipping provider used to build tracking links for shipments."""

    _name = "shipment.provider"
    _description = "Shipping Provider"
    _order = "title, id"
    _rec_name = "title"

    name = fields.Char(required=True, index=True, help="Unique slug, e.g. dhl")
    title = fields.Char(required=True)
    description = fields.Text()
    activated = fields.Boolean(default=True)
    tracking_url_placeholder = fields.Char(
        help="Tracking URL template. Placeholders: {tracking_id}, {order_number}, {shipment_number}, {shipping_provider}"
    )
    tracking_desc_placeholder = fields.Text(help="Tracking description template, same placeholders as the URL.")
    integration = fields.Char(
        readonly=True,
        help="Technical name of the integration that registered this provider. Integrations are read-only.",
    )
    is_manual_integration = fields.Boolean(compute="_compute_is_manual_integration")
    is_default = fields.Boolean(compute="_compute_is_default")

    _sql_constraints = [
        ("name_uniq", "unique(name)", "The provider slug must be unique."),
    ]

    @api.depends("integration")
    def _compute_is_manual_integration(self):
        for rec in self:
            rec.is_manual_integration = not rec.integration

    def _compute_is_default(self):
        default = shipment_service.IrConfigOptions(self.env).get("default_shipping_provider", "")
        for rec in self:
            rec.is_default = bool(default) and rec.name == default

    def write(self, vals):
        """Integrations are defined in code, edits through forms are dropped."""
        manual = self.filtered("is_manual_integration")
        rejected = self - manual
        if rejected:
            _logger.warning("Ignoring write on integration provider(s) %s", rejected.mapped("name"))
        if not manual:
            return False
        deactivated = manual.filtered("activated") if "activated" in vals and not vals["activated"] else manual.browse()
        res = super(ShipmentProvider, manual).write(vals)
        if deactivated:
            validator = shipment_service.build_validator(self.env)
            for rec in deactivated:
                validator.shipping_provider_deactivated(rec._get_core_provider())
        return res

    def unlink(self):
        if any(not rec.is_manual_integration for rec in self):
            raise exceptions.UserError("Providers registered by an integration cannot be deleted.")
        default = shipment_service.IrConfigOptions(self.env).get("default_shipping_provider", "")
        if default and default in self.mapped("name"):
            shipment_service.IrConfigOptions(self.env).set("default_shipping_provider", "")
        return super().unlink()

    # Extension points

    @api.model
    def _shipment_filters(self) -> FilterRegistry:
        """Override to add tracking url, description, placeholder or settings filters."""
        return FilterRegistry()

    @api.model
    def _shipment_provider_integrations(self):
        """Override to register ShippingProviderIntegration classes."""
        return []

    # Core bridge

    def _get_core_provider(self) -> ShippingProvider:
        self.ensure_one()
        registry = shipment_service.build_registry(self.env)
        return registry.get(self.name) or registry.get(self.id)

    def action_activate(self):
        for rec in self:
            rec._get_core_provider().activate()
        return True

    def action_deactivate(self):
        for rec in self:
            if rec._get_core_provider().deactivate() is False:
                _logger.warning("Provider %s could not be deactivated", rec.name)
        return True

    def action_set_default(self):
        self.ensure_one()
        if not self.activated:
            raise exceptions.UserError("Only active providers can be the default.")
        shipment_service.build_registry(self.env).set_default(self.name)
        return True

    def get_tracking_url(self, shipment) -> str:
        return self._get_core_provider().get_tracking_url(shipment_service.to_core_shipment(shipment))

    def get_tracking_desc(self, shipment) -> str:
        return self._get_core_provider().get_tracking_desc(shipment_service.to_core_shipment(shipment))

    def get_settings(self):
        return self._get_core_provider().get_settings()
