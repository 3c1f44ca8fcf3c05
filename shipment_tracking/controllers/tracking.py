import hmac
import logging

from odoo import http
from odoo.http import request

_logger = logging.getLogger(__name__)


class ShipmentTrackingController(http.Controller):
    """Public tracking links sent to customers. Redirects to the provider's tracking page."""

    @http.route(
        "/shipments/track/<int:shipment_id>",
        type="http",
        auth="public",
        methods=["GET"],
        csrf=False,
    )
    def track(self, shipment_id, access_token=None, **kwargs):
        _ = kwargs  # unused
        shipment = request.env["shipment.shipment"].sudo().browse(shipment_id).exists()
        if not shipment or not self._validate_token(shipment.access_token, access_token):
            _logger.warning("Rejected tracking request for shipment %s", shipment_id)
            return request.not_found()

        url = shipment.tracking_url
        if not url:
            return request.not_found()
        return request.redirect(url, local=False)

    @staticmethod
    def _validate_token(expected: str, token: str) -> bool:
        if not expected or not token:
            return False
        return hmac.compare_digest(expected, token)
