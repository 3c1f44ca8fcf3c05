"""Defaults shared by the shipment core and its hosts."""

DIMENSION_UNIT = "cm"
WEIGHT_UNIT = "kg"

DEFAULT_PROVIDER_OPTION = "default_shipping_provider"

# Admin screens on which an order is edited in place
ORDER_EDIT_SCREENS = ("woocommerce_page_wc-orders",)
ADMIN_ORDER_ACTION_MARKER = "woocommerce_"

CANCELLED_ORDER_STATUSES = ("cancelled", "failed", "refunded")

EDITABLE_SHIPMENT_STATUSES = ("draft", "processing", "ready-for-shipping")
SHIPPED_SHIPMENT_STATUSES = ("shipped", "delivered")

DEFAULT_TRACKING_DESC = (
    "Your shipment is being processed by {shipping_provider}. If you want to track the shipment, "
    "please use the following tracking number: {tracking_id}. Depending on the chosen shipping method "
    "it is possible that the tracking data does not reflect the current status when receiving this email."
)
TRACKING_URL_EXAMPLE = "https://www.dhl.de/privatkunden/pakete-empfangen/verfolgen.html?idc={tracking_id}"
