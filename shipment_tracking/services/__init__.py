from . import shipment_service
