from . import test_shipment_provider
from . import test_shipment_validation
