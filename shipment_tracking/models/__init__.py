from . import shipment_provider
from . import shipment_packaging
from . import shipment
from . import product
from . import sale_order
from . import sale_order_line
from . import account_move
from . import res_config_settings
