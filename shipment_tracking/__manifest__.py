{
    "name": "Shipment Tracking",
    "summary": "Shipments, shipping providers and packaging for sales orders",
    "version": "0.1.0",
    "license": "LGPL-3",
    "author": "Your Company",
    "website": "",
    "depends": ["sale", "account"],
    "external_dependencies": {"python": ["shipment_core"]},
    "application": False,
    "data": [
        "security/ir.model.access.csv",
    ],
    "description": """
    Tracks parcels shipped for sales orders.
    Shipping providers build tracking links, packaging is filled by a box packer and
    draft shipments are kept in line with their order when lines, refunds or the order change.
    """,
}
