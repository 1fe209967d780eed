import pytest

from shopware_mcp_server.catalog.index import CatalogIndex
from shopware_mcp_server.catalog.models import ProductRecord


def make_product(
    sku,
    name,
    brand="VW",
    model="Golf",
    variant="",
):
    return ProductRecord(
        product_number=sku,
        product_name=name,
        vehicle_brand=brand,
        vehicle_model=model,
        vehicle_variant=variant,
    )


@pytest.fixture
def fitment_catalog():
    """
    Small catalog covering one brand with two models and several variants.
    """
    return CatalogIndex([
        make_product("A1", "JAEGER automotive Brake Pad Front", "VW", "Golf", ""),
        make_product("A2", "JAEGER automotive Brake Pad Front", "VW", "Golf", "GTI"),
        make_product("A3", "JAEGER automotive Brake Pad Front", "VW", "Polo", ""),
        make_product("A4", "JAEGER automotive Brake Pad Front", "VW", "Polo", "Cross"),
        make_product("B1", "Brake Disc", "VW", "Golf", ""),
        make_product("C1", "Anhängerkupplung", "Citroën", "C5", "Limousine"),
        make_product("C2", "Anhängerkupplung", "Citroën", "C5", "Tourer"),
        make_product("D1", "Brake Pad Front", "Audi", "A4", "Avant"),
    ])


class FakeShopware:
    """
    In-memory stand-in for the Shopware Admin API.
    """

    def __init__(self, products=None, orders=None, error=None):
        self.products = products if products is not None else {"total": 0, "data": []}
        self.orders = orders if orders is not None else {"total": 0, "data": []}
        self.error = error
        self.calls = []

    async def search_products_by_number(self, product_number):
        self.calls.append(("product", product_number))
        if self.error:
            raise self.error
        return self.products

    async def search_orders(self, criteria):
        self.calls.append(("order", criteria))
        if self.error:
            raise self.error
        return self.orders


def make_order(order_number="10001"):
    return {
        "orderNumber": order_number,
        "orderDateTime": "2024-05-01T10:00:00.000+00:00",
        "amountTotal": 114.5,
        "shippingTotal": 4.9,
        "stateMachineState": {"name": "Open"},
        "orderCustomer": {
            "firstName": "Erika",
            "lastName": "Mustermann",
            "email": "erika@example.com",
            "customerNumber": "C-1",
        },
        "salesChannel": {"name": "Storefront"},
        "transactions": [
            {"stateMachineState": {"name": "Paid"}, "paymentMethod": {"name": "Invoice"}},
        ],
        "deliveries": [
            {
                "stateMachineState": {"name": "Shipped"},
                "trackingCodes": ["DHL123"],
                "shippingMethod": {"name": "Standard", "description": "DHL parcel"},
                "shippingOrderAddress": {
                    "street": "Hauptstr. 1",
                    "zipcode": "10115",
                    "city": "Berlin",
                    "country": {"name": "Germany"},
                },
            },
        ],
        "lineItems": [
            {
                "label": "Tow Bar",
                "quantity": 1,
                "totalPrice": 99.0,
                "product": {
                    "name": "Tow Bar",
                    "productNumber": "A1",
                    "description": "<p>Detachable</p>",
                },
            },
            {
                "label": "Wiring Kit",
                "quantity": 2,
                "totalPrice": 15.5,
                "payload": {"productNumber": "W7"},
            },
        ],
    }
