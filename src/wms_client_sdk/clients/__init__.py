from .auth import AuthClient
from .orders_client import OrdersClient
from .products_client import ProductsClient
from .reports_client import ReportsClient
from .warehouses_client import WarehousesClient

__all__ = [
    "AuthClient",
    "OrdersClient",
    "ProductsClient",
    "ReportsClient",
    "WarehousesClient",
]
