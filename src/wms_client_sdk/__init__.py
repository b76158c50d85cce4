from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ForbiddenError,
    InvalidResponseError,
    NotFoundError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import LoginResponse, SessionUser, SortOrder, StatusMessage
from .models_orders import (
    TRANSFER_ORDER_MARKER,
    Order,
    OrderCreateRequest,
    OrderItem,
    OrderItemInput,
    OrderReturn,
    OrderReturnRequest,
    OrderStatus,
)
from .models_products import (
    Product,
    ProductCreateRequest,
    ProductImage,
    ProductStockSummary,
    ProductUpdateRequest,
    StockOperationRequest,
    StockOperationResult,
    StockTransferRequest,
    TransferResult,
    WarehouseStock,
)
from .models_reports import ReportDocument, ReportKind
from .models_warehouses import Warehouse, WarehouseCreateRequest, WarehouseUpdateRequest
from .order_state import can_transition, is_terminal, next_statuses, order_action_availability
from .session import ApiSession
from .tracing import TraceContext
from .ui_errors import UserFacingError, to_user_facing_error
from .validation import (
    ClientValidationError,
    ValidationIssue,
    validate_cancel_reason,
    validate_order_create,
    validate_transfer_request,
)

__version__ = "0.3.0"

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthError",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ForbiddenError",
    "HttpClient",
    "InvalidResponseError",
    "LoginResponse",
    "NotFoundError",
    "Order",
    "OrderCreateRequest",
    "OrderItem",
    "OrderItemInput",
    "OrderReturn",
    "OrderReturnRequest",
    "OrderStatus",
    "Product",
    "ProductCreateRequest",
    "ProductImage",
    "ProductStockSummary",
    "ProductUpdateRequest",
    "ReportDocument",
    "ReportKind",
    "ServerError",
    "SessionUser",
    "SortOrder",
    "StatusMessage",
    "StockOperationRequest",
    "StockOperationResult",
    "StockTransferRequest",
    "TRANSFER_ORDER_MARKER",
    "TraceContext",
    "TransferResult",
    "TransportError",
    "UserFacingError",
    "ValidationError",
    "ValidationIssue",
    "Warehouse",
    "WarehouseCreateRequest",
    "WarehouseStock",
    "WarehouseUpdateRequest",
    "can_transition",
    "is_terminal",
    "load_config",
    "next_statuses",
    "order_action_availability",
    "to_user_facing_error",
    "validate_cancel_reason",
    "validate_order_create",
    "validate_transfer_request",
]
