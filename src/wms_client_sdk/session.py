from __future__ import annotations

from dataclasses import dataclass

from .clients.auth import AuthClient
from .clients.orders_client import OrdersClient
from .clients.products_client import ProductsClient
from .clients.reports_client import ReportsClient
from .clients.warehouses_client import WarehousesClient
from .config import ClientConfig
from .http_client import HttpClient
from .models import SessionUser
from .tracing import TraceContext


@dataclass
class ApiSession:
    """One authenticated conversation with the backend.

    Cookies set by ``/auth/login`` live on the shared ``HttpClient``'s
    ``requests.Session``, so every client handed out here reuses them. The
    current user is only updated by ``establish``, ``refresh_user`` and
    ``clear``; nothing else writes it.
    """

    config: ClientConfig
    trace: TraceContext | None = None
    http: HttpClient | None = None
    user: SessionUser | None = None

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()
        self.http = self.http or HttpClient(config=self.config, trace=self.trace)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.user.is_authenticated)

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self.http)

    def warehouses_client(self) -> WarehousesClient:
        return WarehousesClient(http=self.http)

    def products_client(self) -> ProductsClient:
        return ProductsClient(http=self.http)

    def orders_client(self) -> OrdersClient:
        return OrdersClient(http=self.http)

    def reports_client(self) -> ReportsClient:
        return ReportsClient(http=self.http)

    def establish(self, user: SessionUser) -> None:
        self.user = user

    def refresh_user(self) -> SessionUser:
        self.user = self.auth_client().current_user()
        return self.user

    def clear(self) -> None:
        self.user = None
        if self.http is not None:
            self.http.csrf_token = None
            if self.http.session is not None:
                self.http.session.cookies.clear()
