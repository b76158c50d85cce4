from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import AuthError
from ..models import LoginResponse, SessionUser
from .base import BaseClient


@dataclass
class AuthClient(BaseClient):
    module: str = "auth"

    def csrf_token(self) -> str | None:
        """Prime the session cookie and CSRF token before a login or logout."""
        self._request("GET", "/auth/csrf", operation="csrf")
        return self.http.csrf_token

    def login(self, username: str, password: str) -> LoginResponse:
        self.csrf_token()
        data = self._request(
            "POST",
            "/auth/login",
            json_body={"username": username, "password": password},
            operation="login",
        )
        result = self._parse(LoginResponse, data, "login")
        if not result.success:
            last = self.http.last_operation
            raise AuthError(
                code="LOGIN_FAILED",
                message=result.message or "Login failed",
                details=None,
                trace_id=last.trace_id if last else None,
                status_code=401,
                raw_payload=data,
            )
        return result

    def logout(self) -> None:
        self._request("POST", "/auth/logout", operation="logout")

    def current_user(self) -> SessionUser:
        data = self._request("GET", "/auth/user", operation="me")
        if not data:
            return SessionUser(is_authenticated=False)
        return self._parse(SessionUser, data, "current user")
