from __future__ import annotations

import logging

from wms_client_sdk import ApiSession, SessionUser

from .errors import ServiceError, normalize_error

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def has_active_session(self) -> bool:
        return self.session.is_authenticated

    def login(self, username: str, password: str) -> SessionUser:
        logger.info("login_attempt", extra={"username": username})
        try:
            self.session.auth_client().login(username, password)
            user = self.session.refresh_user()
        except Exception as exc:
            logger.exception("login_failure", extra={"username": username})
            raise normalize_error(exc, "Login failed") from exc
        if not user.is_authenticated:
            logger.warning("login_session_missing", extra={"username": username})
            raise ServiceError(message="Login succeeded but no session was established", details="SESSION_MISSING")
        logger.info("login_success", extra={"username": username})
        return user

    def refresh(self) -> SessionUser:
        try:
            return self.session.refresh_user()
        except Exception as exc:
            raise normalize_error(exc, "Could not load the current user") from exc

    def logout(self) -> None:
        logger.info("logout")
        try:
            self.session.auth_client().logout()
        except Exception as exc:
            raise normalize_error(exc, "Logout failed") from exc
        finally:
            self.session.clear()
