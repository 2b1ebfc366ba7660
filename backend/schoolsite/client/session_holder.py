"""Client-side holder of the admin session token.

The token lives only in this object's memory: a new holder (a new tab, a
restarted script) starts logged out. A remembered token is never trusted
by its mere presence; ``restore`` asks the server first.
"""
import logging
from typing import Any

import httpx

from schoolsite.errors import NOT_AUTHENTICATED, AuthenticationError, InternalError, error_for_status

logger = logging.getLogger(__name__)

DEFAULT_AUTH_PATH = "/api/admin-auth"
DEFAULT_DATA_PATH = "/api/admin-data"


class AdminSessionHolder:
    """Holds the current admin token and attaches it to privileged calls."""

    def __init__(
        self,
        http: httpx.Client,
        auth_path: str = DEFAULT_AUTH_PATH,
        data_path: str = DEFAULT_DATA_PATH,
    ):
        """
        Args:
            http: Client whose ``base_url`` points at the API server.
            auth_path: Path of the admin auth endpoint.
            data_path: Path of the admin data endpoint.
        """
        self.http = http
        self.auth_path = auth_path
        self.data_path = data_path
        self._token: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def clear(self) -> None:
        """Forget the token locally."""
        self._token = None

    def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.http.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.error(f"Admin API request to {path} failed: {exc}")
            raise InternalError("Network error") from exc

        try:
            result = response.json()
        except ValueError:
            result = None
        if not isinstance(result, dict):
            if response.is_success:
                raise InternalError("Invalid response")
            result = {}

        if response.is_success:
            return result

        error = error_for_status(response.status_code, result.get("error") or "Request failed")
        if isinstance(error, AuthenticationError):
            # Stale or revoked session: log in again, do not retry.
            self.clear()
        raise error

    def restore(self, token: str | None) -> bool:
        """Adopt a remembered token only if the server still accepts it."""
        self.clear()
        if not token:
            return False

        result = self._post(self.auth_path, {"action": "validate-session", "sessionToken": token})
        if result.get("valid"):
            self._token = token
            return True
        return False

    def check_init(self) -> bool:
        result = self._post(self.auth_path, {"action": "check-init"})
        return bool(result.get("needsInit"))

    def init_password(self, password: str) -> None:
        self._post(self.auth_path, {"action": "init-password", "password": password})

    def login(self, username: str, password: str) -> str:
        """Log in and keep the new token. Returns the session expiry (ISO-8601)."""
        result = self._post(self.auth_path, {"action": "login", "username": username, "password": password})
        self._token = result["sessionToken"]
        return result["expiresAt"]

    def logout(self) -> None:
        """End the session on the server and forget it locally, even if the server call fails."""
        token = self._token
        self.clear()
        if token:
            try:
                self._post(self.auth_path, {"action": "logout", "sessionToken": token})
            except InternalError as exc:
                logger.warning(f"Server logout failed, token discarded locally: {exc.message}")

    def change_password(self, current_password: str, new_password: str) -> None:
        self._post(
            self.auth_path,
            {
                "action": "change-password",
                "password": current_password,
                "newPassword": new_password,
                "sessionToken": self._token,
            },
        )

    def call(self, action: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a privileged data action with the current token attached."""
        if not self._token:
            raise AuthenticationError(NOT_AUTHENTICATED)
        return self._post(self.data_path, {"action": action, "sessionToken": self._token, "data": data})
