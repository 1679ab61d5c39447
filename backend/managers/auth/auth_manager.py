"""Admin login against the rewards backend."""

import logging
from typing import Any, Dict, Optional, Tuple

from managers.auth.auth_store import AuthStore
from modules.api_client.errors import TransportError, UNEXPECTED_FORMAT_MESSAGE
from modules.api_client.http_client import BackendHTTPClient
from modules.api_client.payloads import LoginRequest, validate_payload

logger = logging.getLogger(__name__)


class AuthManager:
    """Exchanges credentials for a token and stores it."""

    def __init__(self, client: BackendHTTPClient, auth_store: AuthStore):
        self.client = client
        self.auth_store = auth_store

    async def login(self, credentials: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """
        Log in with ``{"email", "password"}``.

        Returns:
            The token and the backend's user record

        Raises:
            InvalidInputError: When email or password is missing
            BackendError: When the backend rejects the credentials
            TransportError: When the backend is unreachable or answers without a token
        """
        request = validate_payload(LoginRequest, credentials)
        payload = await self.client.post(
            "/login",
            json_data=request.to_backend(),
            fallback_message="Login failed. Please check your credentials.",
            authenticated=False,
        )
        token: Optional[str] = payload.get("token")
        if not token or not isinstance(token, str):
            logger.error("Login response did not include a token")
            raise TransportError(UNEXPECTED_FORMAT_MESSAGE)

        user = payload.get("user")
        self.auth_store.set_token(token)
        logger.info(f"Admin {request.email} logged in")
        return token, user if isinstance(user, dict) else {}

    def logout(self) -> None:
        self.auth_store.clear_token()
