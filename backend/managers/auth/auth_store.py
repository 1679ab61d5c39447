"""Holds the admin bearer token for one session."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AuthStore:
    """In-memory token store; the HTTP client reads it on every request."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token
        logger.debug("Admin token stored")

    def clear_token(self) -> None:
        self._token = None
        logger.debug("Admin token cleared")

    @property
    def authenticated(self) -> bool:
        return bool(self._token)
