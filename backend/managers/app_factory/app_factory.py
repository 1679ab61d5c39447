"""Application factory for dependency injection and wiring."""

import logging
from typing import Optional

import httpx

from managers.auth.auth_manager import AuthManager
from managers.config.config_manager import ConfigManager, config_manager
from managers.logging.logging_manager import LoggingManager
from managers.session.session_manager import SessionManager
from managers.session.session_models import AdminSession
from modules.pages.definitions import PAGES

logger = logging.getLogger(__name__)


class AppFactory:
    """Builds the managers lazily and hands them to the routes."""

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config_manager = config or config_manager
        self.session_manager: Optional[SessionManager] = None
        self.logging_manager: Optional[LoggingManager] = None
        self._transport = transport
        logger.info("AppFactory initialized")

    def get_config_manager(self) -> ConfigManager:
        """Get config manager."""
        return self.config_manager

    def get_logging_manager(self) -> LoggingManager:
        """Get logging manager - installs the log handlers on first use."""
        if self.logging_manager is None:
            self.logging_manager = LoggingManager(settings=self.config_manager.app_settings)
        return self.logging_manager

    def get_session_manager(self) -> SessionManager:
        """Get session manager - lazy initialization."""
        if self.session_manager is None:
            self.session_manager = SessionManager(
                settings=self.config_manager.app_settings,
                pages=PAGES,
                pages_config=self.config_manager.pages_config,
                transport=self._transport,
            )
        return self.session_manager

    def get_auth_manager(self, session: AdminSession) -> AuthManager:
        return AuthManager(session.client, session.auth_store)


# Global instance
app_factory = AppFactory()
