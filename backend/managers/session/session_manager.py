"""Session manager: admin session lifecycle and per-session page controllers."""

import logging
from typing import Dict, Mapping, Optional
from uuid import UUID

import httpx

from managers.auth.auth_store import AuthStore
from managers.config.config_models import AppSettings, PagesConfig
from modules.api_client.http_client import BackendHTTPClient
from modules.listing.page_controller import ResourcePageController
from modules.listing.page_definition import PageDefinition

from .session_models import AdminSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, looks up and drops admin sessions."""

    def __init__(
        self,
        settings: AppSettings,
        pages: Mapping[str, PageDefinition],
        pages_config: Optional[PagesConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize session manager.

        Args:
            settings: Application settings (backend URL, timeouts, page defaults)
            pages: Page definitions by name
            pages_config: Per-page overrides
            transport: Optional httpx transport shared by every session's client (tests)
        """
        self.settings = settings
        self._pages_config = pages_config or PagesConfig()
        self.pages: Dict[str, PageDefinition] = {
            name: page.with_overrides(self._pages_config.overrides_for(name))
            for name, page in pages.items()
        }
        self._transport = transport
        self._sessions: Dict[UUID, AdminSession] = {}
        logger.info(f"SessionManager initialized with {len(self.pages)} pages")

    def new_client(self, auth_store: AuthStore) -> BackendHTTPClient:
        return BackendHTTPClient(
            base_url=self.settings.api_base_url,
            auth_store=auth_store,
            timeout=self.settings.request_timeout,
            transport=self._transport,
        )

    def create_session(self, token: Optional[str] = None, user_email: Optional[str] = None) -> AdminSession:
        """Create a new session."""
        auth_store = AuthStore(token)
        session = AdminSession(client=self.new_client(auth_store), auth_store=auth_store, user_email=user_email)
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id} for user {user_email}")
        return session

    def get_session(self, session_id: UUID) -> Optional[AdminSession]:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def delete_session(self, session_id: UUID) -> bool:
        """Delete a session and clear its token."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info(f"Deleted session {session_id}")
        return True

    def get_session_count(self) -> int:
        """Get total number of sessions."""
        return len(self._sessions)

    def get_page(self, session: AdminSession, page_name: str) -> Optional[ResourcePageController]:
        """The session's controller for ``page_name``, created on first use."""
        controller = session.pages.get(page_name)
        if controller is not None:
            return controller
        definition = self.pages.get(page_name)
        if definition is None:
            return None
        controller = ResourcePageController(
            definition,
            definition.api_factory(session.client),
            session.notifier,
            debounce_seconds=self.settings.search_debounce_seconds,
            default_page_size=self.settings.default_page_size,
        )
        session.pages[page_name] = controller
        session.update_timestamp()
        logger.debug(f"Opened page {page_name} for session {session.id}")
        return controller
