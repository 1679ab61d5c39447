"""Domain models for admin sessions."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from managers.auth.auth_store import AuthStore
from managers.notifications.notifier import Notifier
from modules.api_client.http_client import BackendHTTPClient
from modules.listing.page_controller import ResourcePageController


@dataclass
class AdminSession:
    """One logged-in admin: token, notifications and the pages they opened."""

    client: BackendHTTPClient
    auth_store: AuthStore
    notifier: Notifier = field(default_factory=Notifier)
    id: UUID = field(default_factory=uuid4)
    user_email: Optional[str] = None
    user: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    pages: Dict[str, ResourcePageController] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": str(self.id),
            "user_email": self.user_email,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "pages": sorted(self.pages),
        }

    def update_timestamp(self) -> None:
        """Update the last modified timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    def close(self) -> None:
        for controller in self.pages.values():
            controller.close()
        self.pages.clear()
        self.auth_store.clear_token()
