"""Users and pending business requests."""

import logging
from typing import Any, Dict, Optional

from modules.listing.models import QueryState

from ..envelopes import ListPage, MutationEnvelope, parse_list_envelope
from ..payloads import UserStatusUpdate, validate_payload
from .base import ResourceApi

logger = logging.getLogger(__name__)

REQUESTS_FILTER = "requests"


class UsersApi(ResourceApi):
    """Admin view of consumer and business accounts."""

    resource_name = "users"
    list_path = "/getAllUsers"
    pending_path = "/pendingBusinessRequests"
    filter_param = "role"
    list_error = "Unable to fetch users."

    async def list(self, query: QueryState) -> ListPage:
        # The requests tab is served by a different endpoint with no role filter.
        if query.filter == REQUESTS_FILTER:
            return await self.list_pending_businesses(query)
        return await super().list(query)

    async def list_pending_businesses(self, query: QueryState) -> ListPage:
        params = self.build_list_params(query)
        params.pop(self.filter_param, None)
        payload = await self.client.get(
            self.pending_path, params=params, fallback_message="Unable to fetch business requests."
        )
        return parse_list_envelope(payload)

    async def get_by_id(self, user_id: Optional[str]) -> Dict[str, Any]:
        user_id = self.require_id(user_id, "User ID is required.")
        payload = await self.client.get(
            f"/getUserById/{user_id}", fallback_message="Unable to fetch user details."
        )
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    async def delete(self, user_id: Optional[str]) -> MutationEnvelope:
        user_id = self.require_id(user_id, "User ID is required.")
        return await self._mutate("DELETE", f"/deleteUserById/{user_id}", "Unable to delete user.")

    async def update_status(self, payload: Dict[str, Any]) -> MutationEnvelope:
        update = validate_payload(UserStatusUpdate, payload)
        logger.info(f"Setting user {update.user_id} status to {update.status}")
        return await self._mutate(
            "PATCH", "/updateUserStatus", "Unable to update status.", json_data=update.to_backend()
        )

    async def approve_business(self, user_id: Optional[str]) -> MutationEnvelope:
        user_id = self.require_id(user_id, "Unable to approve: missing identifier.")
        return await self._mutate("POST", f"/approveBusiness/{user_id}", "Unable to approve business.")

    async def reject_business(self, user_id: Optional[str]) -> MutationEnvelope:
        user_id = self.require_id(user_id, "Unable to reject: missing identifier.")
        return await self._mutate("POST", f"/rejectBusiness/{user_id}", "Unable to reject business.")
