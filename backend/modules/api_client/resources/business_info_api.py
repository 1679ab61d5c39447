"""Per-business promotional info pages."""

from typing import Any, Dict, Optional

from ..envelopes import MutationEnvelope
from ..payloads import BusinessInfoPayload, validate_payload
from .base import ResourceApi


class BusinessInfoApi(ResourceApi):
    resource_name = "business info"
    list_path = "/get-all-business-details"
    list_error = "Unable to fetch business info."

    async def create(self, payload: Dict[str, Any]) -> MutationEnvelope:
        info = validate_payload(BusinessInfoPayload, payload)
        return await self._mutate(
            "POST", "/create-business-details", "Unable to create business info.",
            json_data=info.to_backend(),
        )

    async def update(self, info_id: Optional[str], payload: Dict[str, Any]) -> MutationEnvelope:
        info_id = self.require_id(info_id, "Business info ID is required for update.")
        info = validate_payload(BusinessInfoPayload, payload)
        return await self._mutate(
            "PUT", f"/update-business-details/{info_id}", "Unable to update business info.",
            json_data=info.to_backend(),
        )

    async def delete(self, info_id: Optional[str]) -> MutationEnvelope:
        info_id = self.require_id(info_id, "Business info ID is required for deletion.")
        return await self._mutate(
            "DELETE", f"/delete-business-details/{info_id}", "Failed to delete business info."
        )
