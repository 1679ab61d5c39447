"""Businesses that award points."""

from typing import Any, Dict, Optional

from ..envelopes import MutationEnvelope
from ..payloads import BusinessPayload, validate_payload
from .base import ResourceApi


class BusinessesApi(ResourceApi):
    resource_name = "businesses"
    list_path = "/getAllBusinesses"
    list_error = "Unable to fetch businesses."

    async def create(self, payload: Dict[str, Any]) -> MutationEnvelope:
        business = validate_payload(BusinessPayload, payload)
        return await self._mutate(
            "POST", "/createBusiness", "Unable to create business.", json_data=business.to_backend()
        )

    async def update(self, business_id: Optional[str], payload: Dict[str, Any]) -> MutationEnvelope:
        business_id = self.require_id(business_id, "Business ID is required for update.")
        business = validate_payload(BusinessPayload, payload)
        return await self._mutate(
            "PATCH", f"/updateBusiness/{business_id}", "Unable to update business.",
            json_data=business.to_backend(),
        )

    async def delete(self, business_id: Optional[str]) -> MutationEnvelope:
        business_id = self.require_id(business_id, "Business ID is required for deletion.")
        return await self._mutate("DELETE", f"/deleteBusiness/{business_id}", "Failed to delete business.")
