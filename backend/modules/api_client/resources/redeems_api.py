"""Reward redemptions."""

from typing import Any, Dict

from ..envelopes import MutationEnvelope
from ..payloads import RedeemStatusUpdate, validate_payload
from .base import ResourceApi


class RedeemsApi(ResourceApi):
    resource_name = "redeems"
    # Endpoint name as published by the backend.
    list_path = "/geAllRedeems"
    filter_param = "business"
    list_error = "Unable to fetch redeems."

    async def update_status(self, payload: Dict[str, Any]) -> MutationEnvelope:
        update = validate_payload(RedeemStatusUpdate, payload)
        return await self._mutate(
            "PUT", "/update-status", "Unable to update redeem status.", json_data=update.to_backend()
        )
