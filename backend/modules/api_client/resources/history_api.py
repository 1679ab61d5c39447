"""Points activity history."""

from typing import Optional

from modules.listing.models import QueryState

from ..envelopes import ListPage, parse_list_envelope
from .base import ResourceApi


class HistoryApi(ResourceApi):
    resource_name = "history"
    list_path = "/getAllUserHistory"
    filter_param = "actionType"
    list_error = "Unable to fetch history."

    async def list_for_business(self, business_id: Optional[str], query: QueryState) -> ListPage:
        business_id = self.require_id(business_id, "Business ID is required.")
        payload = await self.client.get(
            f"/getUserHistoryByBusinessId/{business_id}",
            params=self.build_list_params(query),
            fallback_message="Unable to fetch business history.",
        )
        return parse_list_envelope(payload)
