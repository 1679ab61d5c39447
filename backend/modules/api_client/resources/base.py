"""Shared behaviour for resource API clients."""

import logging
from typing import Any, Dict, Optional

from modules.listing.models import ALL_FILTER, QueryState

from ..envelopes import ListPage, MutationEnvelope, parse_list_envelope, parse_mutation_envelope
from ..errors import InvalidInputError
from ..http_client import BackendHTTPClient

logger = logging.getLogger(__name__)


class ResourceApi:
    """
    Base class for one backend resource.

    Subclasses set ``list_path`` and, when the resource supports filter tabs,
    ``filter_param`` (the query parameter the selected tab is sent as).
    """

    resource_name = "records"
    list_path = ""
    filter_param: Optional[str] = None
    supports_search = True
    list_error = "Unable to fetch records."

    def __init__(self, client: BackendHTTPClient):
        self.client = client

    def build_list_params(self, query: QueryState) -> Dict[str, Any]:
        """Translate a query snapshot into list query parameters."""
        params: Dict[str, Any] = {"page": query.page, "limit": query.page_size}
        search = query.search_debounced.strip()
        if search and self.supports_search:
            params["search"] = search
        if query.sort_by:
            params["sortBy"] = query.sort_by
        if query.sort_order:
            params["sortOrder"] = query.sort_order
        if self.filter_param and query.filter and query.filter != ALL_FILTER:
            params[self.filter_param] = query.filter
        return params

    async def list(self, query: QueryState) -> ListPage:
        params = self.build_list_params(query)
        payload = await self.client.get(self.list_path, params=params, fallback_message=self.list_error)
        page = parse_list_envelope(payload)
        logger.debug(f"Fetched {len(page.records)} {self.resource_name} for page {query.page}")
        return page

    async def _mutate(self, method: str, path: str, fallback_message: str, **kwargs) -> MutationEnvelope:
        payload = await self.client.request(method, path, fallback_message=fallback_message, **kwargs)
        return parse_mutation_envelope(payload)

    @staticmethod
    def require_id(value: Optional[str], message: str) -> str:
        if not value or not str(value).strip():
            raise InvalidInputError(message)
        return str(value).strip()
