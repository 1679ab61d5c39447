"""Pydantic models for backend response envelopes.

The backend reports pagination in three layouts depending on the endpoint:

* top level: ``{"success", "total", "page", "limit", "totalPages", "data": [...]}``
* nested object: ``{"success", "pagination": {...}, "data": [...]}``
* nested data: ``{"success", "data": {"total", ..., "data": [...]}}``

``parse_list_envelope`` folds all of them into one ``ListPage``.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import UNEXPECTED_FORMAT_MESSAGE, TransportError


class Pagination(BaseModel):
    """Pagination metadata reported by a list endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=0, ge=0)
    total_pages: Optional[int] = Field(default=None, alias="totalPages")

    def resolved_total_pages(self, page_size: int) -> int:
        """Total pages, derived from ``total`` when the backend omits it. Never below 1."""
        if self.total_pages is not None:
            return max(1, self.total_pages)
        size = self.limit or page_size
        if size <= 0:
            return 1
        return max(1, math.ceil(self.total / size))


class ListPage(BaseModel):
    """One page of raw records."""

    records: List[Any] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class MutationEnvelope(BaseModel):
    """Envelope returned by create/update/delete/status endpoints."""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None


_PAGINATION_KEYS = ("total", "page", "limit", "totalPages")


def _pagination_from(source: Dict[str, Any]) -> Dict[str, Any]:
    return {key: source[key] for key in _PAGINATION_KEYS if source.get(key) is not None}


def parse_list_envelope(payload: Dict[str, Any]) -> ListPage:
    """
    Parse a successful list envelope into a ``ListPage``.

    Raises:
        TransportError: When no record list can be located
    """
    data = payload.get("data")

    try:
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            return ListPage(records=data["data"], pagination=Pagination(**_pagination_from(data)))

        if isinstance(data, list):
            nested = payload.get("pagination")
            if isinstance(nested, dict):
                return ListPage(records=data, pagination=Pagination(**_pagination_from(nested)))
            pagination = _pagination_from(payload)
            pagination.setdefault("total", len(data))
            return ListPage(records=data, pagination=Pagination(**pagination))
    except ValidationError as e:
        raise TransportError(UNEXPECTED_FORMAT_MESSAGE) from e

    raise TransportError(UNEXPECTED_FORMAT_MESSAGE)


def parse_mutation_envelope(payload: Dict[str, Any]) -> MutationEnvelope:
    """Parse a mutation envelope; unusable shapes are transport errors."""
    try:
        return MutationEnvelope(**payload)
    except ValidationError as e:
        raise TransportError(UNEXPECTED_FORMAT_MESSAGE) from e
