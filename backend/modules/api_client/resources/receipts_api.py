"""Receipts uploaded by businesses for review."""

import logging
from typing import Any, Dict

from ..envelopes import MutationEnvelope
from ..payloads import ReceiptStatusUpdate, validate_payload
from .base import ResourceApi

logger = logging.getLogger(__name__)


class ReceiptsApi(ResourceApi):
    resource_name = "receipts"
    list_path = "/uploaded-receipts"
    filter_param = "caseType"
    list_error = "Unable to fetch uploaded receipts."

    async def update_status(self, payload: Dict[str, Any]) -> MutationEnvelope:
        update = validate_payload(ReceiptStatusUpdate, payload)
        logger.info(f"Reviewing receipt session {update.session_id}: {update.status}")
        return await self._mutate(
            "PATCH", "/update-receipt-status", "Unable to update receipt status.",
            json_data=update.to_backend(),
        )
