"""Rewards that can be redeemed with points."""

import logging
from typing import Any, Dict, Optional

from ..envelopes import MutationEnvelope
from ..payloads import NewRewardPayload, RewardPayload, RewardStatusUpdate, validate_payload
from .base import ResourceApi

logger = logging.getLogger(__name__)


class RewardsApi(ResourceApi):
    """Rewards are created and updated as multipart forms because they carry an image."""

    resource_name = "rewards"
    list_path = "/getAllRewards"
    filter_param = "business"
    list_error = "Unable to fetch rewards."

    async def create(self, payload: Dict[str, Any]) -> MutationEnvelope:
        reward = validate_payload(NewRewardPayload, payload)
        return await self._mutate(
            "POST", "/createReward", "Unable to create reward.",
            data=reward.form_fields(), files=reward.form_files(),
        )

    async def update(self, reward_id: Optional[str], payload: Dict[str, Any]) -> MutationEnvelope:
        reward_id = self.require_id(reward_id, "Reward ID is required for update.")
        reward = validate_payload(RewardPayload, payload)
        return await self._mutate(
            "PUT", f"/updateReward/{reward_id}", "Unable to update reward.",
            data=reward.form_fields(), files=reward.form_files(),
        )

    async def update_status(self, reward_id: Optional[str], payload: Dict[str, Any]) -> MutationEnvelope:
        reward_id = self.require_id(reward_id, "Reward ID is required for status update.")
        update = validate_payload(RewardStatusUpdate, payload)
        logger.info(f"Setting reward {reward_id} active={update.is_active}")
        return await self._mutate(
            "PUT", f"/updateRewardStatus/{reward_id}", "Unable to update reward status.",
            json_data=update.to_backend(),
        )

    async def delete(self, reward_id: Optional[str]) -> MutationEnvelope:
        reward_id = self.require_id(reward_id, "Reward ID is required for deletion.")
        return await self._mutate("DELETE", f"/deleteReward/{reward_id}", "Unable to delete reward.")
