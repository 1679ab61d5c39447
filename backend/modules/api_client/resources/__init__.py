"""Resource API clients, one per backend resource."""

from .base import ResourceApi
from .business_info_api import BusinessInfoApi
from .businesses_api import BusinessesApi
from .history_api import HistoryApi
from .receipts_api import ReceiptsApi
from .redeems_api import RedeemsApi
from .rewards_api import RewardsApi
from .users_api import REQUESTS_FILTER, UsersApi

__all__ = [
    "ResourceApi",
    "BusinessInfoApi",
    "BusinessesApi",
    "HistoryApi",
    "ReceiptsApi",
    "RedeemsApi",
    "RewardsApi",
    "UsersApi",
    "REQUESTS_FILTER",
]
