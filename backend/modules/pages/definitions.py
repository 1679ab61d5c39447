"""The admin dashboard's list pages."""

from typing import Dict, List

from modules.api_client.resources import (
    REQUESTS_FILTER,
    BusinessesApi,
    BusinessInfoApi,
    HistoryApi,
    ReceiptsApi,
    RedeemsApi,
    RewardsApi,
    UsersApi,
)
from modules.listing.models import (
    ALL_FILTER,
    CategoryTab,
    EmptyState,
    EmptyStateKind,
    MutationIntent,
    MutationKind,
    QueryState,
)
from modules.listing.mutation_dispatcher import MutationAction
from modules.listing.page_definition import PageDefinition, generic_empty_state
from modules.listing.row_normalizer import (
    normalize_business,
    normalize_business_info,
    normalize_history,
    normalize_pending_business,
    normalize_receipt,
    normalize_redeem,
    normalize_reward,
    normalize_user,
)
from modules.listing.rows import Row

# --- users ---

USER_TABS = (
    CategoryTab("consumer", "Consumers"),
    CategoryTab("business", "Businesses"),
    CategoryTab(REQUESTS_FILTER, "Business Requests"),
)


async def _delete_user(api: UsersApi, intent: MutationIntent):
    return await api.delete(intent.target_id)


async def _block_user(api: UsersApi, intent: MutationIntent):
    return await api.update_status({"userId": intent.target_id, "status": "blocked"})


async def _unblock_user(api: UsersApi, intent: MutationIntent):
    return await api.update_status({"userId": intent.target_id, "status": "active"})


async def _approve_business(api: UsersApi, intent: MutationIntent):
    return await api.approve_business(intent.target_id)


async def _reject_business(api: UsersApi, intent: MutationIntent):
    return await api.reject_business(intent.target_id)


def _user_row_actions(row: Row, query: QueryState) -> List[str]:
    if query.filter == REQUESTS_FILTER:
        return ["approve_business", "reject_business"]
    toggle = "unblock" if getattr(row, "status", "") == "blocked" else "block"
    return [toggle, "delete"]


def _user_empty_state(kind: EmptyStateKind, query: QueryState) -> EmptyState:
    requests = query.filter == REQUESTS_FILTER
    noun = "business requests" if requests else f"{query.filter}s"
    title = f"No {noun} found"
    if kind is EmptyStateKind.ERROR:
        return EmptyState(kind, f"Unable to load {noun}", "Something went wrong while loading. Please try again.")
    if kind is EmptyStateKind.NO_RESULTS:
        return EmptyState(kind, title, "Try adjusting your search criteria.")
    if requests:
        return EmptyState(kind, title, "There are no pending business requests at the moment.")
    return EmptyState(kind, title, f"There are no {noun} in the system.")


USERS = PageDefinition(
    name="users",
    title="Users",
    api_factory=UsersApi,
    normalizer=normalize_user,
    filters=USER_TABS,
    default_filter="consumer",
    filter_normalizers={REQUESTS_FILTER: normalize_pending_business},
    actions={
        "delete": MutationAction("delete", MutationKind.DELETE, _delete_user,
                                 "User deleted successfully.", requires_confirmation=True),
        "block": MutationAction("block", MutationKind.STATUS_TRANSITION, _block_user,
                                "User blocked successfully."),
        "unblock": MutationAction("unblock", MutationKind.STATUS_TRANSITION, _unblock_user,
                                  "User unblocked successfully."),
        "approve_business": MutationAction("approve_business", MutationKind.STATUS_TRANSITION, _approve_business,
                                           "Business approved successfully.", requires_confirmation=True),
        "reject_business": MutationAction("reject_business", MutationKind.STATUS_TRANSITION, _reject_business,
                                          "Business rejected successfully.", requires_confirmation=True),
    },
    row_actions=_user_row_actions,
    empty_state=_user_empty_state,
)


# --- businesses ---


async def _create_business(api: BusinessesApi, intent: MutationIntent):
    return await api.create(intent.payload)


async def _update_business(api: BusinessesApi, intent: MutationIntent):
    return await api.update(intent.target_id, intent.payload)


async def _delete_business(api: BusinessesApi, intent: MutationIntent):
    return await api.delete(intent.target_id)


BUSINESSES = PageDefinition(
    name="businesses",
    title="Businesses",
    api_factory=BusinessesApi,
    normalizer=normalize_business,
    actions={
        "create": MutationAction("create", MutationKind.CREATE, _create_business,
                                 "Business created successfully.", requires_target=False),
        "update": MutationAction("update", MutationKind.UPDATE, _update_business,
                                 "Business updated successfully."),
        "delete": MutationAction("delete", MutationKind.DELETE, _delete_business,
                                 "Business deleted successfully.", requires_confirmation=True),
    },
    row_actions=lambda row, query: ["update", "delete"],
    empty_state=generic_empty_state("businesses", "There are no businesses in the system."),
)


# --- rewards ---


async def _create_reward(api: RewardsApi, intent: MutationIntent):
    return await api.create(intent.payload)


async def _update_reward(api: RewardsApi, intent: MutationIntent):
    return await api.update(intent.target_id, intent.payload)


async def _activate_reward(api: RewardsApi, intent: MutationIntent):
    return await api.update_status(intent.target_id, {"isActive": True})


async def _deactivate_reward(api: RewardsApi, intent: MutationIntent):
    return await api.update_status(intent.target_id, {"isActive": False})


async def _delete_reward(api: RewardsApi, intent: MutationIntent):
    return await api.delete(intent.target_id)


def _reward_row_actions(row: Row, query: QueryState) -> List[str]:
    toggle = "deactivate" if getattr(row, "is_active", False) else "activate"
    return [toggle, "update", "delete"]


def _reward_empty_state(kind: EmptyStateKind, query: QueryState) -> EmptyState:
    if kind in (EmptyStateKind.NO_RESULTS, EmptyStateKind.FILTERED):
        return EmptyState(
            kind, "No rewards found",
            "Try adjusting your search criteria or selecting a different business filter.",
        )
    return generic_empty_state("rewards", "There are no rewards in the system.")(kind, query)


REWARDS = PageDefinition(
    name="rewards",
    title="Rewards",
    api_factory=RewardsApi,
    normalizer=normalize_reward,
    business_tabs=True,
    actions={
        "create": MutationAction("create", MutationKind.CREATE, _create_reward,
                                 "Reward created successfully.", requires_target=False),
        "update": MutationAction("update", MutationKind.UPDATE, _update_reward,
                                 "Reward updated successfully."),
        "activate": MutationAction("activate", MutationKind.STATUS_TRANSITION, _activate_reward,
                                   "Reward activated successfully."),
        "deactivate": MutationAction("deactivate", MutationKind.STATUS_TRANSITION, _deactivate_reward,
                                     "Reward deactivated successfully."),
        "delete": MutationAction("delete", MutationKind.DELETE, _delete_reward,
                                 "Reward deleted successfully.", requires_confirmation=True),
    },
    row_actions=_reward_row_actions,
    empty_state=_reward_empty_state,
)


# --- redeems ---


async def _mark_delivered(api: RedeemsApi, intent: MutationIntent):
    return await api.update_status({"redeemId": intent.target_id, "status": "delivered"})


async def _mark_pending(api: RedeemsApi, intent: MutationIntent):
    return await api.update_status({"redeemId": intent.target_id, "status": "pending"})


def _redeem_row_actions(row: Row, query: QueryState) -> List[str]:
    status = str(getattr(row, "status", "")).lower()
    if status == "pending":
        return ["mark_delivered"]
    if status == "delivered":
        return ["mark_pending"]
    return []


REDEEMS = PageDefinition(
    name="redeems",
    title="Redeems",
    api_factory=RedeemsApi,
    normalizer=normalize_redeem,
    business_tabs=True,
    actions={
        "mark_delivered": MutationAction("mark_delivered", MutationKind.STATUS_TRANSITION, _mark_delivered,
                                         "Redeem status updated successfully."),
        "mark_pending": MutationAction("mark_pending", MutationKind.STATUS_TRANSITION, _mark_pending,
                                       "Redeem status updated successfully."),
    },
    row_actions=_redeem_row_actions,
    empty_state=generic_empty_state("redeems"),
)


# --- business info ---


async def _create_business_info(api: BusinessInfoApi, intent: MutationIntent):
    return await api.create(intent.payload)


async def _update_business_info(api: BusinessInfoApi, intent: MutationIntent):
    return await api.update(intent.target_id, intent.payload)


async def _delete_business_info(api: BusinessInfoApi, intent: MutationIntent):
    return await api.delete(intent.target_id)


BUSINESS_INFO = PageDefinition(
    name="business_info",
    title="Business Info",
    api_factory=BusinessInfoApi,
    normalizer=normalize_business_info,
    actions={
        "create": MutationAction("create", MutationKind.CREATE, _create_business_info,
                                 "Business info created successfully.", requires_target=False),
        "update": MutationAction("update", MutationKind.UPDATE, _update_business_info,
                                 "Business info updated successfully."),
        "delete": MutationAction("delete", MutationKind.DELETE, _delete_business_info,
                                 "Business info deleted successfully.", requires_confirmation=True),
    },
    row_actions=lambda row, query: ["update", "delete"],
    empty_state=generic_empty_state("business info", "There are no business info to display."),
)


# --- history ---

HISTORY_TABS = (
    CategoryTab(ALL_FILTER, "All"),
    CategoryTab("qr_code_create", "QR Code Created"),
    CategoryTab("qr_scan", "QR Scans"),
    CategoryTab("receipt_upload", "Receipt Uploads"),
)


def _history_empty_state(kind: EmptyStateKind, query: QueryState) -> EmptyState:
    if kind is EmptyStateKind.FILTERED:
        return EmptyState(kind, "No history found", f"No {query.filter.replace('_', ' ')} history found.")
    return generic_empty_state("history", "There is no history to display.")(kind, query)


HISTORY = PageDefinition(
    name="history",
    title="History",
    api_factory=HistoryApi,
    normalizer=normalize_history,
    filters=HISTORY_TABS,
    page_size=100,
    sort_by="timestamp",
    sort_order="desc",
    empty_state=_history_empty_state,
)


# --- receipts ---

RECEIPT_TABS = (
    CategoryTab(ALL_FILTER, "All"),
    CategoryTab("case_0_25", "Case 0.25"),
    CategoryTab("case_0_5", "Case 0.5"),
    CategoryTab("case_0_75", "Case 0.75"),
    CategoryTab("case_1", "Case 1"),
)


def format_case_type(tag: str) -> str:
    """``case_0_25`` -> ``Case 0.25``."""
    return tag.replace("case_", "Case ", 1).replace("_", ".")


async def _review_receipt(api: ReceiptsApi, intent: MutationIntent):
    payload = dict(intent.payload, sessionId=intent.target_id)
    return await api.update_status(payload)


def _receipt_empty_state(kind: EmptyStateKind, query: QueryState) -> EmptyState:
    if kind is EmptyStateKind.NO_RESULTS:
        return EmptyState(kind, "No receipts found", "No receipts found matching your search criteria.")
    if kind is EmptyStateKind.FILTERED:
        return EmptyState(kind, "No receipts found", f"No receipts found for {format_case_type(query.filter)}.")
    if kind is EmptyStateKind.NO_DATA:
        return EmptyState(kind, "No receipts found", "No uploaded receipts found.")
    return generic_empty_state("receipts")(kind, query)


RECEIPTS = PageDefinition(
    name="receipts",
    title="Uploaded Receipts",
    api_factory=ReceiptsApi,
    normalizer=normalize_receipt,
    filters=RECEIPT_TABS,
    page_size=100,
    actions={
        "review": MutationAction("review", MutationKind.STATUS_TRANSITION, _review_receipt,
                                 "Receipt status updated successfully.", requires_confirmation=True),
    },
    row_actions=lambda row, query: ["review"],
    empty_state=_receipt_empty_state,
)


PAGES: Dict[str, PageDefinition] = {
    page.name: page
    for page in (USERS, BUSINESSES, REWARDS, REDEEMS, BUSINESS_INFO, HISTORY, RECEIPTS)
}
