"""Row view-models, one flat frozen dataclass per table."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Row:
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UserRow(Row):
    first_name: str
    last_name: str
    email: str
    role: str
    phone: str
    location: str
    status: str
    age: str
    business_name: str
    business_approval: str
    business_type: str
    business_registration: str
    business_tax_id: str


@dataclass(frozen=True)
class BusinessRow(Row):
    name: str
    description: str
    earn_points_type: str
    earn_points_value: float
    method: str
    status: str
    is_active: bool
    created_at: str


@dataclass(frozen=True)
class RewardRow(Row):
    reward_name: str
    points_required: int
    reward_type: str
    image: str
    status: str
    is_active: bool
    business_id: str
    business_name: str
    created_at: str


@dataclass(frozen=True)
class RedeemRow(Row):
    user_id: str
    user_name: str
    user_email: str
    user_phone: str
    reward_name: str
    business_id: str
    business_name: str
    reward_type: str
    points_required: int
    points_used: int
    redeem_code: str
    status: str
    created_at: str


@dataclass(frozen=True)
class BusinessInfoRow(Row):
    business_id: str
    title: str
    grand_prize_title: str
    draw_date: str
    summary_stats_count: int
    earn_per_purchase_count: int
    status: str
    is_active: bool
    created_at: str


@dataclass(frozen=True)
class HistoryRow(Row):
    user_id: str
    user_name: str
    session: str
    related_business_id: str
    related_business_name: str
    action_type: str
    points: float
    details: str
    details_fields: Tuple[Tuple[str, str], ...]
    timestamp: str


@dataclass(frozen=True)
class ReceiptRow(Row):
    business_id: str
    business_name: str
    business_type: str
    type: str
    value: str
    points: float
    status: str
    category: str
    total_amount: str
    case_quantity: str
    items_count: str
    image_url: str
    created_at: str
