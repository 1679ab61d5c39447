"""
Row normalizers: pure functions mapping one raw backend record to one row.

The backend is loose about shapes. Relationship fields arrive either as a bare
id string or as a populated object, optional fields may be missing or null, and
dates are ISO strings. Each relationship is resolved once into a ``Ref``
(``Identifier`` or ``IdentifierWithDetails``); downstream code only reads the
resolved ref. No normalizer raises: every field that cannot be derived becomes
``PLACEHOLDER`` (numbers become 0).
"""

import json
import math
import re
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .models import PLACEHOLDER, Identifier, IdentifierWithDetails, Ref
from .rows import (
    BusinessInfoRow,
    BusinessRow,
    HistoryRow,
    ReceiptRow,
    RedeemRow,
    RewardRow,
    Row,
    UserRow,
)

Normalizer = Callable[[Any], Row]

_DATE_FORMAT = "%d/%m/%Y"
_DATETIME_FORMAT = "%d/%m/%Y, %H:%M"


# --- field helpers ---


def _record(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def text(value: Any, default: str = PLACEHOLDER) -> str:
    """Display text for a scalar, or ``default`` when missing or blank."""
    if value is None or isinstance(value, (dict, list)):
        return default
    result = str(value).strip()
    return result or default


def number(value: Any, default: float = 0) -> Any:
    """A numeric value, or ``default`` when missing or not numeric."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return default
        if not math.isfinite(parsed):
            return default
        return int(parsed) if parsed.is_integer() else parsed
    return default


def format_date(value: Any, with_time: bool = False) -> str:
    """Render an ISO timestamp as ``dd/mm/yyyy`` (plus ``, HH:MM``)."""
    if not isinstance(value, str) or not value.strip():
        return PLACEHOLDER
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return PLACEHOLDER
    return parsed.strftime(_DATETIME_FORMAT if with_time else _DATE_FORMAT)


def resolve_ref(value: Any) -> Optional[Ref]:
    """Resolve a relationship field into a tagged ref, or None when absent."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int)):
        ident = str(value).strip()
        return Identifier(ident) if ident else None
    if isinstance(value, Mapping):
        ident = text(value.get("_id", value.get("id")))
        return IdentifierWithDetails(ident, dict(value))
    return None


def ref_id(ref: Optional[Ref]) -> str:
    return ref.id if ref is not None else PLACEHOLDER


def ref_details(ref: Optional[Ref]) -> Mapping[str, Any]:
    if isinstance(ref, IdentifierWithDetails):
        return ref.details
    return {}


def full_name(details: Mapping[str, Any]) -> str:
    parts = [text(details.get("firstName"), ""), text(details.get("lastName"), "")]
    return " ".join(part for part in parts if part)


def title_case_key(key: str) -> str:
    """``qrValue`` -> ``Qr Value``."""
    spaced = re.sub(r"([A-Z])", r" \1", str(key)).strip()
    return spaced[:1].upper() + spaced[1:]


def _active_label(is_active: Any) -> str:
    return "Active" if is_active is True else "Inactive"


# --- users ---


def _approval_label(business_info: Mapping[str, Any]) -> str:
    approved = business_info.get("approvedByAdmin")
    if approved is True:
        return "Approved"
    if approved is False:
        return "Rejected"
    return "Pending"


def normalize_user(raw: Any) -> UserRow:
    user = _record(raw)
    info_value = user.get("businessInfo")
    business_info = info_value if isinstance(info_value, Mapping) else None
    info = business_info or {}
    role = user.get("role")

    if business_info is not None and "address" in business_info:
        location = text(business_info.get("address"))
    else:
        location = text(user.get("location"))

    return UserRow(
        id=text(user.get("_id")),
        first_name=text(user.get("firstName")),
        last_name=text(user.get("lastName")),
        email=text(user.get("email")),
        role=role if role in ("consumer", "business", "admin") else "other",
        phone=text(user.get("phone")),
        location=location,
        status="blocked" if user.get("status") == "blocked" else "active",
        age=text(user.get("age")),
        business_name=text(info.get("businessName")),
        business_approval=_approval_label(info) if business_info is not None else PLACEHOLDER,
        business_type=text(info.get("businessType")),
        business_registration=text(info.get("registrationNumber")),
        business_tax_id=text(info.get("taxId")),
    )


def normalize_pending_business(raw: Any) -> UserRow:
    """Rows of the business requests tab, built mostly from ``businessInfo``."""
    user = _record(raw)
    info = _record(user.get("businessInfo"))
    return UserRow(
        id=text(user.get("_id")),
        first_name=text(info.get("ownerName")),
        last_name=PLACEHOLDER,
        email=text(user.get("email"), text(info.get("email"))),
        role="business",
        phone=text(info.get("phone"), text(user.get("phone"))),
        location=text(info.get("address")),
        status="active",
        age=PLACEHOLDER,
        business_name=text(info.get("businessName")),
        # requests are unapproved by definition; only an explicit approval shows
        business_approval="Approved" if info.get("approvedByAdmin") is True else "Pending",
        business_type=text(info.get("businessType")),
        business_registration=text(info.get("registrationNumber")),
        business_tax_id=text(info.get("taxId")),
    )


# --- businesses ---


def normalize_business(raw: Any) -> BusinessRow:
    business = _record(raw)
    earn_points = _record(business.get("earnPoints"))
    is_active = business.get("isActive") is True
    return BusinessRow(
        id=text(business.get("_id")),
        name=text(business.get("name")),
        description=text(business.get("description")),
        earn_points_type=text(earn_points.get("type")),
        earn_points_value=number(earn_points.get("value")),
        method=text(business.get("method")),
        status=_active_label(business.get("isActive")),
        is_active=is_active,
        created_at=format_date(business.get("createdAt")),
    )


# --- rewards ---


def _business_name(ref: Optional[Ref], absent: str = "No Business") -> str:
    if ref is None:
        return absent
    details = ref_details(ref)
    return text(details.get("name"), text(_record(details.get("businessInfo")).get("businessName"), "Unknown Business"))


def normalize_reward(raw: Any) -> RewardRow:
    reward = _record(raw)
    business = resolve_ref(reward.get("business"))
    return RewardRow(
        id=text(reward.get("_id")),
        reward_name=text(reward.get("rewardName")),
        points_required=number(reward.get("pointsRequired")),
        reward_type=text(reward.get("rewardType")),
        image=text(reward.get("image"), ""),
        status=_active_label(reward.get("isActive")),
        is_active=reward.get("isActive") is True,
        business_id=ref_id(business),
        business_name=_business_name(business),
        created_at=format_date(reward.get("createdAt")),
    )


# --- redeems ---


def normalize_redeem(raw: Any) -> RedeemRow:
    redeem = _record(raw)
    user_ref = resolve_ref(redeem.get("user"))
    user = ref_details(user_ref)
    reward = ref_details(resolve_ref(redeem.get("reward")))
    reward_business = resolve_ref(reward.get("business"))
    business = resolve_ref(redeem.get("business")) or reward_business

    return RedeemRow(
        id=text(redeem.get("_id")),
        user_id=ref_id(user_ref),
        user_name=full_name(user) or text(user.get("email")),
        user_email=text(user.get("email")),
        user_phone=text(user.get("phone")),
        reward_name=text(reward.get("rewardName")),
        business_id=ref_id(business),
        business_name=text(ref_details(reward_business).get("name")),
        reward_type=text(reward.get("rewardType")),
        points_required=number(reward.get("pointsRequired")),
        points_used=number(redeem.get("pointsUsed")),
        redeem_code=text(redeem.get("redeemCode")),
        status=text(redeem.get("status")),
        created_at=format_date(redeem.get("createdAt")),
    )


# --- business info ---


def _count(value: Any) -> int:
    return len(value) if isinstance(value, list) else 0


def normalize_business_info(raw: Any) -> BusinessInfoRow:
    info = _record(raw)
    grand_prize = _record(info.get("grandPrize"))
    draw_date = format_date(grand_prize.get("drawDate"))
    if draw_date == PLACEHOLDER:
        draw_date = text(grand_prize.get("drawDate"))
    return BusinessInfoRow(
        id=text(info.get("_id")),
        business_id=ref_id(resolve_ref(info.get("business"))),
        title=text(info.get("title")),
        grand_prize_title=text(grand_prize.get("title")),
        draw_date=draw_date,
        summary_stats_count=_count(info.get("summaryStats")),
        earn_per_purchase_count=_count(info.get("earnPerPurchase")),
        status=_active_label(info.get("isActive")),
        is_active=info.get("isActive") is True,
        created_at=format_date(info.get("createdAt")),
    )


# --- history ---


def _detail_value(key: str, value: Any) -> str:
    if key == "imageUrl" and isinstance(value, str):
        return "View Image"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _details_fields(details: Any) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
    if isinstance(details, str):
        try:
            parsed = json.loads(details)
        except ValueError:
            return text(details), ()
        if not isinstance(parsed, dict):
            return text(details), ()
        details = parsed
    if not isinstance(details, Mapping) or not details:
        return PLACEHOLDER, ()

    fields = tuple((title_case_key(key), _detail_value(key, value)) for key, value in details.items())
    return " • ".join(f"{key}: {value}" for key, value in fields), fields


def normalize_history(raw: Any) -> HistoryRow:
    item = _record(raw)
    user_ref = resolve_ref(item.get("user"))
    business_ref = resolve_ref(item.get("relatedBusiness"))
    business_info = _record(ref_details(business_ref).get("businessInfo"))
    details, fields = _details_fields(item.get("details"))

    return HistoryRow(
        id=text(item.get("_id")),
        user_id=ref_id(user_ref),
        user_name=full_name(ref_details(user_ref)) or PLACEHOLDER,
        session=text(item.get("session")),
        related_business_id=ref_id(business_ref),
        related_business_name=text(business_info.get("businessName")),
        action_type=text(item.get("actionType")),
        points=number(item.get("points")),
        details=details,
        details_fields=fields,
        timestamp=format_date(item.get("timestamp"), with_time=True),
    )


# --- receipts ---


def _money(value: Any) -> str:
    amount = number(value, default=None)
    return f"${amount:.2f}" if amount is not None else PLACEHOLDER


def normalize_receipt(raw: Any) -> ReceiptRow:
    receipt = _record(raw)
    business_ref = resolve_ref(receipt.get("business"))
    business_info = _record(ref_details(business_ref).get("businessInfo"))
    meta = _record(receipt.get("meta"))
    category = meta.get("category")
    extracted = meta.get("extractedData")

    return ReceiptRow(
        id=text(receipt.get("_id")),
        business_id=ref_id(business_ref),
        business_name=text(business_info.get("businessName")),
        business_type=text(business_info.get("businessType")),
        type=text(receipt.get("type")),
        value=text(receipt.get("value")),
        points=number(receipt.get("points")),
        status=text(receipt.get("status")),
        category=text(category).replace("_", " ") if isinstance(category, str) else PLACEHOLDER,
        total_amount=_money(meta.get("totalAmount")),
        case_quantity=text(meta.get("caseQuantity")),
        items_count=str(len(extracted)) if isinstance(extracted, list) else PLACEHOLDER,
        image_url=text(meta.get("imageUrl")),
        created_at=format_date(receipt.get("createdAt"), with_time=True),
    )


def normalize_all(records: Iterable[Any], normalizer: Normalizer) -> Tuple[Row, ...]:
    return tuple(normalizer(record) for record in records)


NORMALIZERS: Dict[str, Normalizer] = {
    "users": normalize_user,
    "business_requests": normalize_pending_business,
    "businesses": normalize_business,
    "rewards": normalize_reward,
    "redeems": normalize_redeem,
    "business_info": normalize_business_info,
    "history": normalize_history,
    "receipts": normalize_receipt,
}
