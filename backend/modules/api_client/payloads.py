"""Request payload models.

Every mutation payload is validated here before it is sent, so invalid input
never costs a round trip. Models accept snake_case or the backend's camelCase
names and serialise with the backend's names.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple, Type, TypeVar

from pydantic import (
    AliasChoices,
    Base64Bytes,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import InvalidInputError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _field(alias: str, **kwargs: Any) -> Any:
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in alias)
    return Field(
        validation_alias=AliasChoices(alias, snake),
        serialization_alias=alias,
        **kwargs,
    )


def _required_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(message)
    return str(value).strip()


class BackendPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, validate_default=True)

    def to_backend(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def first_error_message(exc: ValidationError) -> str:
    """Readable message for the first validation error."""
    error = exc.errors()[0]
    ctx = error.get("ctx") or {}
    if "error" in ctx:
        return str(ctx["error"])
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


def validate_payload(model: Type[ModelT], data: Optional[Dict[str, Any]]) -> ModelT:
    """Validate ``data`` against ``model``; raise ``InvalidInputError`` on failure."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data or {})
    except ValidationError as e:
        raise InvalidInputError(first_error_message(e)) from e


# --- Users ---


class UserStatusUpdate(BackendPayload):
    user_id: str = _field("userId", default="")
    status: Literal["active", "blocked"]

    @field_validator("user_id")
    @classmethod
    def _user_id(cls, v: str) -> str:
        return _required_text(v, "User ID is required.")


# --- Businesses ---


class EarnPoints(BackendPayload):
    type: str = ""
    value: float = Field(gt=0)

    @field_validator("type")
    @classmethod
    def _type(cls, v: str) -> str:
        return _required_text(v, "Earn points type is required.")


class BusinessPayload(BackendPayload):
    name: str = ""
    description: Optional[str] = None
    earn_points: EarnPoints = _field("earnPoints")
    method: str = ""
    is_active: bool = _field("isActive", default=True)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _required_text(v, "Business name is required.")

    @field_validator("method")
    @classmethod
    def _method(cls, v: str) -> str:
        return _required_text(v, "Method is required.")

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# --- Rewards ---


class ImageUpload(BaseModel):
    """An image sent as base64 through the JSON surface."""

    filename: str = "image"
    content_type: str = "application/octet-stream"
    content: Base64Bytes

    def as_file(self) -> Tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)


class RewardPayload(BackendPayload):
    reward_name: str = _field("rewardName", default="")
    business: str = ""
    points_required: int = _field("pointsRequired", default=0)
    reward_type: str = _field("rewardType", default="")
    image: Optional[ImageUpload] = None
    is_active: Optional[bool] = _field("isActive", default=None)

    @field_validator("reward_name")
    @classmethod
    def _reward_name(cls, v: str) -> str:
        return _required_text(v, "Reward name is required.")

    @field_validator("business")
    @classmethod
    def _business(cls, v: str) -> str:
        return _required_text(v, "Business is required.")

    @field_validator("points_required", mode="before")
    @classmethod
    def _points_required(cls, v: Any) -> int:
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            raise ValueError("Points required must be a positive integer.")
        try:
            number = float(v)
        except ValueError:
            raise ValueError("Points required must be a positive integer.")
        if number <= 0 or not number.is_integer():
            raise ValueError("Points required must be a positive integer.")
        return int(number)

    @field_validator("reward_type")
    @classmethod
    def _reward_type(cls, v: str) -> str:
        return _required_text(v, "Reward type is required.")

    def form_fields(self) -> Dict[str, str]:
        fields = {
            "rewardName": self.reward_name,
            "business": self.business,
            "pointsRequired": str(self.points_required),
            "rewardType": self.reward_type,
        }
        if self.is_active is not None:
            fields["isActive"] = "true" if self.is_active else "false"
        return fields

    def form_files(self) -> Optional[Dict[str, Tuple[str, bytes, str]]]:
        return {"image": self.image.as_file()} if self.image else None


class NewRewardPayload(RewardPayload):
    @model_validator(mode="after")
    def _image_required(self) -> "NewRewardPayload":
        if self.image is None:
            raise ValueError("Image is required.")
        return self


class RewardStatusUpdate(BackendPayload):
    is_active: bool = _field("isActive")


# --- Redeems ---


class RedeemStatusUpdate(BackendPayload):
    redeem_id: str = _field("redeemId", default="")
    status: Literal["pending", "delivered"]

    @field_validator("redeem_id")
    @classmethod
    def _redeem_id(cls, v: str) -> str:
        return _required_text(v, "Redeem ID is required.")


# --- Receipts ---


class ReceiptStatusUpdate(BackendPayload):
    session_id: str = _field("sessionId", default="")
    status: Literal["approved", "pending", "rejected"]
    admin_notes: Optional[str] = _field("adminNotes", default=None)

    @field_validator("session_id")
    @classmethod
    def _session_id(cls, v: str) -> str:
        return _required_text(v, "Session ID is required.")

    @field_validator("admin_notes")
    @classmethod
    def _admin_notes(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# --- Business info ---


class SummaryStat(BackendPayload):
    label: str = ""
    value: float = Field(default=0, ge=0)


class GrandPrize(BackendPayload):
    title: str = ""
    description: str = ""
    draw_date: str = _field("drawDate", default="")
    entry_rule: str = _field("entryRule", default="")

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _required_text(v, "Grand prize title is required.")


class EarnPerPurchase(BackendPayload):
    product_name: str = _field("productName", default="")
    size: str = ""
    points: float = Field(default=0, ge=0)
    entries: float = Field(default=0, ge=0)
    bonus_tip: str = _field("bonusTip", default="")


class BusinessInfoPayload(BackendPayload):
    business: str = ""
    title: str = ""
    summary_stats: List[SummaryStat] = _field("summaryStats", default_factory=list)
    grand_prize: GrandPrize = _field("grandPrize")
    earn_per_purchase: List[EarnPerPurchase] = _field("earnPerPurchase", default_factory=list)
    is_active: bool = _field("isActive", default=True)

    @field_validator("business")
    @classmethod
    def _business(cls, v: str) -> str:
        return _required_text(v, "Please select a business.")

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _required_text(v, "Title is required.")

    @field_validator("summary_stats")
    @classmethod
    def _summary_stats(cls, v: List[SummaryStat]) -> List[SummaryStat]:
        stats = [stat for stat in v if stat.label]
        if not stats:
            raise ValueError("At least one valid summary stat is required.")
        return stats

    @field_validator("earn_per_purchase")
    @classmethod
    def _earn_per_purchase(cls, v: List[EarnPerPurchase]) -> List[EarnPerPurchase]:
        items = [item for item in v if item.product_name]
        if not items:
            raise ValueError("At least one valid earn per purchase item is required.")
        return items


# --- Auth ---


class LoginRequest(BaseModel):
    model_config = ConfigDict(validate_default=True)

    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _required_text(v, "Email is required.")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required.")
        return v

    def to_backend(self) -> Dict[str, Any]:
        return {"email": self.email, "password": self.password}
