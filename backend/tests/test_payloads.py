"""Tests for local payload validation."""

import base64

import pytest

from modules.api_client.errors import InvalidInputError
from modules.api_client.payloads import (
    BusinessInfoPayload,
    BusinessPayload,
    LoginRequest,
    NewRewardPayload,
    ReceiptStatusUpdate,
    RedeemStatusUpdate,
    RewardPayload,
    UserStatusUpdate,
    validate_payload,
)

IMAGE = {"filename": "r.png", "content_type": "image/png", "content": base64.b64encode(b"png").decode()}


class TestRewardPayload:

    def test_valid_reward_serialises_form_fields(self):
        reward = validate_payload(RewardPayload, {
            "rewardName": " Free pint ", "business": "b1", "pointsRequired": "50", "rewardType": "drink",
        })
        assert reward.form_fields() == {
            "rewardName": "Free pint", "business": "b1", "pointsRequired": "50", "rewardType": "drink",
        }
        assert reward.form_files() is None

    @pytest.mark.parametrize("points", [0, -3, 2.5, "abc", None, True])
    def test_points_must_be_positive_integer(self, points):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(RewardPayload, {
                "rewardName": "x", "business": "b1", "pointsRequired": points, "rewardType": "drink",
            })
        assert exc_info.value.message == "Points required must be a positive integer."

    def test_reward_name_required(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(RewardPayload, {"rewardName": "  ", "business": "b1", "pointsRequired": 5,
                                             "rewardType": "drink"})
        assert exc_info.value.message == "Reward name is required."

    def test_image_required_on_create(self):
        data = {"rewardName": "x", "business": "b1", "pointsRequired": 5, "rewardType": "drink"}
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(NewRewardPayload, data)
        assert exc_info.value.message == "Image is required."

        reward = validate_payload(NewRewardPayload, dict(data, image=IMAGE))
        assert reward.form_files() == {"image": ("r.png", b"png", "image/png")}

    def test_is_active_sent_as_text(self):
        reward = validate_payload(RewardPayload, {
            "reward_name": "x", "business": "b1", "points_required": 5, "reward_type": "drink", "is_active": False,
        })
        assert reward.form_fields()["isActive"] == "false"


class TestStatusPayloads:

    def test_user_status_serialises_camel_case(self):
        update = validate_payload(UserStatusUpdate, {"userId": "u1", "status": "blocked"})
        assert update.to_backend() == {"userId": "u1", "status": "blocked"}

    def test_user_id_required(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(UserStatusUpdate, {"status": "active"})
        assert exc_info.value.message == "User ID is required."

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidInputError):
            validate_payload(RedeemStatusUpdate, {"redeemId": "r1", "status": "shipped"})

    def test_receipt_notes_omitted_when_blank(self):
        update = validate_payload(ReceiptStatusUpdate, {"sessionId": "s1", "status": "approved", "adminNotes": ""})
        assert update.to_backend() == {"sessionId": "s1", "status": "approved"}


class TestBusinessPayloads:

    def test_business_requires_positive_earn_points(self):
        with pytest.raises(InvalidInputError):
            validate_payload(BusinessPayload, {
                "name": "Bar", "method": "qr", "earnPoints": {"type": "per_visit", "value": 0},
            })

    def test_business_serialises(self):
        business = validate_payload(BusinessPayload, {
            "name": "Bar", "method": "qr", "earnPoints": {"type": "per_visit", "value": 10},
        })
        assert business.to_backend() == {
            "name": "Bar", "method": "qr", "isActive": True,
            "earnPoints": {"type": "per_visit", "value": 10.0},
        }

    def test_business_info_drops_empty_items(self):
        info = validate_payload(BusinessInfoPayload, {
            "business": "b1",
            "title": "Summer promo",
            "summaryStats": [{"label": "Entries", "value": 3}, {"label": "", "value": 1}],
            "grandPrize": {"title": "Trip"},
            "earnPerPurchase": [{"productName": "Stout", "points": 5, "entries": 1}, {"productName": ""}],
        })
        backend = info.to_backend()
        assert len(backend["summaryStats"]) == 1
        assert len(backend["earnPerPurchase"]) == 1
        assert backend["grandPrize"]["title"] == "Trip"

    def test_business_info_needs_summary_stat(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(BusinessInfoPayload, {
                "business": "b1", "title": "t", "summaryStats": [],
                "grandPrize": {"title": "Trip"}, "earnPerPurchase": [{"productName": "Stout"}],
            })
        assert exc_info.value.message == "At least one valid summary stat is required."

    def test_business_info_needs_business(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(BusinessInfoPayload, {"title": "t"})
        assert exc_info.value.message == "Please select a business."


class TestLoginRequest:

    def test_password_kept_verbatim(self):
        login = validate_payload(LoginRequest, {"email": " admin@x.com ", "password": " secret "})
        assert login.to_backend() == {"email": "admin@x.com", "password": " secret "}

    def test_email_required(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_payload(LoginRequest, {"password": "x"})
        assert exc_info.value.message == "Email is required."
