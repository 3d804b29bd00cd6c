"""Tests for profile provisioning (POST /profile/create) and the profile kinds."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from app.core.constants import CONTENT_CREATORS_TABLE, PRODUCT_CREATORS_TABLE


def _register(client: TestClient, account_type: str = "content-creator", email: str = "a@x.com") -> str:
    response = client.post(
        "/auth/signup",
        json={"name": "A", "email": email, "password": "secret1", "accountType": account_type},
    )
    assert response.status_code == 200
    return response.json()["user"]["id"]


def _creator_form(user_id: str, **overrides: str) -> dict[str, str]:
    form = {
        "accountType": "content-creator",
        "userId": user_id,
        "creator_name": "Jane",
        "bio": "Hi",
        "content_categories": json.dumps(["cat-1", "cat-2"]),
        "platform_specialties": json.dumps(["Instagram", "TikTok"]),
        "services_offered": json.dumps(["Reels"]),
        "social_media_links": json.dumps({"instagram": "https://instagram.com/jane"}),
        "follower_count_range": "micro",
        "rate_range": "premium",
        "location": "Lisbon",
    }
    form.update(overrides)
    return form


def _brand_form(user_id: str, **overrides: str) -> dict[str, str]:
    form = {
        "accountType": "product-creator",
        "userId": user_id,
        "company_name": "Acme Co",
        "contact_person": "Sam",
        "company_description": "We make things",
        "industry_category": "cat-1",
        "looking_for": json.dumps(["Reviews"]),
        "budget_range": "5k-10k",
        "project_type": "review-campaign",
    }
    form.update(overrides)
    return form


class TestCreatorProfile:
    """Content-creator provisioning."""

    def test_creates_profile_and_backlink(self, test_client: TestClient, fake_repo) -> None:
        """Given creator_name=Jane and bio=Hi, the account's profile_reference is the new slug."""
        user_id = _register(test_client)

        response = test_client.post("/profile/create", data=_creator_form(user_id))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["slug"].startswith("jane-")
        assert body["profile"]["title"] == "Jane - Creator"
        assert fake_repo.accounts[user_id]["profile_reference"] == body["slug"]
        assert len(fake_repo.profiles[CONTENT_CREATORS_TABLE]) == 1

    def test_metadata_shape(self, test_client: TestClient) -> None:
        user_id = _register(test_client)

        metadata = test_client.post("/profile/create", data=_creator_form(user_id)).json()["profile"]["metadata"]

        assert metadata["creator_name"] == "Jane"
        assert metadata["email"] == "a@x.com"
        assert metadata["content_categories"] == ["cat-1", "cat-2"]
        assert metadata["social_media_links"] == {"instagram": "https://instagram.com/jane"}
        assert metadata["follower_count_range"] == {"key": "micro", "value": "1K - 10K (Micro)"}
        assert metadata["rate_range"] == {"key": "premium", "value": "$2,000 - $10,000"}
        assert metadata["account_status"] == {"key": "pending", "value": "Pending Verification"}
        assert metadata["available_for_work"] is True
        assert metadata["profile_photo"] is None
        assert metadata["portfolio_images"] == []
        assert metadata["account_id"] == user_id

    def test_unknown_range_key_maps_to_empty_label(self, test_client: TestClient) -> None:
        user_id = _register(test_client)

        metadata = test_client.post(
            "/profile/create", data=_creator_form(user_id, follower_count_range="giga")
        ).json()["profile"]["metadata"]

        assert metadata["follower_count_range"] == {"key": "giga", "value": ""}

    def test_uploads_are_stored(self, test_client: TestClient, fake_repo) -> None:
        """Given a photo and two portfolio images, all three land in storage."""
        user_id = _register(test_client)
        files = [
            ("profile_photo", ("me.png", b"png-bytes", "image/png")),
            ("portfolio_image_0", ("one.jpg", b"jpg-1", "image/jpeg")),
            ("portfolio_image_1", ("two.jpg", b"jpg-2", "image/jpeg")),
        ]

        response = test_client.post("/profile/create", data=_creator_form(user_id), files=files)

        assert response.status_code == 200
        metadata = response.json()["profile"]["metadata"]
        assert metadata["profile_photo"]["url"].startswith(f"https://cdn.test/{user_id}/profile_photo-")
        assert metadata["profile_photo"]["url"].endswith(".png")
        assert len(metadata["portfolio_images"]) == 2
        assert len(fake_repo.media) == 3

    def test_missing_name_or_bio_returns_400(self, test_client: TestClient) -> None:
        user_id = _register(test_client)

        response = test_client.post("/profile/create", data=_creator_form(user_id, bio=""))

        assert response.status_code == 400
        assert response.json()["error"] == "Creator name and bio are required"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("content_categories", "[not json"),
            ("social_media_links", "[]"),
            ("platform_specialties", "{}"),
        ],
    )
    def test_bad_json_subfield_returns_400(
        self, test_client: TestClient, fake_repo, field: str, value: str
    ) -> None:
        """Given malformed or wrongly-shaped JSON, 400 names the field and nothing is stored."""
        user_id = _register(test_client)

        response = test_client.post("/profile/create", data=_creator_form(user_id, **{field: value}))

        assert response.status_code == 400
        assert field in response.json()["error"]
        assert fake_repo.profiles[CONTENT_CREATORS_TABLE] == {}


class TestBrandProfile:
    """Product-creator provisioning."""

    def test_creates_brand_profile(self, test_client: TestClient, fake_repo) -> None:
        user_id = _register(test_client, account_type="product-creator", email="brand@x.com")

        response = test_client.post("/profile/create", data=_brand_form(user_id))

        assert response.status_code == 200
        body = response.json()
        metadata = body["profile"]["metadata"]
        assert body["profile"]["title"] == "Acme Co"
        assert metadata["email"] == "brand@x.com"
        assert metadata["looking_for"] == ["Reviews"]
        assert metadata["budget_range"] == {"key": "5k-10k", "value": "$5,000 - $10,000"}
        assert metadata["project_type"] == {"key": "review-campaign", "value": "Review Campaign"}
        assert metadata["account_status"]["key"] == "pending"
        assert metadata["company_logo"] is None
        assert fake_repo.accounts[user_id]["profile_reference"] == body["slug"]
        assert len(fake_repo.profiles[PRODUCT_CREATORS_TABLE]) == 1

    def test_logo_upload(self, test_client: TestClient) -> None:
        user_id = _register(test_client, account_type="product-creator")

        response = test_client.post(
            "/profile/create",
            data=_brand_form(user_id),
            files={"company_logo": ("logo.svg", b"<svg/>", "image/svg+xml")},
        )

        assert response.status_code == 200
        assert response.json()["profile"]["metadata"]["company_logo"]["url"].endswith(".svg")

    def test_missing_company_fields_returns_400(self, test_client: TestClient) -> None:
        user_id = _register(test_client, account_type="product-creator")

        response = test_client.post("/profile/create", data=_brand_form(user_id, contact_person=""))

        assert response.status_code == 400
        assert response.json()["error"] == "Company name, contact person, and description are required"


class TestProvisioningGuards:
    """Checks shared by both profile kinds."""

    def test_missing_account_type_or_user_returns_400(self, test_client: TestClient) -> None:
        response = test_client.post("/profile/create", data={"creator_name": "Jane", "bio": "Hi"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    def test_unknown_account_type_returns_400(self, test_client: TestClient) -> None:
        response = test_client.post("/profile/create", data={"accountType": "admin", "userId": "x"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid account type"

    def test_unknown_account_returns_404(self, test_client: TestClient) -> None:
        response = test_client.post("/profile/create", data=_creator_form("no-such-account"))
        assert response.status_code == 404

    def test_account_type_mismatch_returns_400(self, test_client: TestClient) -> None:
        user_id = _register(test_client, account_type="product-creator")

        response = test_client.post("/profile/create", data=_creator_form(user_id))

        assert response.status_code == 400
        assert response.json()["error"] == "Account type does not match account"

    def test_second_profile_returns_409(self, test_client: TestClient, fake_repo) -> None:
        """Given an account that already has a profile, a second one is refused."""
        user_id = _register(test_client)
        assert test_client.post("/profile/create", data=_creator_form(user_id)).status_code == 200

        response = test_client.post("/profile/create", data=_creator_form(user_id, creator_name="Jane 2"))

        assert response.status_code == 409
        assert len(fake_repo.profiles[CONTENT_CREATORS_TABLE]) == 1

    def test_backlink_failure_removes_orphan(self, test_client: TestClient, fake_repo) -> None:
        """Given the account update fails, the new profile is deleted and 500 returned."""
        user_id = _register(test_client)
        fake_repo.fail_on.add("update_account")

        response = test_client.post("/profile/create", data=_creator_form(user_id))

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to create profile"
        assert fake_repo.profiles[CONTENT_CREATORS_TABLE] == {}
        assert not fake_repo.accounts[user_id].get("profile_reference")

    def test_insert_failure_returns_500(self, test_client: TestClient, fake_repo) -> None:
        user_id = _register(test_client)
        fake_repo.fail_on.add("create_profile")

        response = test_client.post("/profile/create", data=_creator_form(user_id))

        assert response.status_code == 500

    @pytest.mark.parametrize("failing_step", ["create_profile", "update_account"])
    def test_failure_after_upload_removes_media(
        self, test_client: TestClient, fake_repo, failing_step: str
    ) -> None:
        """Given the insert or backlink fails, the uploaded images are deleted again."""
        user_id = _register(test_client)
        fake_repo.fail_on.add(failing_step)
        files = [
            ("profile_photo", ("me.png", b"png-bytes", "image/png")),
            ("portfolio_image_0", ("one.jpg", b"jpg-1", "image/jpeg")),
        ]

        response = test_client.post("/profile/create", data=_creator_form(user_id), files=files)

        assert response.status_code == 500
        assert fake_repo.media == {}
        assert fake_repo.profiles[CONTENT_CREATORS_TABLE] == {}


class TestProfileKinds:
    """Direct tests of the kind registry."""

    def test_registry_covers_both_account_types(self) -> None:
        from app.models.enums import AccountType
        from app.services.profiles import PROFILE_KINDS

        assert set(PROFILE_KINDS) == {t.value for t in AccountType}
        assert PROFILE_KINDS["content-creator"].table == CONTENT_CREATORS_TABLE
        assert PROFILE_KINDS["product-creator"].table == PRODUCT_CREATORS_TABLE

    def test_option_helper(self) -> None:
        from app.core.constants import BUDGET_RANGE_LABELS
        from app.services.profiles import option

        assert option("", BUDGET_RANGE_LABELS) is None
        assert option("25k-plus", BUDGET_RANGE_LABELS) == {"key": "25k-plus", "value": "$25,000+"}

    @pytest.mark.parametrize(
        "filename, content_type, suffix",
        [
            ("me.PNG", "image/png", ".png"),
            ("x.png/evil/y", "image/png", ".png"),
            ("noext", "image/png", ".png"),
        ],
    )
    def test_storage_key_has_clean_extension(
        self, filename: str, content_type: str, suffix: str
    ) -> None:
        """Given any client filename, the key is one segment under the account folder."""
        from unittest.mock import MagicMock

        from app.models.profile import MediaUpload
        from app.services.profiles import _store_image

        repo = MagicMock()
        repo.upload_media.return_value = "https://cdn.test/key"
        stored: list[str] = []
        upload = MediaUpload(
            field_name="profile_photo", filename=filename, content_type=content_type, content=b"x"
        )

        _store_image(repo, "acc-1", upload, stored)

        path = repo.upload_media.call_args.args[0]
        assert path.startswith("acc-1/profile_photo-")
        assert path.count("/") == 1
        assert path.endswith(suffix)
        assert stored == [path]
