"""Profile provisioning.

A submitted profile form is dispatched to the ``ProfileKind`` registered for
its account type.  Each kind knows how to validate its fields and build the
record stored in its table.  Provisioning then:

1. checks the target account exists, has the matching type, and has no
   profile yet;
2. uploads any images to Supabase Storage;
3. inserts the profile;
4. writes the profile slug back onto the account.

If step 4 fails the profile inserted in step 3 is deleted again so that no
profile is left without an owning account.  If step 3 or 4 fails the images
uploaded in step 2 are removed from the bucket.
"""

from __future__ import annotations

import json
import logging
import mimetypes
import re
import uuid
from abc import ABC, abstractmethod
from typing import Any

from app.core.constants import (
    BUDGET_RANGE_LABELS,
    CONTENT_CREATORS_TABLE,
    FOLLOWER_RANGE_LABELS,
    PRODUCT_CREATORS_TABLE,
    PROFILE_STATUS_LABELS,
    PROJECT_TYPE_LABELS,
    RATE_RANGE_LABELS,
)
from app.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)
from app.core.text import unique_slug
from app.db.repository import AccountRepository
from app.models.account import Account
from app.models.enums import AccountType, ProfileStatus
from app.models.profile import (
    ImageRef,
    MediaUpload,
    OptionValue,
    Profile,
    ProfileCreate,
    ProfileCreateResponse,
    ProfileSubmission,
)

logger = logging.getLogger(__name__)

_SAFE_SUFFIX = re.compile(r"[a-z0-9]{1,10}")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def parse_json_field(submission: ProfileSubmission, name: str, expected: type) -> Any:
    """Decode a JSON-encoded form field, defaulting to an empty list / dict."""
    raw = submission.text(name)
    if not raw:
        return expected()
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError(f"Invalid JSON in field '{name}'") from None
    if not isinstance(value, expected):
        raise ValidationError(
            f"Field '{name}' must be a JSON {'array' if expected is list else 'object'}"
        )
    return value


def option(key: str, labels: dict[str, str]) -> dict[str, str] | None:
    """Store an enumerated key with its display label; unknown keys get ''."""
    if not key:
        return None
    return OptionValue(key=key, value=labels.get(key, "")).model_dump()


def _status(status: ProfileStatus) -> dict[str, str]:
    return OptionValue(key=status.value, value=PROFILE_STATUS_LABELS[status.value]).model_dump()


def _extension(upload: MediaUpload) -> str:
    suffix = upload.filename.rsplit(".", 1)[1].lower() if "." in upload.filename else ""
    if _SAFE_SUFFIX.fullmatch(suffix):
        return f".{suffix}"
    return mimetypes.guess_extension(upload.content_type) or ""


def _store_image(
    repo: AccountRepository, account_id: str, upload: MediaUpload, stored: list[str]
) -> dict[str, str]:
    """Upload one image and record its storage path in *stored*."""
    path = f"{account_id}/{upload.field_name}-{uuid.uuid4().hex}{_extension(upload)}"
    url = repo.upload_media(path, upload.content, upload.content_type)
    stored.append(path)
    return ImageRef(url=url, imgix_url=url).model_dump()


# ---------------------------------------------------------------------------
# Profile kinds
# ---------------------------------------------------------------------------

class ProfileKind(ABC):
    """Validation and record-building rules for one account type."""

    account_type: AccountType
    table: str

    @abstractmethod
    def validate(self, submission: ProfileSubmission) -> dict[str, Any]:
        """Check required fields and decode JSON sub-fields.

        Returns the cleaned values consumed by ``build_record``.
        """

    @abstractmethod
    def store_media(
        self,
        submission: ProfileSubmission,
        repo: AccountRepository,
        account_id: str,
        stored: list[str],
    ) -> dict[str, Any]:
        """Upload the kind's image fields and return their metadata entries.

        Storage paths of uploaded objects are appended to *stored*.
        """

    @abstractmethod
    def build_record(
        self, cleaned: dict[str, Any], media: dict[str, Any], account: Account
    ) -> ProfileCreate:
        ...


class CreatorProfileKind(ProfileKind):
    account_type = AccountType.content_creator
    table = CONTENT_CREATORS_TABLE

    def validate(self, submission: ProfileSubmission) -> dict[str, Any]:
        creator_name = submission.text("creator_name")
        bio = submission.text("bio")
        if not creator_name or not bio:
            raise ValidationError("Creator name and bio are required")

        return {
            "creator_name": creator_name,
            "bio": bio,
            "email": submission.text("email"),
            "content_categories": parse_json_field(submission, "content_categories", list),
            "platform_specialties": parse_json_field(submission, "platform_specialties", list),
            "services_offered": parse_json_field(submission, "services_offered", list),
            "social_media_links": parse_json_field(submission, "social_media_links", dict),
            "follower_count_range": option(
                submission.text("follower_count_range"), FOLLOWER_RANGE_LABELS
            ),
            "rate_range": option(submission.text("rate_range"), RATE_RANGE_LABELS),
            "website_url": submission.text("website_url"),
            "location": submission.text("location"),
            "tags": submission.text("tags"),
        }

    def store_media(
        self,
        submission: ProfileSubmission,
        repo: AccountRepository,
        account_id: str,
        stored: list[str],
    ) -> dict[str, Any]:
        photo = submission.files.get("profile_photo")
        portfolio: list[dict[str, str]] = []
        index = 0
        while f"portfolio_image_{index}" in submission.files:
            portfolio.append(
                _store_image(repo, account_id, submission.files[f"portfolio_image_{index}"], stored)
            )
            index += 1
        return {
            "profile_photo": _store_image(repo, account_id, photo, stored) if photo else None,
            "portfolio_images": portfolio,
        }

    def build_record(
        self, cleaned: dict[str, Any], media: dict[str, Any], account: Account
    ) -> ProfileCreate:
        metadata = {
            **cleaned,
            **media,
            "email": cleaned["email"] or account.email,
            "account_status": _status(ProfileStatus.pending),
            "available_for_work": True,
            "account_id": account.id,
        }
        name = cleaned["creator_name"]
        return ProfileCreate(
            slug=unique_slug(name, fallback="creator"),
            title=f"{name} - Creator",
            metadata=metadata,
        )


class BrandProfileKind(ProfileKind):
    account_type = AccountType.product_creator
    table = PRODUCT_CREATORS_TABLE

    def validate(self, submission: ProfileSubmission) -> dict[str, Any]:
        company_name = submission.text("company_name")
        contact_person = submission.text("contact_person")
        description = submission.text("company_description")
        if not company_name or not contact_person or not description:
            raise ValidationError("Company name, contact person, and description are required")

        return {
            "company_name": company_name,
            "contact_person": contact_person,
            "company_description": description,
            "website_url": submission.text("website_url"),
            "industry_category": submission.text("industry_category"),
            "looking_for": parse_json_field(submission, "looking_for", list),
            "budget_range": option(submission.text("budget_range"), BUDGET_RANGE_LABELS),
            "project_type": option(submission.text("project_type"), PROJECT_TYPE_LABELS),
            "phone_number": submission.text("phone_number"),
            "location": submission.text("location"),
            "tags": submission.text("tags"),
        }

    def store_media(
        self,
        submission: ProfileSubmission,
        repo: AccountRepository,
        account_id: str,
        stored: list[str],
    ) -> dict[str, Any]:
        logo = submission.files.get("company_logo")
        return {"company_logo": _store_image(repo, account_id, logo, stored) if logo else None}

    def build_record(
        self, cleaned: dict[str, Any], media: dict[str, Any], account: Account
    ) -> ProfileCreate:
        metadata = {
            **cleaned,
            **media,
            "email": account.email,
            "account_status": _status(ProfileStatus.pending),
            "account_id": account.id,
        }
        return ProfileCreate(
            slug=unique_slug(cleaned["company_name"], fallback="brand"),
            title=cleaned["company_name"],
            metadata=metadata,
        )


PROFILE_KINDS: dict[str, ProfileKind] = {
    kind.account_type.value: kind for kind in (CreatorProfileKind(), BrandProfileKind())
}


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------

def _load_owner(repo: AccountRepository, account_id: str, kind: ProfileKind) -> Account:
    account = repo.find_account_by_id(account_id)
    if account is None:
        raise NotFoundError("User not found")
    if account.account_type != kind.account_type:
        raise ValidationError("Account type does not match account")
    if account.profile_reference:
        raise ConflictError("Profile already exists for this account")
    return account


def _link_profile(repo: AccountRepository, kind: ProfileKind, account: Account, profile: Profile) -> None:
    """Write the backlink; on failure remove the just-created profile."""
    try:
        repo.update_account(account.id, {"profile_reference": profile.slug})
    except RepositoryError:
        logger.error(
            "profile_backlink_failed",
            extra={"account_id": account.id, "profile_slug": profile.slug},
        )
        try:
            repo.delete_profile(kind.table, profile.id)
        except RepositoryError:
            logger.error(
                "orphan_profile_cleanup_failed",
                extra={"table": kind.table, "profile_id": profile.id},
            )
        raise


def _discard_media(repo: AccountRepository, paths: list[str]) -> None:
    if not paths:
        return
    try:
        repo.delete_media(paths)
    except RepositoryError:
        logger.error("orphan_media_cleanup_failed", extra={"paths": paths})


def provision_profile(submission: ProfileSubmission, repo: AccountRepository) -> ProfileCreateResponse:
    account_type = submission.text("accountType")
    account_id = submission.text("userId")
    if not account_type or not account_id:
        raise ValidationError("Missing required fields")

    kind = PROFILE_KINDS.get(account_type)
    if kind is None:
        raise ValidationError("Invalid account type")

    cleaned = kind.validate(submission)

    stored: list[str] = []
    try:
        account = _load_owner(repo, account_id, kind)
        media = kind.store_media(submission, repo, account.id, stored)
        profile = repo.create_profile(kind.table, kind.build_record(cleaned, media, account))
        _link_profile(repo, kind, account, profile)
    except RepositoryError as exc:
        _discard_media(repo, stored)
        raise InternalError("Failed to create profile") from exc

    logger.info(
        "profile_created",
        extra={"account_id": account.id, "table": kind.table, "profile_slug": profile.slug},
    )
    return ProfileCreateResponse(success=True, profile=profile, slug=profile.slug)
