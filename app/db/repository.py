"""Supabase-backed repository for accounts, profiles, categories and media.

All reads and writes for the workflows go through ``AccountRepository`` so
that SDK failures are normalised into ``RepositoryError`` (or
``DuplicateRecordError`` for unique-constraint violations) in one place.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from supabase import Client

from app.core.config import settings
from app.core.constants import ACCOUNTS_TABLE, CATEGORIES_TABLE
from app.core.errors import DuplicateRecordError, RepositoryError
from app.db.supabase import get_supabase
from app.models.account import Account, AccountCreate
from app.models.profile import Category, Profile, ProfileCreate

logger = logging.getLogger(__name__)

# PostgreSQL unique_violation
_UNIQUE_VIOLATION = "23505"


def _serialize(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert datetimes to ISO strings for the PostgREST payload."""
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in fields.items()
    }


class AccountRepository:
    """Thin wrapper over the Supabase tables used by the workflows."""

    def __init__(self, client: Client, media_bucket: str | None = None) -> None:
        self._client = client
        self._media_bucket = media_bucket or settings.PROFILE_MEDIA_BUCKET

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _execute(self, query: Any, action: str) -> list[dict[str, Any]]:
        try:
            result = query.execute()
        except Exception as exc:
            if getattr(exc, "code", None) == _UNIQUE_VIOLATION:
                raise DuplicateRecordError(f"{action}: duplicate record") from exc
            logger.error(
                "repository_call_failed",
                extra={"action": action, "error_message": str(exc)},
            )
            raise RepositoryError(f"{action} failed") from exc
        return result.data or []

    def _find_account(self, column: str, value: str) -> Account | None:
        rows = self._execute(
            self._client.table(ACCOUNTS_TABLE).select("*").eq(column, value).limit(1),
            f"find_account_by_{column}",
        )
        return Account(**rows[0]) if rows else None

    # -----------------------------------------------------------------------
    # Accounts
    # -----------------------------------------------------------------------

    def find_account_by_id(self, account_id: str) -> Account | None:
        return self._find_account("id", account_id)

    def find_account_by_email(self, email: str) -> Account | None:
        return self._find_account("email", email)

    def find_account_by_verification_token(self, token: str) -> Account | None:
        return self._find_account("email_verification_token", token)

    def find_account_by_reset_token(self, token: str) -> Account | None:
        return self._find_account("password_reset_token", token)

    def create_account(self, payload: AccountCreate) -> Account:
        rows = self._execute(
            self._client.table(ACCOUNTS_TABLE).insert(payload.model_dump(mode="json")),
            "create_account",
        )
        if not rows:
            raise RepositoryError("create_account returned no row")
        return Account(**rows[0])

    def update_account(self, account_id: str, fields: dict[str, Any]) -> Account:
        """Apply a partial update and return the updated record."""
        rows = self._execute(
            self._client.table(ACCOUNTS_TABLE).update(_serialize(fields)).eq("id", account_id),
            "update_account",
        )
        if not rows:
            raise RepositoryError(f"update_account matched no row for {account_id}")
        return Account(**rows[0])

    # -----------------------------------------------------------------------
    # Profiles
    # -----------------------------------------------------------------------

    def create_profile(self, table: str, payload: ProfileCreate) -> Profile:
        rows = self._execute(
            self._client.table(table).insert(payload.model_dump(mode="json")),
            f"create_profile:{table}",
        )
        if not rows:
            raise RepositoryError(f"create_profile:{table} returned no row")
        return Profile(**rows[0])

    def delete_profile(self, table: str, profile_id: str) -> None:
        self._execute(
            self._client.table(table).delete().eq("id", profile_id),
            f"delete_profile:{table}",
        )

    def get_profile_by_slug(self, table: str, slug: str) -> Profile | None:
        rows = self._execute(
            self._client.table(table).select("*").eq("slug", slug).limit(1),
            f"get_profile_by_slug:{table}",
        )
        return Profile(**rows[0]) if rows else None

    def list_profiles(self, table: str) -> list[Profile]:
        rows = self._execute(
            self._client.table(table).select("*").order("created_at", desc=True),
            f"list_profiles:{table}",
        )
        return [Profile(**row) for row in rows]

    def list_categories(self) -> list[Category]:
        rows = self._execute(
            self._client.table(CATEGORIES_TABLE).select("id, slug, title, metadata").order("title"),
            "list_categories",
        )
        return [Category(**row) for row in rows]

    # -----------------------------------------------------------------------
    # Media
    # -----------------------------------------------------------------------

    def upload_media(self, path: str, content: bytes, content_type: str) -> str:
        """Store *content* in the profile media bucket and return its public URL."""
        bucket = self._client.storage.from_(self._media_bucket)
        try:
            bucket.upload(path, content, {"content-type": content_type})
            return bucket.get_public_url(path)
        except Exception as exc:
            logger.error(
                "media_upload_failed",
                extra={"path": path, "error_message": str(exc)},
            )
            raise RepositoryError(f"upload_media failed for {path}") from exc

    def delete_media(self, paths: list[str]) -> None:
        try:
            self._client.storage.from_(self._media_bucket).remove(paths)
        except Exception as exc:
            logger.error(
                "media_delete_failed",
                extra={"paths": paths, "error_message": str(exc)},
            )
            raise RepositoryError("delete_media failed") from exc


def get_repository() -> AccountRepository:
    """FastAPI dependency returning a repository over the shared client."""
    return AccountRepository(get_supabase())
