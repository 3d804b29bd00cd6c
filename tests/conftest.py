"""Shared test fixtures.

Provides a ``test_client`` for FastAPI wired to an in-memory repository and a
mock email client, plus a mock Supabase client for repository-level tests.
"""

import os

# Settings are read at import time; provide the required values first.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

from collections.abc import Generator  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.constants import CONTENT_CREATORS_TABLE, PRODUCT_CREATORS_TABLE  # noqa: E402
from app.core.errors import DuplicateRecordError, RepositoryError  # noqa: E402
from app.models.account import Account, AccountCreate  # noqa: E402
from app.models.profile import Category, Profile, ProfileCreate  # noqa: E402
from app.services.email import EmailClient  # noqa: E402


class FakeRepository:
    """In-memory stand-in for ``AccountRepository``.

    Add an operation name to ``fail_on`` to make that call raise
    ``RepositoryError``.
    """

    def __init__(self) -> None:
        self.accounts: dict[str, dict[str, Any]] = {}
        self.profiles: dict[str, dict[str, dict[str, Any]]] = {
            CONTENT_CREATORS_TABLE: {},
            PRODUCT_CREATORS_TABLE: {},
        }
        self.categories: list[Category] = []
        self.media: dict[str, bytes] = {}
        self.fail_on: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RepositoryError(f"{operation} failed")

    def _find(self, column: str, value: str) -> Account | None:
        for row in self.accounts.values():
            if row.get(column) == value:
                return Account(**row)
        return None

    # Accounts
    def find_account_by_id(self, account_id: str) -> Account | None:
        self._check("find_account_by_id")
        return self._find("id", account_id)

    def find_account_by_email(self, email: str) -> Account | None:
        self._check("find_account_by_email")
        return self._find("email", email)

    def find_account_by_verification_token(self, token: str) -> Account | None:
        self._check("find_account_by_verification_token")
        return self._find("email_verification_token", token)

    def find_account_by_reset_token(self, token: str) -> Account | None:
        self._check("find_account_by_reset_token")
        return self._find("password_reset_token", token)

    def create_account(self, payload: AccountCreate) -> Account:
        self._check("create_account")
        if self._find("email", payload.email) is not None:
            raise DuplicateRecordError("create_account: duplicate record")
        row = payload.model_dump()
        row["id"] = str(uuid4())
        row["created_at"] = datetime.now(timezone.utc)
        self.accounts[row["id"]] = row
        return Account(**row)

    def update_account(self, account_id: str, fields: dict[str, Any]) -> Account:
        self._check("update_account")
        row = self.accounts[account_id]
        row.update(fields)
        return Account(**row)

    # Profiles
    def create_profile(self, table: str, payload: ProfileCreate) -> Profile:
        self._check("create_profile")
        row = payload.model_dump()
        row["id"] = str(uuid4())
        self.profiles[table][row["id"]] = row
        return Profile(**row)

    def delete_profile(self, table: str, profile_id: str) -> None:
        self._check("delete_profile")
        self.profiles[table].pop(profile_id, None)

    def get_profile_by_slug(self, table: str, slug: str) -> Profile | None:
        self._check("get_profile_by_slug")
        for row in self.profiles[table].values():
            if row["slug"] == slug:
                return Profile(**row)
        return None

    def list_profiles(self, table: str) -> list[Profile]:
        self._check("list_profiles")
        return [Profile(**row) for row in self.profiles[table].values()]

    def list_categories(self) -> list[Category]:
        self._check("list_categories")
        return list(self.categories)

    def upload_media(self, path: str, content: bytes, content_type: str) -> str:
        self._check("upload_media")
        self.media[path] = content
        return f"https://cdn.test/{path}"

    def delete_media(self, paths: list[str]) -> None:
        self._check("delete_media")
        for path in paths:
            self.media.pop(path, None)


@pytest.fixture()
def fake_repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture()
def mock_mailer() -> MagicMock:
    """Mock ``EmailClient``; inspect calls to read the tokens that were sent."""
    return MagicMock(spec=EmailClient)


@pytest.fixture()
def test_client(
    fake_repo: FakeRepository, mock_mailer: MagicMock
) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient wired to the fakes."""
    from app.db.repository import get_repository
    from app.main import app
    from app.services.email import get_email_client

    app.dependency_overrides[get_repository] = lambda: fake_repo
    app.dependency_overrides[get_email_client] = lambda: mock_mailer
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client at module level in the health router."""
    mock_client = MagicMock()
    # Mock the select -> limit -> execute chain
    mock_table = MagicMock()
    mock_select = MagicMock()
    mock_limit = MagicMock()

    mock_client.table.return_value = mock_table
    mock_table.select.return_value = mock_select
    mock_select.limit.return_value = mock_limit
    mock_limit.execute.return_value = MagicMock()  # non-None result

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()
