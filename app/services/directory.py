"""Read-only access to categories and public profiles."""

from __future__ import annotations

from app.core.constants import CONTENT_CREATORS_TABLE, PRODUCT_CREATORS_TABLE
from app.core.errors import InternalError, NotFoundError, RepositoryError
from app.db.repository import AccountRepository
from app.models.profile import Category, Profile


def list_categories(repo: AccountRepository) -> list[Category]:
    try:
        return repo.list_categories()
    except RepositoryError as exc:
        raise InternalError("Failed to fetch categories") from exc


def list_content_creators(repo: AccountRepository) -> list[Profile]:
    try:
        return repo.list_profiles(CONTENT_CREATORS_TABLE)
    except RepositoryError as exc:
        raise InternalError("Failed to fetch content creators") from exc


def list_product_creators(repo: AccountRepository) -> list[Profile]:
    try:
        return repo.list_profiles(PRODUCT_CREATORS_TABLE)
    except RepositoryError as exc:
        raise InternalError("Failed to fetch product creators") from exc


def get_content_creator(slug: str, repo: AccountRepository) -> Profile:
    try:
        profile = repo.get_profile_by_slug(CONTENT_CREATORS_TABLE, slug)
    except RepositoryError as exc:
        raise InternalError("Failed to fetch content creator") from exc
    if profile is None:
        raise NotFoundError("Creator not found")
    return profile


def get_product_creator(slug: str, repo: AccountRepository) -> Profile:
    try:
        profile = repo.get_profile_by_slug(PRODUCT_CREATORS_TABLE, slug)
    except RepositoryError as exc:
        raise InternalError("Failed to fetch product creator") from exc
    if profile is None:
        raise NotFoundError("Brand not found")
    return profile
