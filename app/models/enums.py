"""Enum types for the enumerated account and profile fields."""

from enum import Enum


class AccountType(str, Enum):
    """Role chosen at signup; selects the profile shape."""
    content_creator = "content-creator"
    product_creator = "product-creator"


class ProfileStatus(str, Enum):
    """Moderation status of a public profile."""
    pending = "pending"
    verified = "verified"
    suspended = "suspended"
