"""Pydantic models for the ``user_accounts`` table and the auth endpoints.

Request models accept missing fields so that the workflows can report which
rule was broken with their own messages.  JSON bodies use the camelCase keys
the web client sends (``accountType``, ``profileReference``).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import AccountType


class AccountCreate(BaseModel):
    """Payload for inserting a new account."""
    slug: str
    title: str
    name: str
    email: str
    password_hash: str
    account_type: AccountType
    email_verified: bool = False
    email_verification_token: str | None = None
    verification_token_expires_at: datetime | None = None
    profile_reference: str | None = None


class Account(BaseModel):
    """Full account record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str | None = None
    title: str | None = None
    name: str | None = None
    email: str
    password_hash: str
    account_type: AccountType
    email_verified: bool = False
    email_verification_token: str | None = None
    verification_token_expires_at: datetime | None = None
    password_reset_token: str | None = None
    password_reset_expires_at: datetime | None = None
    profile_reference: str | None = None
    created_at: datetime | None = None


class AuthUser(BaseModel):
    """Account summary returned to clients and embedded in the identity assertion."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    account_type: AccountType = Field(alias="accountType")
    profile_reference: str = Field(default="", alias="profileReference")

    @classmethod
    def from_account(cls, account: Account) -> "AuthUser":
        return cls(
            id=account.id,
            email=account.email,
            account_type=account.account_type,
            profile_reference=account.profile_reference or "",
        )

    def claims(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, mode="json")


class Session(BaseModel):
    """Identity resolved from a bearer token for the current request."""
    user: AuthUser
    token: str
    expires_at: datetime


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None
    account_type: str | None = Field(default=None, alias="accountType")


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class VerifyEmailRequest(BaseModel):
    token: str | None = None


class EmailRequest(BaseModel):
    """Body of the resend-verification and forgot-password endpoints."""
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    token: str | None = None
    password: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class AuthResponse(BaseModel):
    user: AuthUser
    token: str


class MeResponse(BaseModel):
    user: AuthUser
    expires_at: datetime = Field(serialization_alias="expiresAt")


class MessageResponse(BaseModel):
    message: str
