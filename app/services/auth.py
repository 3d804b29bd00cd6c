"""Signup, login and session resolution.

Signup: validate -> existence check -> hash -> verification token -> persist
-> verification email (non-fatal) -> identity assertion.

Login: validate -> lookup -> password check -> identity assertion.  Login
does not require a verified email.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from app.core.config import settings
from app.core.constants import EMAIL_PATTERN, MIN_PASSWORD_LENGTH
from app.core.errors import (
    AuthError,
    ConflictError,
    DuplicateRecordError,
    InternalError,
    NotFoundError,
    NotificationError,
    RepositoryError,
    ValidationError,
)
from app.core.security import (
    decode_access_token,
    generate_verification_token,
    hash_password,
    issue_access_token,
    token_expiry,
    verify_password,
)
from app.core.text import unique_slug
from app.db.repository import AccountRepository
from app.models.account import (
    AccountCreate,
    AuthResponse,
    AuthUser,
    LoginRequest,
    Session,
    SignupRequest,
)
from app.models.enums import AccountType
from app.services.email import EmailClient

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(EMAIL_PATTERN)


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email))


def _issue(user: AuthUser) -> AuthResponse:
    return AuthResponse(user=user, token=issue_access_token(user.claims()))


# ---------------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------------

def validate_signup(payload: SignupRequest) -> AccountType:
    """Check the signup form and return the parsed account type."""
    if not (payload.name and payload.email and payload.password and payload.account_type):
        raise ValidationError("Missing required fields")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    try:
        account_type = AccountType(payload.account_type)
    except ValueError:
        raise ValidationError("Invalid account type") from None
    if not is_valid_email(payload.email):
        raise ValidationError("Invalid email format")
    return account_type


def signup(payload: SignupRequest, repo: AccountRepository, mailer: EmailClient) -> AuthResponse:
    account_type = validate_signup(payload)
    email = payload.email or ""

    try:
        existing = repo.find_account_by_email(email)
    except RepositoryError as exc:
        raise InternalError("Failed to create account. Please try again.") from exc
    if existing is not None:
        raise ConflictError("An account with this email already exists")

    try:
        verification_token = generate_verification_token()
        account = repo.create_account(
            AccountCreate(
                slug=unique_slug(email.split("@")[0], fallback="account"),
                title=f"{email} Account",
                name=(payload.name or "").strip(),
                email=email,
                password_hash=hash_password(payload.password or ""),
                account_type=account_type,
                email_verified=False,
                email_verification_token=verification_token,
                verification_token_expires_at=token_expiry(settings.VERIFICATION_TOKEN_TTL_HOURS),
            )
        )
    except DuplicateRecordError:
        raise ConflictError("An account with this email already exists") from None
    except Exception as exc:
        logger.error(
            "account_create_failed",
            extra={"error_message": str(exc)},
            exc_info=not isinstance(exc, RepositoryError),
        )
        raise InternalError("Failed to create account. Please try again.") from exc

    try:
        mailer.send_verification_email(email, verification_token)
    except NotificationError as exc:
        # Signup still succeeds; the user can request a new link later.
        logger.error(
            "signup_verification_email_failed",
            extra={"account_id": account.id, "error_message": str(exc)},
        )

    logger.info(
        "account_created",
        extra={"account_id": account.id, "account_type": account_type.value},
    )
    return _issue(AuthUser.from_account(account))


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

def login(payload: LoginRequest, repo: AccountRepository) -> AuthResponse:
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")
    if not is_valid_email(payload.email):
        raise ValidationError("Invalid email format")

    try:
        account = repo.find_account_by_email(payload.email)
    except RepositoryError as exc:
        raise InternalError("Login failed. Please try again.") from exc

    if account is None:
        raise NotFoundError("No account found with this email address")
    if not verify_password(payload.password, account.password_hash):
        logger.info("login_rejected", extra={"account_id": account.id})
        raise AuthError("Incorrect password")

    return _issue(AuthUser.from_account(account))


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

def resolve_session(token: str | None) -> Session:
    """Turn a bearer identity assertion into a ``Session``."""
    if not token:
        raise AuthError("Authentication required")
    claims = decode_access_token(token)
    if claims is None:
        raise AuthError("Invalid or expired session")
    try:
        user = AuthUser.model_validate(claims)
    except ValueError:
        raise AuthError("Invalid or expired session") from None
    expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
    return Session(user=user, token=token, expires_at=expires_at)
