"""Email verification and verification-link resend.

Tokens are single use: a successful verification clears the token, and a
resend overwrites it, so any earlier link stops working.  Tokens also carry an
expiry (``VERIFICATION_TOKEN_TTL_HOURS``) which is checked on use.
"""

from __future__ import annotations

import logging

from app.core.config import settings
from app.core.errors import (
    AlreadyVerifiedError,
    InternalError,
    InvalidTokenError,
    NotFoundError,
    NotificationError,
    RepositoryError,
    ValidationError,
)
from app.core.security import generate_verification_token, is_expired, token_expiry
from app.db.repository import AccountRepository
from app.models.account import MessageResponse
from app.services.email import EmailClient

logger = logging.getLogger(__name__)


def verify_email(token: str | None, repo: AccountRepository) -> MessageResponse:
    if not token:
        raise ValidationError("Verification token is required")

    try:
        account = repo.find_account_by_verification_token(token)
        if account is None or is_expired(account.verification_token_expires_at):
            raise InvalidTokenError("Invalid or expired verification token")
        if account.email_verified:
            raise AlreadyVerifiedError("Email is already verified")

        repo.update_account(
            account.id,
            {
                "email_verified": True,
                "email_verification_token": None,
                "verification_token_expires_at": None,
            },
        )
    except RepositoryError as exc:
        raise InternalError("Failed to verify email. Please try again.") from exc

    logger.info("email_verified", extra={"account_id": account.id})
    return MessageResponse(message="Email verified successfully")


def resend_verification(
    email: str | None, repo: AccountRepository, mailer: EmailClient
) -> MessageResponse:
    if not email:
        raise ValidationError("Email is required")

    try:
        account = repo.find_account_by_email(email)
        if account is None:
            raise NotFoundError("User not found")
        if account.email_verified:
            raise AlreadyVerifiedError("Email is already verified")

        token = generate_verification_token()
        repo.update_account(
            account.id,
            {
                "email_verification_token": token,
                "verification_token_expires_at": token_expiry(
                    settings.VERIFICATION_TOKEN_TTL_HOURS
                ),
            },
        )
        mailer.send_verification_email(account.email, token)
    except (RepositoryError, NotificationError) as exc:
        logger.error(
            "resend_verification_failed",
            extra={"error_message": str(exc)},
        )
        raise InternalError("Failed to send verification email. Please try again.") from exc

    logger.info("verification_email_resent", extra={"account_id": account.id})
    return MessageResponse(message="Verification email sent successfully")
