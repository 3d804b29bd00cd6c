"""Forgot-password and reset-password flows.

The request step answers with the same message whether or not the email is
registered.  Reset tokens expire after ``PASSWORD_RESET_TTL_HOURS`` and are
cleared when used.
"""

from __future__ import annotations

import logging

from app.core.config import settings
from app.core.constants import MIN_PASSWORD_LENGTH
from app.core.errors import (
    InternalError,
    InvalidTokenError,
    NotificationError,
    RepositoryError,
    ValidationError,
)
from app.core.security import generate_verification_token, hash_password, is_expired, token_expiry
from app.db.repository import AccountRepository
from app.models.account import MessageResponse, ResetPasswordRequest
from app.services.auth import is_valid_email
from app.services.email import EmailClient

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists for this email, a reset link has been sent"


def request_password_reset(
    email: str | None, repo: AccountRepository, mailer: EmailClient
) -> MessageResponse:
    if not email:
        raise ValidationError("Email is required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")

    try:
        account = repo.find_account_by_email(email)
        if account is None:
            logger.info("password_reset_unknown_email")
            return MessageResponse(message=RESET_REQUESTED_MESSAGE)

        token = generate_verification_token()
        repo.update_account(
            account.id,
            {
                "password_reset_token": token,
                "password_reset_expires_at": token_expiry(settings.PASSWORD_RESET_TTL_HOURS),
            },
        )
        mailer.send_password_reset_email(account.email, token)
    except (RepositoryError, NotificationError) as exc:
        raise InternalError("Failed to send password reset email. Please try again.") from exc

    logger.info("password_reset_requested", extra={"account_id": account.id})
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


def reset_password(payload: ResetPasswordRequest, repo: AccountRepository) -> MessageResponse:
    if not payload.token or not payload.password:
        raise ValidationError("Reset token and new password are required")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        account = repo.find_account_by_reset_token(payload.token)
        if account is None or is_expired(account.password_reset_expires_at):
            raise InvalidTokenError("Invalid or expired reset token")

        repo.update_account(
            account.id,
            {
                "password_hash": hash_password(payload.password),
                "password_reset_token": None,
                "password_reset_expires_at": None,
            },
        )
    except RepositoryError as exc:
        raise InternalError("Failed to reset password. Please try again.") from exc

    logger.info("password_reset_completed", extra={"account_id": account.id})
    return MessageResponse(message="Password updated successfully")
