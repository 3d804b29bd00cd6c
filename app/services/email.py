"""Transactional email via the Resend API.

``EmailClient`` renders the verification, password-reset and contact
templates and hands them to ``resend.Emails.send``.  Each send is retried
with exponential backoff; when every attempt fails a ``NotificationError`` is
raised and the calling workflow decides whether that is fatal.
"""

from __future__ import annotations

import html
import logging
import time
from typing import Any

import resend

from app.core.config import settings
from app.core.errors import NotificationError

logger = logging.getLogger(__name__)

_BRAND = "Creator Connect"


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

def _action_email(heading: str, intro: str, button: str, colour: str, url: str, footer: str) -> str:
    return f"""
    <div style="max-width: 600px; margin: 0 auto; padding: 20px; font-family: Arial, sans-serif;">
      <div style="text-align: center; margin-bottom: 30px;">
        <h1 style="color: #2563eb; margin-bottom: 10px;">{_BRAND}</h1>
        <h2 style="color: #374151; margin: 0;">{heading}</h2>
      </div>
      <div style="background-color: #f8fafc; padding: 30px; border-radius: 8px; margin-bottom: 30px;">
        <p style="color: #374151; line-height: 1.6; margin-bottom: 20px;">{intro}</p>
        <div style="text-align: center; margin: 30px 0;">
          <a href="{url}" style="background-color: {colour}; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; font-weight: 600; display: inline-block;">{button}</a>
        </div>
        <p style="color: #6b7280; font-size: 14px; line-height: 1.5;">
          If the button doesn't work, copy and paste this link into your browser:<br>
          <a href="{url}" style="color: #2563eb; word-break: break-all;">{url}</a>
        </p>
      </div>
      <div style="text-align: center; color: #6b7280; font-size: 14px;">{footer}</div>
    </div>
    """


def render_verification_email(url: str, ttl_hours: int) -> str:
    return _action_email(
        heading="Verify your email address",
        intro=(
            f"Thank you for signing up for {_BRAND}! To complete your registration and "
            "start connecting with creators and brands, please verify your email "
            "address by clicking the button below."
        ),
        button="Verify Email Address",
        colour="#2563eb",
        url=url,
        footer=(
            f"<p>This link will expire in {ttl_hours} hours for security reasons.</p>"
            "<p>If you didn't create an account, please ignore this email.</p>"
        ),
    )


def render_password_reset_email(url: str, ttl_hours: int) -> str:
    unit = "hour" if ttl_hours == 1 else "hours"
    return _action_email(
        heading="Reset your password",
        intro=(
            "We received a request to reset your password. Click the button below "
            f"to create a new password for your {_BRAND} account."
        ),
        button="Reset Password",
        colour="#dc2626",
        url=url,
        footer=(
            f"<p>This link will expire in {ttl_hours} {unit} for security reasons.</p>"
            "<p>If you didn't request a password reset, please ignore this email.</p>"
        ),
    )


def render_contact_email(company_name: str, sender_email: str, subject: str, message: str) -> str:
    """Render a brand's message; every user-supplied value is HTML-escaped."""
    company = html.escape(company_name)
    sender = html.escape(sender_email)
    body = html.escape(message).replace("\n", "<br>")
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #2563eb;">New Partnership Opportunity</h2>
      <div style="background: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3 style="margin-top: 0; color: #1e293b;">Message Details</h3>
        <p><strong>From:</strong> {company}</p>
        <p><strong>Email:</strong> {sender}</p>
        <p><strong>Subject:</strong> {html.escape(subject)}</p>
      </div>
      <div style="margin: 20px 0;">
        <h4 style="color: #1e293b;">Message:</h4>
        <p style="line-height: 1.6; color: #475569;">{body}</p>
      </div>
      <div style="background: #e0f2fe; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <p style="margin: 0; color: #0c4a6e;">
          <strong>How to respond:</strong> Simply reply to this email to start the conversation with {company}.
        </p>
      </div>
      <hr style="margin: 30px 0; border: none; border-top: 1px solid #e2e8f0;">
      <p style="color: #64748b; font-size: 14px;">
        This message was sent through {_BRAND}. If you didn't expect this message, please contact support.
      </p>
    </div>
    """


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class EmailClient:
    """Resend-backed sender with bounded retries.

    Usage::

        client = EmailClient()
        client.send_verification_email("user@example.com", token)
    """

    def __init__(
        self,
        api_key: str | None = None,
        from_address: str | None = None,
        app_url: str | None = None,
        max_attempts: int | None = None,
        backoff_seconds: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.from_address = from_address or settings.EMAIL_FROM_ADDRESS
        self.app_url = (app_url or settings.APP_URL).rstrip("/")
        self.max_attempts = max(1, max_attempts or settings.EMAIL_MAX_ATTEMPTS)
        self.backoff_seconds = (
            settings.EMAIL_RETRY_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds
        )

    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_address)

    def _send(self, params: dict[str, Any]) -> str | None:
        """Send *params* through Resend, retrying transient failures.

        Returns the provider message id.
        """
        if not self.is_configured():
            raise NotificationError("Email client not configured; RESEND_API_KEY is empty")

        resend.api_key = self.api_key
        payload = {"from": self.from_address, **params}
        last_error: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = resend.Emails.send(payload)
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "email_send_attempt_failed",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self.max_attempts,
                        "subject": params.get("subject"),
                        "error_message": str(exc),
                    },
                )
                if attempt < self.max_attempts:
                    time.sleep(self.backoff_seconds * (2 ** (attempt - 1)))
                continue

            message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
            logger.info(
                "email_sent",
                extra={"subject": params.get("subject"), "message_id": message_id},
            )
            return message_id

        raise NotificationError(
            f"Email delivery failed after {self.max_attempts} attempts: {last_error}"
        ) from last_error

    def verification_url(self, token: str) -> str:
        return f"{self.app_url}/auth/verify-email?token={token}"

    def reset_url(self, token: str) -> str:
        return f"{self.app_url}/auth/reset-password?token={token}"

    def send_verification_email(self, email: str, token: str) -> str | None:
        return self._send(
            {
                "to": [email],
                "subject": "Verify your email address",
                "html": render_verification_email(
                    self.verification_url(token), settings.VERIFICATION_TOKEN_TTL_HOURS
                ),
            }
        )

    def send_password_reset_email(self, email: str, token: str) -> str | None:
        return self._send(
            {
                "to": [email],
                "subject": "Reset your password",
                "html": render_password_reset_email(
                    self.reset_url(token), settings.PASSWORD_RESET_TTL_HOURS
                ),
            }
        )

    def send_contact_email(
        self,
        to: str,
        reply_to: str,
        company_name: str,
        subject: str,
        message: str,
    ) -> str | None:
        return self._send(
            {
                "to": [to],
                "reply_to": [reply_to],
                "subject": f"New Partnership Opportunity: {subject}",
                "html": render_contact_email(company_name, reply_to, subject, message),
            }
        )


def get_email_client() -> EmailClient:
    """FastAPI dependency returning an ``EmailClient`` built from settings."""
    return EmailClient()
