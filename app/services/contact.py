"""Brand-to-creator contact by email.

The creator receives the message with ``reply_to`` set to the sender, so the
conversation continues outside the platform.
"""

from __future__ import annotations

import logging

from app.core.errors import InternalError, NotFoundError, NotificationError, ValidationError
from app.db.repository import AccountRepository
from app.models.contact import ContactRequest, ContactResponse
from app.services.auth import is_valid_email
from app.services.directory import get_content_creator
from app.services.email import EmailClient

logger = logging.getLogger(__name__)


def contact_creator(
    payload: ContactRequest, repo: AccountRepository, mailer: EmailClient
) -> ContactResponse:
    if not (
        payload.creator_id
        and payload.subject
        and payload.message
        and payload.company_name
        and payload.email
    ):
        raise ValidationError("Missing required fields")
    if not is_valid_email(payload.email):
        raise ValidationError("Invalid email format")

    creator = get_content_creator(payload.creator_id, repo)
    creator_email = creator.metadata.get("email") or ""
    if not creator_email:
        raise NotFoundError("Creator has no contact email")

    try:
        mailer.send_contact_email(
            to=creator_email,
            reply_to=payload.email,
            company_name=payload.company_name,
            subject=payload.subject,
            message=payload.message,
        )
    except NotificationError as exc:
        raise InternalError("Failed to send message") from exc

    logger.info("creator_contacted", extra={"creator_slug": creator.slug})
    return ContactResponse(success=True)
