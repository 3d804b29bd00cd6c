"""Contact endpoint: a brand sends a partnership message to a creator."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.db.repository import AccountRepository, get_repository
from app.models.contact import ContactRequest, ContactResponse
from app.services.contact import contact_creator
from app.services.email import EmailClient, get_email_client

router = APIRouter()


@router.post("/contact", response_model=ContactResponse)
def contact(
    body: ContactRequest,
    repo: AccountRepository = Depends(get_repository),
    mailer: EmailClient = Depends(get_email_client),
) -> ContactResponse:
    return contact_creator(body, repo, mailer)
