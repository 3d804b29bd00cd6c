"""Account endpoints: signup, login, email verification, password reset.

Handlers stay thin; workflow failures are ``AppError`` subclasses rendered
by the application-level exception handler.  Routes that send email are plain
``def`` so the retry backoff runs in the threadpool, off the event loop.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.db.repository import AccountRepository, get_repository
from app.models.account import (
    AuthResponse,
    EmailRequest,
    LoginRequest,
    MeResponse,
    MessageResponse,
    ResetPasswordRequest,
    Session,
    SignupRequest,
    VerifyEmailRequest,
)
from app.services import auth as auth_service
from app.services.email import EmailClient, get_email_client
from app.services.password_reset import request_password_reset, reset_password
from app.services.verification import resend_verification, verify_email

logger = logging.getLogger(__name__)

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Session:
    """Resolve the bearer identity assertion into a per-request session."""
    return auth_service.resolve_session(credentials.credentials if credentials else None)


@router.post("/signup", response_model=AuthResponse)
def signup(
    body: SignupRequest,
    repo: AccountRepository = Depends(get_repository),
    mailer: EmailClient = Depends(get_email_client),
) -> AuthResponse:
    return auth_service.signup(body, repo, mailer)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    repo: AccountRepository = Depends(get_repository),
) -> AuthResponse:
    return auth_service.login(body, repo)


@router.get("/me", response_model=MeResponse)
async def me(session: Session = Depends(get_current_session)) -> MeResponse:
    return MeResponse(user=session.user, expires_at=session.expires_at)


@router.post("/verify-email", response_model=MessageResponse)
async def verify(
    body: VerifyEmailRequest,
    repo: AccountRepository = Depends(get_repository),
) -> MessageResponse:
    return verify_email(body.token, repo)


@router.post("/send-verification", response_model=MessageResponse)
def send_verification(
    body: EmailRequest,
    repo: AccountRepository = Depends(get_repository),
    mailer: EmailClient = Depends(get_email_client),
) -> MessageResponse:
    return resend_verification(body.email, repo, mailer)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: EmailRequest,
    repo: AccountRepository = Depends(get_repository),
    mailer: EmailClient = Depends(get_email_client),
) -> MessageResponse:
    return request_password_reset(body.email, repo, mailer)


@router.post("/reset-password", response_model=MessageResponse)
async def complete_password_reset(
    body: ResetPasswordRequest,
    repo: AccountRepository = Depends(get_repository),
) -> MessageResponse:
    return reset_password(body, repo)
