"""Profile creation endpoint.

``POST /profile/create`` takes multipart form data.  Arrays and objects
arrive as JSON-encoded text fields; images arrive as file uploads and are
read into memory here before the workflow runs.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from app.db.repository import AccountRepository, get_repository
from app.models.profile import MediaUpload, ProfileCreateResponse, ProfileSubmission
from app.services.profiles import provision_profile

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_submission(request: Request) -> ProfileSubmission:
    """Split the multipart form into text fields and non-empty uploads."""
    form = await request.form()
    submission = ProfileSubmission()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            content = await value.read()
            if not value.filename or not content:
                continue
            submission.files[key] = MediaUpload(
                field_name=key,
                filename=value.filename,
                content_type=value.content_type or "application/octet-stream",
                content=content,
            )
        else:
            submission.fields[key] = value
    return submission


@router.post("/create", response_model=ProfileCreateResponse)
async def create_profile(
    submission: ProfileSubmission = Depends(read_submission),
    repo: AccountRepository = Depends(get_repository),
) -> ProfileCreateResponse:
    return provision_profile(submission, repo)
