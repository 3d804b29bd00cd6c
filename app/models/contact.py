"""Models for the brand-to-creator contact endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class ContactRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    creator_id: str | None = Field(default=None, alias="creatorId")
    subject: str | None = None
    message: str | None = None
    company_name: str | None = Field(default=None, alias="companyName")
    email: str | None = None


class ContactResponse(BaseModel):
    success: bool = True
