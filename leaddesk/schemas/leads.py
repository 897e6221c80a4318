"""
Inbound lead payloads from the website forms.
Fields are declared up front; validation of required fields happens in the intake service
so the error messages stay stable ("missing fields", "invalid email").
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("name", "email", "service", "message")


class LeadSubmission(BaseModel):
    """Quote request form submission."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
    )

    name: Optional[str] = ""
    email: Optional[str] = ""
    phone: Optional[str] = ""
    service: Optional[str] = ""
    message: Optional[str] = ""
    source: Optional[str] = None
    page_url: Optional[str] = Field(None, alias="pageUrl")

    @field_validator("name", "email", "phone", "service", "message", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        # Forms send null for untouched inputs
        return "" if v is None else v

    def missing_fields(self) -> list[str]:
        return [field for field in REQUIRED_FIELDS if not getattr(self, field)]
