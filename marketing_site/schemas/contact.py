# marketing_site/schemas/contact.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class _Submission(BaseModel):
    """Raw form body. Values are kept as sent; sanitizing happens after validation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ContactSubmission(_Submission):
    full_name: str = Field("", alias="fullName")
    company: Optional[str] = None
    email: str = ""
    phone: Optional[str] = None
    message: str = ""
    # bool or one of the accepted string tokens; resolved by the validator
    consent: Any = None
    honeypot: Optional[str] = None

    @field_validator("full_name", "email", "message", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("company", "phone", "honeypot", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return None if value is None else _as_text(value)


class GdprSubmission(_Submission):
    full_name: str = Field("", alias="fullName")
    email: str = ""
    request_type: str = Field("", alias="requestType")
    message: str = ""

    @field_validator("full_name", "email", "request_type", "message", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> str:
        return _as_text(value)


class ContactMessageCreate(BaseModel):
    full_name: str
    company: Optional[str] = None
    email: str
    phone: Optional[str] = None
    message: str
    consent: bool
    ip_address: Optional[str] = None


class GdprRequestCreate(BaseModel):
    full_name: str
    email: str
    request_type: str
    message: str
    ip_address: Optional[str] = None


class SubmissionResponse(BaseModel):
    message: str
    id: Optional[int] = None


class ValidationErrorResponse(BaseModel):
    message: str
    errors: dict[str, str]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
