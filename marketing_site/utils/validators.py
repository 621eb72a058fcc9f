# marketing_site/utils/validators.py

from typing import Any, Dict

from email_validator import EmailNotValidError, validate_email

from marketing_site.models.gdpr_requests import GdprRequestType
from marketing_site.schemas.contact import ContactSubmission, GdprSubmission
from marketing_site.utils.sanitizer import sanitize_plain_text

MAX_MESSAGE_LENGTH = 2000
CONSENT_TOKENS = {"on", "true", "1"}
GDPR_REQUEST_TYPES = {request_type.value for request_type in GdprRequestType}


def resolve_consent(value: Any) -> bool:
    """Booleans pass through; of the strings only "on", "true" and "1" count as consent."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value in CONSENT_TOKENS


def is_valid_email(value: str) -> bool:
    if not value or not value.strip():
        return False
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _has_text(value: str) -> bool:
    # Markup-only input such as "<p></p>" sanitizes to nothing.
    return bool(sanitize_plain_text(value))


def _message_error(message: str, missing_text: str) -> str | None:
    # Length is checked on the raw text, before sanitizing.
    if not _has_text(message):
        return missing_text
    if len(message) > MAX_MESSAGE_LENGTH:
        return f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters."
    return None


def validate_contact(submission: ContactSubmission) -> Dict[str, str]:
    """Return field name -> error text; an empty dict means the submission is valid."""
    errors: Dict[str, str] = {}

    if not _has_text(submission.full_name):
        errors["fullName"] = "Full name is required."

    if not is_valid_email(submission.email):
        errors["email"] = "Please enter a valid email address."

    message_error = _message_error(submission.message, "Message is required.")
    if message_error:
        errors["message"] = message_error

    if not resolve_consent(submission.consent):
        errors["consent"] = "We need your consent to process your data."

    return errors


def validate_gdpr(submission: GdprSubmission) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not _has_text(submission.full_name):
        errors["fullName"] = "Full name is required."

    if not is_valid_email(submission.email):
        errors["email"] = "The email address is not valid."

    if submission.request_type not in GDPR_REQUEST_TYPES:
        errors["requestType"] = "The request type is not supported."

    message_error = _message_error(submission.message, "Please describe your request.")
    if message_error:
        errors["message"] = message_error

    return errors
