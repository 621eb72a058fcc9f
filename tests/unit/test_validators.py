"""
Unit tests for form validation (marketing_site/utils/validators.py).
"""

import pytest

from marketing_site.schemas.contact import ContactSubmission, GdprSubmission
from marketing_site.utils.validators import (
    is_valid_email,
    resolve_consent,
    validate_contact,
    validate_gdpr,
)

VALID_CONTACT = {
    "fullName": "Jane Doe",
    "email": "jane@example.com",
    "message": "Hello",
    "consent": "on",
}

VALID_GDPR = {
    "fullName": "Jane Doe",
    "email": "jane@example.com",
    "requestType": "export",
    "message": "Please send me my data.",
}


def contact(**overrides):
    return ContactSubmission.model_validate({**VALID_CONTACT, **overrides})


def gdpr(**overrides):
    return GdprSubmission.model_validate({**VALID_GDPR, **overrides})


# ---------------------------------------------------------------------------
# resolve_consent
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value", [True, "on", "true", "1"])
def test_truthy_consent_encodings(value):
    assert resolve_consent(value) is True


@pytest.mark.parametrize("value", [False, None, "", "yes", "TRUE", "On", "0", "false", 1, 1.0, ["on"]])
def test_everything_else_is_not_consent(value):
    assert resolve_consent(value) is False


# ---------------------------------------------------------------------------
# is_valid_email
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value", ["jane@example.com", "  jane@example.com  ", "first.last+tag@sub.example.org"])
def test_valid_emails(value):
    assert is_valid_email(value)


@pytest.mark.parametrize("value", ["", "   ", "jane", "jane@", "@example.com", "jane doe@example.com", "jane@@example.com"])
def test_invalid_emails(value):
    assert not is_valid_email(value)


# ---------------------------------------------------------------------------
# validate_contact
# ---------------------------------------------------------------------------

def test_valid_contact_has_no_errors():
    assert validate_contact(contact()) == {}


def test_boolean_consent_is_accepted():
    assert validate_contact(contact(consent=True)) == {}


def test_empty_contact_reports_every_required_field():
    errors = validate_contact(ContactSubmission.model_validate({}))
    assert set(errors) == {"fullName", "email", "message", "consent"}


def test_blank_name_is_rejected():
    assert set(validate_contact(contact(fullName="   "))) == {"fullName"}


def test_markup_only_name_and_message_are_rejected():
    errors = validate_contact(contact(fullName="<b></b>", message="<p></p>"))
    assert errors == {"fullName": "Full name is required.", "message": "Message is required."}


def test_bad_email_is_rejected():
    assert set(validate_contact(contact(email="not-an-email"))) == {"email"}


def test_blank_message_is_rejected():
    errors = validate_contact(contact(message=" \n "))
    assert errors == {"message": "Message is required."}


def test_message_of_2000_characters_is_accepted():
    assert validate_contact(contact(message="a" * 2000)) == {}


def test_message_of_2001_characters_is_rejected():
    errors = validate_contact(contact(message="a" * 2001))
    assert set(errors) == {"message"}
    assert "2000" in errors["message"]


def test_length_is_checked_before_sanitizing():
    # Tags would be stripped later, but the raw text is what counts.
    errors = validate_contact(contact(message="<b>" + "a" * 1998 + "</b>"))
    assert set(errors) == {"message"}


@pytest.mark.parametrize("value", ["yes", "off", False, None])
def test_missing_consent_is_rejected(value):
    assert set(validate_contact(contact(consent=value))) == {"consent"}


def test_non_text_values_are_coerced_not_crashing():
    errors = validate_contact(contact(fullName=123, message=456))
    assert errors == {}


# ---------------------------------------------------------------------------
# validate_gdpr
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("request_type", ["export", "rectification", "erasure", "restriction"])
def test_every_request_type_is_accepted(request_type):
    assert validate_gdpr(gdpr(requestType=request_type)) == {}


@pytest.mark.parametrize("request_type", ["unknown", "", "Export", "delete"])
def test_unknown_request_type_is_rejected(request_type):
    errors = validate_gdpr(gdpr(requestType=request_type))
    assert set(errors) == {"requestType"}


def test_empty_gdpr_request_reports_every_field():
    errors = validate_gdpr(GdprSubmission.model_validate({}))
    assert set(errors) == {"fullName", "email", "requestType", "message"}


def test_gdpr_message_limit():
    assert validate_gdpr(gdpr(message="a" * 2000)) == {}
    assert set(validate_gdpr(gdpr(message="a" * 2001))) == {"message"}


def test_gdpr_blank_message_uses_request_wording():
    assert validate_gdpr(gdpr(message="")) == {"message": "Please describe your request."}


def test_gdpr_markup_only_fields_are_rejected():
    errors = validate_gdpr(gdpr(fullName="<i> </i>", message="<script>x</script>"))
    assert set(errors) == {"fullName", "message"}
