# marketing_site/routers/contact.py

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from marketing_site.core.security import client_ip, contact_rate_limit, limiter
from marketing_site.database.database import get_db
from marketing_site.schemas.contact import (
    ContactMessageCreate,
    ContactSubmission,
    GdprRequestCreate,
    GdprSubmission,
    SubmissionResponse,
    ValidationErrorResponse,
)
from marketing_site.services.store import insert_contact_message, insert_gdpr_request
from marketing_site.utils.email_service import NotificationError, Notifier, get_notifier
from marketing_site.utils.forms import read_form_body
from marketing_site.utils.sanitizer import sanitize_plain_text, to_nullable, truncate_plain_text
from marketing_site.utils.validators import MAX_MESSAGE_LENGTH, resolve_consent, validate_contact, validate_gdpr

logger = logging.getLogger(__name__)

router = APIRouter()

VALIDATION_FAILED = "Validation failed."


def _validation_failed(errors: Dict[str, str]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": VALIDATION_FAILED, "errors": errors})


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": message})


def _clean_message(message: str) -> str:
    return truncate_plain_text(sanitize_plain_text(message), MAX_MESSAGE_LENGTH)


@router.post(
    "",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ValidationErrorResponse}},
)
@limiter.limit(contact_rate_limit)
async def submit_contact(
    request: Request,
    body: Dict[str, Any] = Depends(read_form_body),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        submission = ContactSubmission.model_validate(body)

        if submission.honeypot and submission.honeypot.strip():
            # Bots get the same answer as people; nothing is stored or sent.
            logger.info(f"Honeypot filled, dropping contact submission from {client_ip(request)}")
            return {"message": "Message sent."}

        errors = validate_contact(submission)
        if errors:
            return _validation_failed(errors)

        payload = ContactMessageCreate(
            full_name=sanitize_plain_text(submission.full_name),
            company=to_nullable(submission.company),
            email=submission.email.strip().lower(),
            phone=to_nullable(submission.phone),
            message=_clean_message(submission.message),
            consent=resolve_consent(submission.consent),
            ip_address=client_ip(request) or None,
        )

        record_id = await run_in_threadpool(insert_contact_message, db, payload)
    except Exception:
        logger.exception("Error handling contact form submission")
        return _server_error("The server could not process the request.")

    try:
        await notifier.notify_contact(payload, record_id)
    except NotificationError as e:
        logger.error(f"Contact message #{record_id} stored but not emailed: {str(e)}")
        return JSONResponse(
            status_code=503,
            content={"message": "The message could not be forwarded to the company email. Please try again shortly."},
        )
    except Exception:
        logger.exception(f"Unexpected error notifying contact message #{record_id}")
        return _server_error("The server could not process the request.")

    return {"message": "Message sent successfully. Thank you!", "id": record_id}


@router.post("/gdpr-request", response_model=SubmissionResponse, responses={400: {"model": ValidationErrorResponse}})
async def submit_gdpr_request(
    request: Request,
    body: Dict[str, Any] = Depends(read_form_body),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        submission = GdprSubmission.model_validate(body)

        errors = validate_gdpr(submission)
        if errors:
            return _validation_failed(errors)

        payload = GdprRequestCreate(
            full_name=sanitize_plain_text(submission.full_name),
            email=submission.email.strip().lower(),
            request_type=submission.request_type,
            message=_clean_message(submission.message),
            ip_address=client_ip(request) or None,
        )

        record_id = await run_in_threadpool(insert_gdpr_request, db, payload)
    except Exception:
        logger.exception("Error handling GDPR request")
        return _server_error("The server could not process the GDPR request.")

    # The request is already recorded; the email is only a convenience.
    try:
        await notifier.notify_gdpr(payload, record_id)
    except Exception as e:
        logger.error(f"GDPR request #{record_id} stored but not emailed: {str(e)}")

    return {"message": "The request has been recorded.", "id": record_id}
