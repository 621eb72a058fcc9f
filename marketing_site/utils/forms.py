# marketing_site/utils/forms.py

import json
import logging
from typing import Any, Dict

from fastapi import Request

logger = logging.getLogger(__name__)


class RequestBodyTooLarge(Exception):
    pass


async def read_form_body(request: Request) -> Dict[str, Any]:
    """
    Return the submitted fields from a JSON or urlencoded/multipart body.

    Anything that is not an object (invalid JSON, arrays, empty bodies) comes
    back as an empty dict so the validators report the missing fields.
    """
    limit = request.app.state.settings.MAX_BODY_BYTES
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise RequestBodyTooLarge()

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if len(raw) > limit:
        raise RequestBodyTooLarge()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.info(f"Ignoring unparseable body on {request.url.path}")
        return {}
    return data if isinstance(data, dict) else {}
