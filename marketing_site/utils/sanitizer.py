# marketing_site/utils/sanitizer.py

import re
from typing import Any, Optional

_SCRIPT_OR_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
# An unterminated "<" swallows the rest of the string, like a browser would.
_TAG = re.compile(r"<[^>]*>?")
# ASCII control characters, keeping \n and \r.
_LOW_CHARS = re.compile(r"[\x00-\x09\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_plain_text(value: Any = "") -> str:
    """
    Reduce arbitrary input to plain text that is safe to store and display.

    Non-string values are coerced with ``str()`` (``None`` becomes ``""``).
    Script and style elements are dropped together with their content, every
    other tag is removed, control characters are stripped and any ``>`` left
    over is escaped. The result is trimmed. Never raises.
    """
    if value is None:
        value = ""
    elif not isinstance(value, str):
        value = str(value)

    text = value.strip()
    text = _SCRIPT_OR_STYLE.sub("", text)
    text = _TAG.sub("", text)
    text = _LOW_CHARS.sub("", text)
    text = text.replace(">", "&gt;")
    return text.strip()


def truncate_plain_text(text: str, limit: int) -> str:
    """Cut sanitized text to at most ``limit`` characters without splitting an escaped ``&gt;``."""
    if len(text) <= limit:
        return text
    cut = text[:limit]
    entity_start = cut.rfind("&", max(0, limit - 3))
    if entity_start != -1 and text.startswith("&gt;", entity_start):
        cut = cut[:entity_start]
    return cut.rstrip()


def to_nullable(value: Any) -> Optional[str]:
    """Like sanitize_plain_text, but an empty result comes back as None."""
    cleaned = sanitize_plain_text(value)
    return cleaned if cleaned else None
