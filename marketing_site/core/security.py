# marketing_site/core/security.py

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from marketing_site.core.config import get_settings

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many messages sent. Please try again shortly."
ORIGIN_REJECTED_MESSAGE = "Request origin is not allowed."

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self'",
        "style-src 'self'",
        "img-src 'self' data: https://images.unsplash.com https://plus.unsplash.com",
        "font-src 'self' data:",
        "connect-src 'self'",
        "frame-src 'self' https://www.google.com https://maps.gstatic.com",
        "object-src 'none'",
        "form-action 'self'",
        "base-uri 'self'",
        "upgrade-insecure-requests",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return getattr(getattr(request, "client", None), "host", None) or ""


def contact_rate_limit() -> str:
    return f"{get_settings().RATE_LIMIT_MAX}/hour"


# Hits are counted over the trailing hour, not in fixed hourly buckets.
limiter = Limiter(key_func=client_ip, strategy="moving-window")


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit reached for {client_ip(request)} on {request.url.path}")
    return JSONResponse(status_code=429, content={"message": RATE_LIMITED_MESSAGE})


def origin_allowed(origin: str | None, allowed_origins: list[str]) -> bool:
    # Desktop apps and file:// pages send no origin or the literal "null".
    if not origin or origin == "null":
        return True
    return not allowed_origins or origin in allowed_origins


class OriginGuardMiddleware:
    """Rejects cross-origin callers that are not on the allow-list."""

    def __init__(self, allowed_origins: list[str]):
        self.allowed_origins = allowed_origins

    async def __call__(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if not origin_allowed(origin, self.allowed_origins):
            logger.warning(f"Rejected request from origin {origin}")
            return JSONResponse(status_code=403, content={"message": ORIGIN_REJECTED_MESSAGE})
        return await call_next(request)


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response
