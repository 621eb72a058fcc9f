import asyncio
import contextlib
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from marketing_site.core.config import Settings, get_settings
from marketing_site.core.logging_config import configure_logging
from marketing_site.core.security import (
    OriginGuardMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    security_headers_middleware,
)
from marketing_site.database.database import create_all_tables, create_db_engine, create_session_factory
from marketing_site.routers import contact, pages
from marketing_site.services.store import purge_expired_entries
from marketing_site.utils.email_service import Notifier
from marketing_site.utils.forms import RequestBodyTooLarge

logger = logging.getLogger("marketing_site.main")


async def _purge_periodically(app: FastAPI, interval_hours: int):
    settings: Settings = app.state.settings
    while True:
        await asyncio.sleep(interval_hours * 3600)
        try:
            await run_in_threadpool(
                purge_expired_entries,
                app.state.session_factory,
                settings.RETENTION_DAYS,
                settings.GDPR_REQUEST_RETENTION_DAYS,
            )
        except Exception:
            # One bad cycle must not end the schedule.
            logger.exception("Periodic retention purge failed")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Contact and GDPR request API for the company website.",
        version=settings.VERSION,
    )
    app.state.settings = settings
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.exception_handler(RequestBodyTooLarge)
    async def body_too_large_handler(request: Request, exc: RequestBodyTooLarge):
        return JSONResponse(status_code=413, content={"message": "The request body is too large."})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "The server could not process the request."})

    @app.on_event("startup")
    async def startup_event():
        """
        Open the database, drop rows past their retention window and check
        the mail channel. Neither the purge nor the SMTP check can stop startup.
        """
        engine = create_db_engine(settings.DATABASE_URL)
        create_all_tables(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)

        purge_expired_entries(
            app.state.session_factory,
            settings.RETENTION_DAYS,
            settings.GDPR_REQUEST_RETENTION_DAYS,
        )
        app.state.purge_task = None
        if settings.PURGE_INTERVAL_HOURS > 0:
            app.state.purge_task = asyncio.create_task(_purge_periodically(app, settings.PURGE_INTERVAL_HOURS))

        app.state.notifier = Notifier(settings)
        if settings.SMTP_VERIFY_ON_STARTUP:
            await app.state.notifier.verify()

        logger.info(f"Server running on http://localhost:{settings.PORT}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down server...")
        purge_task = app.state.purge_task
        if purge_task is not None:
            purge_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await purge_task
        app.state.engine.dispose()

    # Adding CORS middleware for cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(OriginGuardMiddleware(settings.allowed_origins))
    app.middleware("http")(security_headers_middleware)

    app.include_router(contact.router, prefix="/api/contact", tags=["Contact"])
    app.include_router(pages.router, tags=["Pages"])

    # Mount static assets (css, js, images)
    app.mount("/assets", StaticFiles(directory=settings.STATIC_DIR / "assets", check_dir=False), name="assets")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=get_settings().PORT)
